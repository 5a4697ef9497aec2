"""
Query composer — builds filtered / sorted / paginated news queries.

Design notes
------------
- Sorting is restricted to the closed :class:`SortField` enumeration.  Any
  unrecognised ``sort_by`` silently falls back to ``publishedAt`` rather
  than raising; callers rely on that permissiveness.
- Filters are built as SQLAlchemy expressions from typed values; nothing
  the caller sends is ever interpolated into SQL text.
- ``fetch_page`` issues two independent statements: a COUNT under the same
  predicate list and the LIMIT/OFFSET page itself.  They do not share a
  snapshot, so under concurrent writes the total can be marginally stale
  relative to the page.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum

from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from newsportal import errors
from newsportal.config import settings
from newsportal.localization import localized_column, resolve_language
from newsportal.models import News
from newsportal.schemas import Language, NewsListOptions


class SortField(str, Enum):
    PUBLISHED_AT = "publishedAt"
    CREATED_AT = "createdAt"
    TITLE = "title"


DEFAULT_SORT_FIELD = SortField.PUBLISHED_AT

# Every accepted spelling of a sortable field.  Title variants always resolve
# to the title column of the requested language, whatever suffix was sent.
_SORT_ALIASES: dict[str, SortField] = {
    "publishedAt": SortField.PUBLISHED_AT,
    "published_at": SortField.PUBLISHED_AT,
    "createdAt": SortField.CREATED_AT,
    "created_at": SortField.CREATED_AT,
    "title": SortField.TITLE,
    "titleRu": SortField.TITLE,
    "titleTm": SortField.TITLE,
    "title_ru": SortField.TITLE,
    "title_tm": SortField.TITLE,
}

_SORT_COLUMNS = {
    SortField.PUBLISHED_AT: lambda lang: News.published_at,
    SortField.CREATED_AT: lambda lang: News.created_at,
    SortField.TITLE: lambda lang: localized_column(News, "title", lang),
}


@dataclass(frozen=True)
class ResolvedSort:
    field: SortField
    order: str
    lang: Language

    @property
    def label(self) -> str:
        """Name echoed back to the caller (``titleRu`` / ``titleTm`` for titles)."""
        if self.field is SortField.TITLE:
            return f"title{self.lang.value.capitalize()}"
        return self.field.value

    def order_by(self) -> tuple:
        direction = asc if self.order == "asc" else desc
        # news.id breaks ties so paging stays deterministic.
        return direction(_SORT_COLUMNS[self.field](self.lang)), direction(News.id)

    def as_dict(self) -> dict:
        return {"by": self.label, "order": self.order}


def resolve_sort(sort_by: str | None, sort_order: str | None, lang: Language | str) -> ResolvedSort:
    field = _SORT_ALIASES.get(sort_by or "", DEFAULT_SORT_FIELD)
    order = "asc" if (sort_order or "").lower() == "asc" else "desc"
    return ResolvedSort(field=field, order=order, lang=resolve_language(lang))


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @classmethod
    def build(cls, page: int | None = None, limit: int | None = None) -> "PageRequest":
        """
        Validate *page* / *limit*, applying defaults and capping *limit* at
        ``settings.MAX_PAGE_SIZE``.
        """
        page = 1 if page is None else page
        limit = settings.DEFAULT_PAGE_SIZE if limit is None else limit
        if page < 1:
            raise errors.ValidationError("page must be a positive integer")
        if limit < 1:
            raise errors.ValidationError("limit must be a positive integer")
        return cls(page=page, limit=min(limit, settings.MAX_PAGE_SIZE))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "pages": math.ceil(total / self.limit),
        }


# ---------------------------------------------------------------------------
# Predicate builders
# ---------------------------------------------------------------------------

def published_only():
    return News.published_at.is_not(None)


def _parse_bound(value: str, name: str) -> tuple[datetime, bool]:
    """
    Parse an ISO date or datetime string into an aware UTC datetime.

    The second element is True when *value* is a date in any ISO form
    (``2024-03-10`` or ``20240310``), in which case the bound covers that
    whole day.  Naive datetimes are taken as UTC.
    """
    try:
        day = date.fromisoformat(value)
    except ValueError:
        pass
    else:
        return datetime.combine(day, time.min, tzinfo=timezone.utc), True

    try:
        moment = datetime.fromisoformat(value)
    except ValueError as exc:
        raise errors.ValidationError(f"{name} is not a valid ISO date: {value!r}") from exc
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc), False
    return moment.astimezone(timezone.utc), False


def published_between(start_date: str | None, end_date: str | None) -> list:
    """Inclusive ``published_at`` bounds; either side may be omitted."""
    predicates = []
    if start_date:
        start, _ = _parse_bound(start_date, "startDate")
        predicates.append(News.published_at >= start)
    if end_date:
        end, whole_day = _parse_bound(end_date, "endDate")
        if whole_day:
            predicates.append(News.published_at < end + timedelta(days=1))
        else:
            predicates.append(News.published_at <= end)
    return predicates


def text_search(term: str, lang: Language | str):
    """Case-insensitive substring match on the *lang* title OR content."""
    return or_(
        localized_column(News, "title", lang).icontains(term, autoescape=True),
        localized_column(News, "content", lang).icontains(term, autoescape=True),
    )


def news_filters(options: NewsListOptions) -> list:
    """Predicate list for the public news feed described by *options*."""
    predicates = [published_only()]
    if options.category_id is not None:
        predicates.append(News.category_id == options.category_id)
    if options.is_flash is not None:
        predicates.append(News.is_flash.is_(options.is_flash))
    predicates.extend(published_between(options.start_date, options.end_date))
    return predicates


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

async def fetch_page(
    db: AsyncSession,
    predicates: list,
    sort: ResolvedSort,
    page: PageRequest,
) -> tuple[list[News], int]:
    """
    Return ``(rows, total)`` for one page of news matching *predicates*.

    Rows come with ``category`` and ``author`` eager-loaded so they can be
    handed straight to the localization projector.
    """
    count_q = select(func.count()).select_from(News).where(*predicates)
    total: int = (await db.execute(count_q)).scalar_one()

    rows_q = (
        select(News)
        .where(*predicates)
        .options(joinedload(News.category), joinedload(News.author))
        .order_by(*sort.order_by())
        .offset(page.offset)
        .limit(page.limit)
        # Rows already in the session (e.g. just created) get their eager
        # loads refreshed instead of keeping noload placeholders.
        .execution_options(populate_existing=True)
    )
    result = await db.execute(rows_q)
    return list(result.unique().scalars().all()), total
