"""
News service — business logic for the bilingual News aggregate.

Design notes
------------
- Public reads (feed, category page, search) only ever see published news
  (``published_at IS NOT NULL``).  ``get_news`` by id is the exception: it
  returns drafts too so authors can preview them.
- Listing responses share one shape: ``{news, pagination, sort}``, plus
  ``category`` for category pages and ``query`` for search.
- ``create_news`` publishes immediately; there is no draft workflow and no
  way to unpublish.  ``update_news`` never touches ``published_at``.
- Mutations check existence before authorship, so a missing id is always
  ``NotFound`` rather than ``Forbidden``.
- Services flush but never commit; the transaction boundary belongs to the
  ``get_db`` dependency.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from newsportal import errors, query
from newsportal.authorization import ensure_author
from newsportal.cache import cache, make_key
from newsportal.config import settings
from newsportal.localization import localize_category_summary, localize_news
from newsportal.models import Category, News
from newsportal.schemas import Language, NewsCreate, NewsListOptions, NewsUpdate
from newsportal.services import category_service

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _news_to_dict(news: News) -> dict:
    """Serialise a News row with both language variants (write responses)."""
    return {
        "id": news.id,
        "title_ru": news.title_ru,
        "title_tm": news.title_tm,
        "content_ru": news.content_ru,
        "content_tm": news.content_tm,
        "image_url": news.image_url,
        "is_flash": news.is_flash,
        "published_at": news.published_at.isoformat() if news.published_at else None,
        "created_at": news.created_at.isoformat() if news.created_at else None,
        "updated_at": news.updated_at.isoformat() if news.updated_at else None,
        "category_id": news.category_id,
        "author_id": news.author_id,
    }


async def _listing(
    db: AsyncSession,
    predicates: list,
    sort: query.ResolvedSort,
    page: query.PageRequest,
) -> dict:
    rows, total = await query.fetch_page(db, predicates, sort, page)
    return {
        "news": [localize_news(n, sort.lang) for n in rows],
        "pagination": page.meta(total),
        "sort": sort.as_dict(),
    }


async def _require_category(db: AsyncSession, category_id: int) -> None:
    if await db.get(Category, category_id) is None:
        raise errors.ValidationError(f"Category {category_id} does not exist")


async def _load_news(db: AsyncSession, news_id: int) -> News | None:
    result = await db.execute(select(News).where(News.id == news_id))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_news_list(db: AsyncSession, options: NewsListOptions | None = None) -> dict:
    """
    Return one page of published news filtered and sorted per *options*.

    Unknown ``sort_by`` values fall back to ``publishedAt``; the resolved
    field and direction are echoed back under ``sort``.
    """
    options = options or NewsListOptions()
    cache_key = make_key(
        "news", "list", "feed", options.lang.value, options.page, options.limit,
        options.category_id, options.is_flash, options.start_date, options.end_date,
        options.sort_by, options.sort_order,
    )
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    sort = query.resolve_sort(options.sort_by, options.sort_order, options.lang)
    page = query.PageRequest.build(options.page, options.limit)
    data = await _listing(db, query.news_filters(options), sort, page)

    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_LIST)
    return data


async def get_news_by_category_slug(
    db: AsyncSession,
    slug: str,
    page: int = 1,
    limit: int | None = None,
    lang: Language = Language.RU,
) -> dict:
    """
    Return published news of the category identified by *slug*, newest first.

    Raises ``NotFound`` when no category has that slug.
    """
    lang = Language(lang)
    page_request = query.PageRequest.build(page, limit)
    cache_key = make_key("news", "list", "category", slug, lang.value, page_request.page, page_request.limit)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    category = await category_service.find_category_by_slug(db, slug)
    if category is None:
        raise errors.NotFound("Category not found")

    predicates = [query.published_only(), News.category_id == category.id]
    sort = query.resolve_sort(None, "desc", lang)
    data = await _listing(db, predicates, sort, page_request)
    data["category"] = localize_category_summary(category, lang)

    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_LIST)
    return data


async def search_news(
    db: AsyncSession,
    search_query: str,
    page: int = 1,
    limit: int | None = None,
    lang: Language = Language.RU,
) -> dict:
    """
    Case-insensitive substring search over the *lang* title and content of
    published news, newest first.

    Raises ``ValidationError`` for an empty or whitespace-only query.
    """
    term = (search_query or "").strip()
    if not term:
        raise errors.ValidationError("Search query is required")

    lang = Language(lang)
    page_request = query.PageRequest.build(page, limit)
    predicates = [query.published_only(), query.text_search(term, lang)]
    sort = query.resolve_sort(None, "desc", lang)
    data = await _listing(db, predicates, sort, page_request)
    data["query"] = term
    return data


async def get_news(db: AsyncSession, news_id: int, lang: Language = Language.RU) -> dict:
    """
    Return news *news_id* projected into *lang*, published or not.

    Raises ``NotFound`` when it does not exist.
    """
    lang = Language(lang)
    cache_key = make_key("news", "detail", news_id, lang.value)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    q = (
        select(News)
        .where(News.id == news_id)
        .options(joinedload(News.category), joinedload(News.author))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    news = result.unique().scalar_one_or_none()
    if news is None:
        raise errors.NotFound("News not found")

    data = localize_news(news, lang)
    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_news(db: AsyncSession, data: NewsCreate, author_id: int) -> dict:
    """
    Create and immediately publish a news item authored by *author_id*.

    Raises ``ValidationError`` when the category does not exist.
    """
    await _require_category(db, data.category_id)

    news = News(
        title_ru=data.title_ru,
        title_tm=data.title_tm,
        content_ru=data.content_ru,
        content_tm=data.content_tm,
        image_url=data.image_url,
        is_flash=data.is_flash,
        category_id=data.category_id,
        author_id=author_id,
        published_at=datetime.now(timezone.utc),
    )
    db.add(news)
    await db.flush()
    await db.refresh(news)

    await cache.invalidate_news()
    logger.info("User %d created news id=%d in category %d", author_id, news.id, news.category_id)
    return _news_to_dict(news)


async def update_news(db: AsyncSession, news_id: int, data: NewsUpdate, user_id: int) -> dict:
    """
    Merge the fields present in *data* into news *news_id*.

    ``NotFound`` if absent, ``Forbidden`` if *user_id* is not the author.
    ``updated_at`` is always refreshed; ``published_at`` is left alone.
    """
    news = ensure_author(await _load_news(db, news_id), user_id)

    changes = data.model_dump(exclude_unset=True)
    if "category_id" in changes and changes["category_id"] != news.category_id:
        await _require_category(db, changes["category_id"])

    for field, value in changes.items():
        setattr(news, field, value)
    news.updated_at = datetime.now(timezone.utc)

    await db.flush()
    await db.refresh(news)

    await cache.invalidate_news(news_id)
    logger.info("User %d updated news id=%d fields=%s", user_id, news_id, sorted(changes))
    return _news_to_dict(news)


async def delete_news(db: AsyncSession, news_id: int, user_id: int) -> None:
    """Delete news *news_id*; ``NotFound`` then ``Forbidden`` as for updates."""
    news = ensure_author(await _load_news(db, news_id), user_id)

    await db.delete(news)
    await db.flush()

    await cache.invalidate_news(news_id)
    logger.info("User %d deleted news id=%d", user_id, news_id)
