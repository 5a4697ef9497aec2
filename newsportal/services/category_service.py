"""
Category service — CRUD for the bilingual Category aggregate.

Categories have no owner: any authenticated caller may create, edit or
delete them (authentication itself is checked by the router).  Reads are
projected into one language; writes return the full bilingual record.

Deleting a category deletes all of its news through the ``ON DELETE
CASCADE`` on ``news.category_id``.  That data loss is intended.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal import errors
from newsportal.cache import cache, make_key
from newsportal.config import settings
from newsportal.localization import localize_category, localized_column
from newsportal.models import Category
from newsportal.schemas import CategoryCreate, CategoryUpdate, Language

logger = logging.getLogger(__name__)


def _category_to_dict(category: Category) -> dict:
    """Serialise a Category with both language variants."""
    return {
        "id": category.id,
        "name_ru": category.name_ru,
        "name_tm": category.name_tm,
        "slug": category.slug,
        "description_ru": category.description_ru,
        "description_tm": category.description_tm,
        "created_at": category.created_at.isoformat() if category.created_at else None,
        "updated_at": category.updated_at.isoformat() if category.updated_at else None,
    }


async def _flush_unique(db: AsyncSession, slug: str | None) -> None:
    try:
        await db.flush()
    except IntegrityError as exc:
        raise errors.Conflict(f"A category with slug {slug!r} already exists") from exc


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_categories(db: AsyncSession, lang: Language = Language.RU) -> list[dict]:
    """Return every category in *lang*, ordered by its localized name."""
    lang = Language(lang)
    cache_key = make_key("categories", "list", lang.value)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    q = select(Category).order_by(localized_column(Category, "name", lang).asc(), Category.id)
    result = await db.execute(q)
    data = [localize_category(c, lang) for c in result.scalars().all()]

    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_LIST)
    return data


async def find_category_by_slug(db: AsyncSession, slug: str) -> Category | None:
    result = await db.execute(select(Category).where(Category.slug == slug))
    return result.scalar_one_or_none()


async def get_category_by_slug(db: AsyncSession, slug: str, lang: Language = Language.RU) -> dict:
    """Return the category with *slug* projected into *lang*; ``NotFound`` if absent."""
    category = await find_category_by_slug(db, slug)
    if category is None:
        raise errors.NotFound("Category not found")
    return localize_category(category, lang)


async def get_category(db: AsyncSession, category_id: int) -> dict | None:
    """Full bilingual record for *category_id*, or None."""
    category = await db.get(Category, category_id)
    return _category_to_dict(category) if category else None


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_category(db: AsyncSession, data: CategoryCreate) -> dict:
    """Insert a category and return it with both language variants."""
    category = Category(
        name_ru=data.name_ru,
        name_tm=data.name_tm,
        slug=data.slug,
        description_ru=data.description_ru,
        description_tm=data.description_tm,
    )
    db.add(category)
    await _flush_unique(db, data.slug)
    await db.refresh(category)

    await cache.invalidate_categories()
    logger.info("Created category id=%d slug=%s", category.id, category.slug)
    return _category_to_dict(category)


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> dict:
    """
    Merge the fields present in *data* into the category.

    Raises ``NotFound`` when the category does not exist and ``Conflict``
    when the new slug is taken.  ``updated_at`` is refreshed even when the
    payload is empty.
    """
    category = await db.get(Category, category_id)
    if category is None:
        raise errors.NotFound("Category not found")

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(category, field, value)
    category.updated_at = datetime.now(timezone.utc)

    await _flush_unique(db, changes.get("slug"))
    await db.refresh(category)

    await cache.invalidate_categories()
    logger.info("Updated category id=%d fields=%s", category_id, sorted(changes))
    return _category_to_dict(category)


async def delete_category(db: AsyncSession, category_id: int) -> None:
    """Delete the category and, by cascade, all of its news."""
    category = await db.get(Category, category_id)
    if category is None:
        raise errors.NotFound("Category not found")

    await db.delete(category)
    await db.flush()

    await cache.invalidate_categories()
    logger.info("Deleted category id=%d (news cascaded)", category_id)
