"""
Localization projector — collapses a bilingual record into one language.

Every bilingual attribute is stored as two physical columns with a ``_ru`` /
``_tm`` suffix (``title_ru`` / ``title_tm``).  The functions here pick one
side for a requested :class:`~newsportal.schemas.Language`.  They do no I/O
and never guess: a language outside ``ru`` / ``tm`` raises ``ValueError``.
"""
from datetime import datetime

from newsportal.models import Category, News
from newsportal.schemas import Language


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def resolve_language(lang: Language | str) -> Language:
    """Return *lang* as a :class:`Language`; raises ``ValueError`` otherwise."""
    return Language(lang)


def localized_column(model, field: str, lang: Language | str):
    """
    Return the physical attribute backing bilingual *field* for *lang*.

    ``localized_column(News, "title", "tm")`` is ``News.title_tm``.  Works on
    mapped classes (column expressions for queries) and on instances.
    """
    return getattr(model, f"{field}_{resolve_language(lang).value}")


def localize_category(category: Category, lang: Language | str) -> dict:
    """Project a Category to ``{id, name, slug, description, ...}`` in *lang*."""
    return {
        "id": category.id,
        "name": localized_column(category, "name", lang),
        "slug": category.slug,
        "description": localized_column(category, "description", lang),
        "created_at": _iso(category.created_at),
        "updated_at": _iso(category.updated_at),
    }


def localize_category_summary(category: Category, lang: Language | str) -> dict:
    return {
        "id": category.id,
        "name": localized_column(category, "name", lang),
        "slug": category.slug,
    }


def localize_news(news: News, lang: Language | str) -> dict:
    """
    Project a News row to a single-language view.

    ``news.category`` and ``news.author`` must be eager-loaded by the caller;
    when they are not, the category/author names are reported as ``None``.
    """
    category = news.category
    author = news.author
    return {
        "id": news.id,
        "title": localized_column(news, "title", lang),
        "content": localized_column(news, "content", lang),
        "image_url": news.image_url,
        "is_flash": news.is_flash,
        "published_at": _iso(news.published_at),
        "created_at": _iso(news.created_at),
        "updated_at": _iso(news.updated_at),
        "category_id": news.category_id,
        "category_name": localized_column(category, "name", lang) if category else None,
        "category_slug": category.slug if category else None,
        "author_id": news.author_id,
        "author_name": author.name if author else None,
    }
