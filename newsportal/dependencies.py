from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal import errors
from newsportal.config import settings
from newsportal.database import get_db
from newsportal.schemas import Language, NewsListOptions
from newsportal.security import decode_access_token
from newsportal.services import user_service

bearer_scheme = HTTPBearer(auto_error=False)


class PageParams:
    """
    Reusable dependency for ``page`` / ``limit`` / ``lang`` query parameters.

    ``limit`` is clamped to ``settings.MAX_PAGE_SIZE`` on top of the schema
    bound, so a settings change alone is enough to tighten it.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number (1-based)."),
        limit: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=100,
            description="Items per page (max 100).",
        ),
        lang: Language = Query(Language.RU, description="Response language: 'ru' or 'tm'."),
    ) -> None:
        self.page = page
        self.limit = min(limit, settings.MAX_PAGE_SIZE)
        self.lang = lang


class NewsListParams(PageParams):
    """
    Query parameters of the public news feed.

    Names follow the API's camelCase contract (``categoryId``, ``isFlash``,
    ``startDate``, ...).  ``sortBy`` is not validated here: unknown fields
    fall back to ``publishedAt`` in the query composer.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number (1-based)."),
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100, description="Items per page (max 100)."),
        lang: Language = Query(Language.RU, description="Response language: 'ru' or 'tm'."),
        category_id: int | None = Query(None, alias="categoryId", ge=1),
        is_flash: bool | None = Query(None, alias="isFlash"),
        start_date: str | None = Query(None, alias="startDate", description="ISO date, inclusive."),
        end_date: str | None = Query(None, alias="endDate", description="ISO date, inclusive."),
        sort_by: str = Query("publishedAt", alias="sortBy"),
        sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    ) -> None:
        super().__init__(page=page, limit=limit, lang=lang)
        self.category_id = category_id
        self.is_flash = is_flash
        self.start_date = start_date
        self.end_date = end_date
        self.sort_by = sort_by
        self.sort_order = sort_order

    def to_options(self) -> NewsListOptions:
        return NewsListOptions(
            page=self.page,
            limit=self.limit,
            category_id=self.category_id,
            is_flash=self.is_flash,
            start_date=self.start_date,
            end_date=self.end_date,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            lang=self.lang,
        )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> int:
    """
    Resolve the caller's user id from an ``Authorization: Bearer`` token.

    The token must verify and its user must still exist; anything else is
    ``Unauthenticated`` (401).
    """
    if credentials is None:
        raise errors.Unauthenticated("Bearer token required")
    user_id = decode_access_token(credentials.credentials)
    if await user_service.get_user(db, user_id) is None:
        raise errors.Unauthenticated("User no longer exists")
    return user_id
