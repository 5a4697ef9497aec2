from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from newsportal.config import settings


class Language(str, Enum):
    RU = "ru"
    TM = "tm"


SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _reject_null_or_blank(value: str | None) -> str:
    # Only runs for fields the caller actually sent.
    if value is None:
        raise ValueError("may not be null")
    if not value.strip():
        raise ValueError("may not be blank")
    return value


def _blank_to_none(value: str | None) -> str | None:
    if value is not None and not value.strip():
        return None
    return value


# --- User ---

class UserCreate(BaseModel):
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=2, max_length=255)


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


# --- Category ---

class CategoryCreate(BaseModel):
    name_ru: str = Field(min_length=1, max_length=255)
    name_tm: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description_ru: str | None = None
    description_tm: str | None = None

    @field_validator("name_ru", "name_tm")
    @classmethod
    def names_not_blank(cls, value):
        return _reject_null_or_blank(value)

    @field_validator("description_ru", "description_tm")
    @classmethod
    def empty_description_is_null(cls, value):
        return _blank_to_none(value)


class CategoryUpdate(BaseModel):
    """
    Partial update: only the fields present in the payload are applied.

    Sending ``null`` or a blank string for a description clears it; ``null``
    for a name or the slug is rejected because those columns are required.
    """

    name_ru: str | None = Field(None, min_length=1, max_length=255)
    name_tm: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description_ru: str | None = None
    description_tm: str | None = None

    @field_validator("name_ru", "name_tm", "slug")
    @classmethod
    def required_not_null(cls, value):
        return _reject_null_or_blank(value)

    @field_validator("description_ru", "description_tm")
    @classmethod
    def empty_description_is_null(cls, value):
        return _blank_to_none(value)


# --- News ---

class NewsCreate(BaseModel):
    title_ru: str = Field(min_length=1, max_length=500)
    title_tm: str = Field(min_length=1, max_length=500)
    content_ru: str = Field(min_length=1)
    content_tm: str = Field(min_length=1)
    image_url: str | None = Field(None, max_length=500)
    is_flash: bool = False
    category_id: int = Field(gt=0)

    @field_validator("title_ru", "title_tm", "content_ru", "content_tm")
    @classmethod
    def texts_not_blank(cls, value):
        return _reject_null_or_blank(value)

    @field_validator("image_url")
    @classmethod
    def empty_image_is_null(cls, value):
        return _blank_to_none(value)


class NewsUpdate(BaseModel):
    """Partial update for a news item; ``published_at`` is never writable."""

    title_ru: str | None = Field(None, min_length=1, max_length=500)
    title_tm: str | None = Field(None, min_length=1, max_length=500)
    content_ru: str | None = Field(None, min_length=1)
    content_tm: str | None = Field(None, min_length=1)
    image_url: str | None = Field(None, max_length=500)
    is_flash: bool | None = None
    category_id: int | None = Field(None, gt=0)

    @field_validator("title_ru", "title_tm", "content_ru", "content_tm")
    @classmethod
    def texts_not_null(cls, value):
        return _reject_null_or_blank(value)

    @field_validator("image_url")
    @classmethod
    def empty_image_is_null(cls, value):
        return _blank_to_none(value)

    @field_validator("is_flash", "category_id")
    @classmethod
    def flags_not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


# --- Listing options ---

class NewsListOptions(BaseModel):
    """
    Validated option set consumed by ``newsportal.query``.

    ``sort_by`` is deliberately a free string: unknown values fall back to
    ``publishedAt`` in the query composer instead of failing validation.
    ``limit`` is clamped to ``settings.MAX_PAGE_SIZE``.
    """

    page: int = Field(1, ge=1)
    limit: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE, ge=1)
    category_id: int | None = None
    is_flash: bool | None = None
    start_date: str | None = None
    end_date: str | None = None
    sort_by: str = "publishedAt"
    sort_order: Literal["asc", "desc"] = "desc"
    lang: Language = Language.RU

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, value: int) -> int:
        return min(value, settings.MAX_PAGE_SIZE)


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_news: int
    published_news: int
    draft_news: int
    flash_news: int
    total_categories: int
    total_users: int
    cache_info: dict = {}
