from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newsportal.database import Base


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # passive_deletes leaves the cascade to the database's ON DELETE CASCADE
    news: Mapped[List["News"]] = relationship(
        "News", back_populates="author", lazy="noload", passive_deletes=True
    )


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------
class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name_ru: Mapped[str] = mapped_column(String(255), nullable=False)
    name_tm: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description_ru: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_tm: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # Deleting a category deletes its news (ON DELETE CASCADE on news.category_id).
    news: Mapped[List["News"]] = relationship(
        "News", back_populates="category", lazy="noload", passive_deletes=True
    )


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------
class News(Base):
    __tablename__ = "news"

    __table_args__ = (
        # Public feed: published news, newest first
        Index("ix_news_published_at", "published_at"),
        # Category pages
        Index("ix_news_category_id_published_at", "category_id", "published_at"),
        # Breaking-news strip
        Index("ix_news_is_flash_published_at", "is_flash", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title_ru: Mapped[str] = mapped_column(String(500), nullable=False)
    title_tm: Mapped[str] = mapped_column(String(500), nullable=False)
    content_ru: Mapped[str] = mapped_column(Text, nullable=False)
    content_tm: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_flash: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # NULL means draft; only rows with a value appear in public listings.
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # Foreign keys
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships — lazy="noload"; services use joinedload explicitly
    category: Mapped["Category"] = relationship("Category", back_populates="news", lazy="noload")
    author: Mapped["User"] = relationship("User", back_populates="news", lazy="noload")
