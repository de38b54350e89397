"""Bookmark and category models."""
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Category(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Bookmark category."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    color: Mapped[Optional[str]] = mapped_column(String(50))
    icon: Mapped[Optional[str]] = mapped_column(String(100))

    bookmarks: Mapped[List["Bookmark"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(slug={self.slug})>"


class Bookmark(TimestampMixin, Base):
    """A directory entry pointing at an external site."""

    __tablename__ = "bookmarks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    # Organization
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("categories.id"))
    tags: Mapped[Optional[str]] = mapped_column(Text)  # comma-separated

    # Metadata
    favicon: Mapped[Optional[str]] = mapped_column(Text)
    og_image: Mapped[Optional[str]] = mapped_column(Text)
    overview: Mapped[Optional[str]] = mapped_column(Text)

    # Promotion
    is_promoted: Mapped[bool] = mapped_column(default=False, nullable=False)
    promotion_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Counters
    visit_count: Mapped[int] = mapped_column(default=0, nullable=False)
    favorite_count: Mapped[int] = mapped_column(default=0, nullable=False)

    is_archived: Mapped[bool] = mapped_column(default=False, nullable=False)

    category: Mapped[Optional[Category]] = relationship(back_populates="bookmarks", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Bookmark(slug={self.slug}, url={self.url})>"
