"""Bookmark, category and favorite schemas."""
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import BaseSchema


class CategoryCreate(BaseSchema):
    """Category creation schema."""

    name: str = Field(..., min_length=1, description="Display name")
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CategoryResponse(BaseSchema):
    """Category response schema."""

    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class BookmarkCreate(BaseSchema):
    """Bookmark creation schema."""

    url: str = Field(..., min_length=1, description="Target URL")
    title: str = Field(..., min_length=1, description="Display title")
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    tags: Optional[str] = Field(None, description="Comma-separated tags")
    favicon: Optional[str] = None
    og_image: Optional[str] = None
    overview: Optional[str] = None
    is_promoted: bool = False
    is_archived: bool = False


class BookmarkResponse(BaseSchema):
    """Bookmark response schema."""

    id: int
    url: str
    title: str
    slug: str
    description: Optional[str] = None
    tags: Optional[str] = None
    favicon: Optional[str] = None
    og_image: Optional[str] = None
    overview: Optional[str] = None
    is_promoted: bool
    visit_count: int
    favorite_count: int
    is_archived: bool
    created_at: datetime
    category: Optional[CategoryResponse] = None


class FavoriteCreate(BaseSchema):
    """Add-to-favorites request schema."""

    bookmark_id: int = Field(..., ge=1, description="Bookmark to favorite")


class FavoriteResponse(BaseSchema):
    """A favorited bookmark."""

    id: int
    bookmark_id: int
    created_at: datetime
    bookmark: BookmarkResponse


class FavoritesResponse(BaseSchema):
    """The current user's favorites."""

    success: bool = True
    favorites: List[FavoriteResponse] = Field(default_factory=list)


class FavoriteStatusResponse(BaseSchema):
    """Whether one bookmark is in the current user's favorites."""

    success: bool = True
    is_favorited: bool
