"""Bookmark and category routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ...core.security import require_admin
from ...database import get_db
from ...schemas.bookmark import (
    BookmarkCreate,
    BookmarkResponse,
    CategoryCreate,
    CategoryResponse,
)
from ...services.bookmarks import bookmark_service

router = APIRouter(tags=["Bookmarks"])


@router.get("/bookmarks", response_model=List[BookmarkResponse])
async def list_bookmarks(
    category: Optional[str] = Query(None, description="Category slug"),
    include_archived: bool = Query(False, alias="includeArchived"),
    db: AsyncSession = Depends(get_db)
):
    """List bookmarks, promoted first."""
    return await bookmark_service.list_bookmarks(
        db, category_slug=category, include_archived=include_archived
    )


@router.get("/bookmarks/{slug}", response_model=BookmarkResponse)
async def get_bookmark(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    bookmark = await bookmark_service.get_bookmark_by_slug(db, slug)
    if bookmark is None:
        raise NotFoundError("Bookmark not found")
    return bookmark


@router.post(
    "/bookmarks",
    response_model=BookmarkResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_bookmark(
    bookmark_create: BookmarkCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a bookmark (admin only)."""
    return await bookmark_service.create_bookmark(db, bookmark_create)


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await bookmark_service.list_categories(db)


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_category(
    category_create: CategoryCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a category (admin only)."""
    return await bookmark_service.create_category(db, category_create)
