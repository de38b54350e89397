"""Bookmark and category queries."""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..models.bookmark import Bookmark, Category
from ..schemas.bookmark import BookmarkCreate, CategoryCreate

logger = logging.getLogger(__name__)


class BookmarkService:
    """Read and create directory entries."""

    async def list_bookmarks(
        self,
        db: AsyncSession,
        category_slug: Optional[str] = None,
        include_archived: bool = False,
    ) -> List[Bookmark]:
        """Promoted bookmarks first, then newest first."""
        stmt = select(Bookmark)
        if category_slug:
            stmt = stmt.join(Category, Bookmark.category_id == Category.id).where(
                Category.slug == category_slug
            )
        if not include_archived:
            stmt = stmt.where(Bookmark.is_archived.is_(False))
        stmt = stmt.order_by(
            Bookmark.is_promoted.desc(),
            Bookmark.created_at.desc(),
            Bookmark.id.desc(),
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_bookmark_by_slug(self, db: AsyncSession, slug: str) -> Optional[Bookmark]:
        stmt = select(Bookmark).where(Bookmark.slug == slug)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def create_category(self, db: AsyncSession, category_create: CategoryCreate) -> Category:
        category = Category(**category_create.model_dump())
        db.add(category)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError("Category with this slug already exists") from e
        logger.info("Category created (slug=%s)", category.slug)
        return category

    async def create_bookmark(self, db: AsyncSession, bookmark_create: BookmarkCreate) -> Bookmark:
        if bookmark_create.category_id is not None:
            category = await db.get(Category, bookmark_create.category_id)
            if category is None:
                raise NotFoundError("Category not found")

        bookmark = Bookmark(**bookmark_create.model_dump())
        db.add(bookmark)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError("Bookmark with this URL or slug already exists") from e

        await db.refresh(bookmark, attribute_names=["category"])
        logger.info("Bookmark created (id=%s, slug=%s)", bookmark.id, bookmark.slug)
        return bookmark


# Global bookmark service instance
bookmark_service = BookmarkService()
