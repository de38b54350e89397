"""User favorites."""
import uuid
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..core.logging import BusinessLogger
from ..models.bookmark import Bookmark
from ..models.favorite import UserFavorite


class FavoriteService:
    """Adds, removes and lists a user's favorited bookmarks.

    ``Bookmark.favorite_count`` is adjusted with in-database arithmetic so
    concurrent favorites do not overwrite each other's increments.
    """

    async def list_favorites(self, db: AsyncSession, user_id: uuid.UUID) -> List[UserFavorite]:
        stmt = (
            select(UserFavorite)
            .where(UserFavorite.user_id == user_id)
            .order_by(UserFavorite.created_at, UserFavorite.id)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def is_favorited(self, db: AsyncSession, user_id: uuid.UUID, bookmark_id: int) -> bool:
        stmt = select(UserFavorite.id).where(
            UserFavorite.user_id == user_id,
            UserFavorite.bookmark_id == bookmark_id,
        ).limit(1)
        result = await db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def add_favorite(self, db: AsyncSession, user_id: uuid.UUID, bookmark_id: int) -> UserFavorite:
        if await db.get(Bookmark, bookmark_id) is None:
            raise NotFoundError("Bookmark not found")
        if await self.is_favorited(db, user_id, bookmark_id):
            raise ConflictError("Bookmark is already in favorites")

        favorite = UserFavorite(user_id=user_id, bookmark_id=bookmark_id)
        db.add(favorite)
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError("Bookmark is already in favorites") from e

        await db.execute(
            update(Bookmark)
            .where(Bookmark.id == bookmark_id)
            .values(favorite_count=Bookmark.favorite_count + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

        BusinessLogger.log_favorite_added(user_id=str(user_id), bookmark_id=bookmark_id)
        return favorite

    async def remove_favorite(self, db: AsyncSession, user_id: uuid.UUID, bookmark_id: int) -> bool:
        """Remove the favorite if present; returns whether a row was deleted."""
        result = await db.execute(
            delete(UserFavorite).where(
                UserFavorite.user_id == user_id,
                UserFavorite.bookmark_id == bookmark_id,
            )
        )
        removed = result.rowcount > 0
        if removed:
            await db.execute(
                update(Bookmark)
                .where(Bookmark.id == bookmark_id, Bookmark.favorite_count > 0)
                .values(favorite_count=Bookmark.favorite_count - 1)
                .execution_options(synchronize_session=False)
            )
        await db.commit()

        if removed:
            BusinessLogger.log_favorite_removed(user_id=str(user_id), bookmark_id=bookmark_id)
        return removed


# Global favorite service instance
favorite_service = FavoriteService()
