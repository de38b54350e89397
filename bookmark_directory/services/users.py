"""Admin user management."""
import uuid
from typing import Any, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..models.favorite import UserFavorite
from ..models.user import User
from ..schemas.admin import AdminUserResponse
from ..schemas.auth import normalize_email


class UserAdminService:
    """User listing and editing for the admin dashboard."""

    def _with_favorite_counts(self):
        favorite_count = (
            select(func.count(UserFavorite.id))
            .where(UserFavorite.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        return select(User, func.coalesce(favorite_count, 0).label("favorite_count"))

    @staticmethod
    def _to_response(row: Any) -> AdminUserResponse:
        user, favorite_count = row
        return AdminUserResponse(
            id=user.id,
            email=user.email,
            email_verified=user.email_verified,
            created_at=user.created_at,
            last_sign_in=user.last_sign_in,
            favorite_count=favorite_count,
        )

    async def list_users(self, db: AsyncSession) -> List[AdminUserResponse]:
        stmt = self._with_favorite_counts().order_by(User.created_at, User.email)
        result = await db.execute(stmt)
        return [self._to_response(row) for row in result.all()]

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[AdminUserResponse]:
        stmt = self._with_favorite_counts().where(User.id == user_id)
        result = await db.execute(stmt)
        row = result.first()
        return self._to_response(row) if row is not None else None

    async def update_email(self, db: AsyncSession, user_id: uuid.UUID, email: str) -> User:
        email = normalize_email(email)
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        result = await db.execute(select(User.id).where(User.email == email))
        owner_id = result.scalar_one_or_none()
        if owner_id is not None and owner_id != user_id:
            raise ConflictError("Email is already taken")

        user.email = email
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError("Email is already taken") from e
        return user


# Global user admin service instance
user_admin_service = UserAdminService()
