"""User favorite model."""
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow
from .bookmark import Bookmark


class UserFavorite(Base):
    """Link between a user and a bookmark they starred."""

    __tablename__ = "user_favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "bookmark_id", name="uq_user_favorites_user_bookmark"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    bookmark_id: Mapped[int] = mapped_column(
        ForeignKey("bookmarks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    bookmark: Mapped[Bookmark] = relationship(lazy="selectin")
