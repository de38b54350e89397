"""User model."""
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Directory account, identified by a lower-cased email address.

    The pending magic-link request lives on the row itself: at most one
    ``verification_token`` with its ``verification_expires`` at a time.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    email_verified: Mapped[bool] = mapped_column(default=False, nullable=False)
    verification_token: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    verification_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_sign_in: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<User(email={self.email}, email_verified={self.email_verified})>"
