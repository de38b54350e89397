"""Passwordless email-link sign-in.

A user row holds at most one pending ``(verification_token,
verification_expires)`` pair. Signup and signin both write a fresh pair,
overwriting whatever was pending; verification consumes it exactly once.
"""
import uuid
from datetime import datetime, timedelta
from typing import NamedTuple, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import (
    ConflictError,
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
)
from ..core.logging import BusinessLogger, SecurityLogger
from ..models.base import as_utc, utcnow
from ..models.user import User
from ..schemas.auth import normalize_email


class PendingVerification(NamedTuple):
    """A freshly issued one-time token and the instant it stops being valid."""

    token: str
    expires_at: datetime


class MagicLinkService:
    """Issues and consumes one-time verification tokens."""

    def __init__(self, verification_lifetime: timedelta = timedelta(hours=24)):
        self.verification_lifetime = verification_lifetime

    @staticmethod
    def generate_token() -> str:
        """Random version-4 UUID: 122 bits of entropy, no decodable structure."""
        return str(uuid.uuid4())

    def new_pending_verification(self, now: Optional[datetime] = None) -> PendingVerification:
        now = now or utcnow()
        return PendingVerification(
            token=self.generate_token(),
            expires_at=now + self.verification_lifetime,
        )

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """Get user by (normalized) email."""
        stmt = select(User).where(User.email == normalize_email(email))
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_token(self, db: AsyncSession, token: str) -> Optional[User]:
        """Get the user whose pending verification token is exactly ``token``."""
        stmt = select(User).where(User.verification_token == token).limit(1)
        result = await db.execute(stmt)
        return result.scalars().first()

    async def register(
        self,
        db: AsyncSession,
        email: str
    ) -> Tuple[User, PendingVerification]:
        """Create an unverified user with a pending signup token.

        The row is committed before returning so that a later email failure
        cannot roll it back.
        """
        email = normalize_email(email)
        if await self.get_user_by_email(db, email) is not None:
            raise ConflictError("User already exists. Please sign in instead.")

        pending = self.new_pending_verification()
        user = User(
            email=email,
            email_verified=False,
            verification_token=pending.token,
            verification_expires=pending.expires_at,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as e:
            # A concurrent signup won the unique constraint on email.
            await db.rollback()
            raise ConflictError("User already exists. Please sign in instead.") from e

        BusinessLogger.log_user_signed_up(user_id=str(user.id), email=email)
        return user, pending

    async def issue_token(self, db: AsyncSession, email: str) -> PendingVerification:
        """Write a fresh signin token for an existing user, replacing any pending one."""
        user = await self.get_user_by_email(db, email)
        if user is None:
            raise NotFoundError("User not found. Please sign up instead.")

        pending = self.new_pending_verification()
        user.verification_token = pending.token
        user.verification_expires = pending.expires_at
        await db.commit()

        BusinessLogger.log_signin_requested(user_id=str(user.id), email=user.email)
        return pending

    async def consume_token(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        token: str,
        now: datetime
    ) -> bool:
        """Mark the user verified if ``token`` is still the pending one.

        The token match is part of the UPDATE's WHERE clause, so of two
        attempts racing on the same token only one can affect the row.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.verification_token == token)
            .values(
                email_verified=True,
                verification_token=None,
                verification_expires=None,
                last_sign_in=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount == 1

    async def verify(
        self,
        db: AsyncSession,
        token: str,
        email: Optional[str] = None
    ) -> User:
        """Consume a verification token and return the updated user."""
        user = await self.get_user_by_token(db, token)
        if user is None:
            SecurityLogger.log_verification_attempt(
                success=False, email=email, failure_reason="unknown_token"
            )
            raise InvalidTokenError()

        user_id, user_email = user.id, user.email
        if email is not None and normalize_email(email) != user_email:
            SecurityLogger.log_verification_attempt(
                success=False, user_id=str(user_id), email=email, failure_reason="email_mismatch"
            )
            raise InvalidTokenError()

        now = utcnow()
        # Expired tokens stay on the row until the next issue_token overwrites them.
        if user.verification_expires is not None and now >= as_utc(user.verification_expires):
            SecurityLogger.log_verification_attempt(
                success=False, user_id=str(user_id), email=user_email, failure_reason="expired"
            )
            raise ExpiredTokenError()

        first_verification = not user.email_verified
        if not await self.consume_token(db, user_id, token, now):
            await db.rollback()
            SecurityLogger.log_verification_attempt(
                success=False, user_id=str(user_id), email=user_email, failure_reason="already_consumed"
            )
            raise InvalidTokenError()

        await db.commit()
        await db.refresh(user)

        SecurityLogger.log_verification_attempt(success=True, user_id=str(user.id), email=user.email)
        BusinessLogger.log_email_verified(
            user_id=str(user.id), email=user.email, first_verification=first_verification
        )
        return user
