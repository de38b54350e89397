"""Request-scoped database session dependency."""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from .engine import get_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request.

    Services commit the writes that must survive a later failure (token
    issuance before email delivery); anything left pending is committed
    here on success and rolled back when the request raises.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
