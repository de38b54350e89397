"""Database engine and session management."""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import settings
from ..config.settings import DatabaseSettings
from ..models.base import Base

logger = logging.getLogger(__name__)

# Global engine instance
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(database: DatabaseSettings) -> dict:
    options = {"echo": database.echo, "pool_pre_ping": True}
    # SQLite uses a single-file pool without size limits.
    if not database.url.startswith("sqlite"):
        options.update(
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_recycle=3600,  # 1 hour
        )
    return options


def get_engine(database: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """Get or create the database engine."""
    global _engine

    if _engine is None:
        database = database or settings.database
        _engine = create_async_engine(database.url, **_engine_options(database))
        logger.info("Database engine created")

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _session_factory

    if _session_factory is None:
        engine = get_engine()
        _session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Session factory created")

    return _session_factory


async def init_db(database: Optional[DatabaseSettings] = None) -> None:
    """Initialize the database tables."""
    engine = get_engine(database)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")


async def close_db() -> None:
    """Close the database connections."""
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed")
