"""Database module."""
from .engine import get_engine, init_db, close_db
from .session import get_db

__all__ = [
    "get_engine",
    "init_db",
    "close_db",
    "get_db",
]
