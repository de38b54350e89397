"""Database models module."""
from .base import Base
from .user import User
from .bookmark import Bookmark, Category
from .favorite import UserFavorite

__all__ = [
    "Base",
    "User",
    "Bookmark",
    "Category",
    "UserFavorite",
]
