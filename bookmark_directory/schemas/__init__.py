"""Pydantic schemas module."""
from .auth import (
    SignupRequest,
    SigninRequest,
    VerifyRequest,
    UserPublic,
    AuthUserResponse,
    SessionClaims,
    AdminLoginRequest,
)
from .bookmark import (
    CategoryCreate,
    CategoryResponse,
    BookmarkCreate,
    BookmarkResponse,
    FavoriteCreate,
    FavoriteResponse,
    FavoritesResponse,
    FavoriteStatusResponse,
)
from .admin import (
    AdminUserResponse,
    AdminUserDetailResponse,
    AdminUsersResponse,
    AdminUserUpdate,
)
from .common import (
    SuccessResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "SignupRequest",
    "SigninRequest",
    "VerifyRequest",
    "UserPublic",
    "AuthUserResponse",
    "SessionClaims",
    "AdminLoginRequest",
    # Bookmarks
    "CategoryCreate",
    "CategoryResponse",
    "BookmarkCreate",
    "BookmarkResponse",
    "FavoriteCreate",
    "FavoriteResponse",
    "FavoritesResponse",
    "FavoriteStatusResponse",
    # Admin
    "AdminUserResponse",
    "AdminUserDetailResponse",
    "AdminUsersResponse",
    "AdminUserUpdate",
    # Common
    "SuccessResponse",
    "HealthResponse",
]
