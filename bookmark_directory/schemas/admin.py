"""Admin user-management schemas."""
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from .common import BaseSchema


class AdminUserResponse(BaseSchema):
    """User row as shown on the admin dashboard."""

    id: uuid.UUID
    email: str
    email_verified: bool
    created_at: datetime
    last_sign_in: Optional[datetime] = None
    favorite_count: int = 0


class AdminUserDetailResponse(BaseSchema):
    """Single-user admin response."""

    success: bool = True
    user: AdminUserResponse


class AdminUsersResponse(BaseSchema):
    """All users, oldest first."""

    success: bool = True
    users: List[AdminUserResponse] = Field(default_factory=list)


class AdminUserUpdate(BaseSchema):
    """Admin email change."""

    email: EmailStr = Field(..., description="New email address")
