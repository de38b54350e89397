"""Admin dashboard routes."""
import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ...config.settings import Settings
from ...core.auth import SessionManager, check_admin_password
from ...core.exceptions import AuthenticationError, NotFoundError
from ...core.logging import SecurityLogger
from ...core.security import clear_admin_cookie, require_admin, set_admin_cookie
from ...database import get_db
from ...schemas.admin import (
    AdminUserDetailResponse,
    AdminUsersResponse,
    AdminUserUpdate,
)
from ...schemas.auth import AdminLoginRequest
from ...schemas.common import SuccessResponse
from ...services.users import user_admin_service
from ..deps import get_session_manager, get_settings

router = APIRouter(prefix="/admin", tags=["Administration"])


@router.post("/login", response_model=SuccessResponse)
async def admin_login(
    login_request: AdminLoginRequest,
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Exchange the admin password for a short-lived admin cookie."""
    ip_address = request.client.host if request.client else None
    if not check_admin_password(login_request.password, settings.admin.password):
        SecurityLogger.log_admin_login_attempt(
            success=False, ip_address=ip_address, failure_reason="bad_password"
        )
        raise AuthenticationError("Invalid admin password")

    SecurityLogger.log_admin_login_attempt(success=True, ip_address=ip_address)
    set_admin_cookie(response, session_manager.mint_admin(), settings)
    return SuccessResponse(message="Logged in")


@router.post("/logout", response_model=SuccessResponse)
async def admin_logout(
    response: Response,
    settings: Settings = Depends(get_settings),
):
    clear_admin_cookie(response, settings)
    return SuccessResponse(message="Logged out")


@router.get(
    "/users",
    response_model=AdminUsersResponse,
    dependencies=[Depends(require_admin)],
)
async def list_users(db: AsyncSession = Depends(get_db)):
    """All users with their favorite counts."""
    users = await user_admin_service.list_users(db)
    return AdminUsersResponse(users=users)


@router.get(
    "/users/{user_id}",
    response_model=AdminUserDetailResponse,
    dependencies=[Depends(require_admin)],
)
async def get_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    user = await user_admin_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return AdminUserDetailResponse(user=user)


@router.patch(
    "/users/{user_id}",
    response_model=SuccessResponse,
    dependencies=[Depends(require_admin)],
)
async def update_user(
    user_id: uuid.UUID,
    user_update: AdminUserUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Change a user's email address."""
    await user_admin_service.update_email(db, user_id, user_update.email)
    return SuccessResponse(message="User updated successfully")
