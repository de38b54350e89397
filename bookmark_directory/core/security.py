"""Cookie-based session dependencies."""
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.deps import get_magic_link_service, get_session_manager, get_settings
from ..config.settings import Settings
from ..database import get_db
from ..models.user import User
from ..schemas.auth import SessionClaims
from ..services.magic_link import MagicLinkService
from .auth import SessionManager
from .exceptions import AuthenticationError, NotFoundError
from .logging import SecurityLogger


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Store the session JWT in an HTTP-only cookie scoped to the whole site."""
    response.set_cookie(
        key=settings.auth.session_cookie_name,
        value=token,
        max_age=settings.auth.session_expire_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def set_admin_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.admin.cookie_name,
        value=token,
        max_age=settings.admin.session_expire_minutes * 60,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_admin_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.admin.cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


async def get_current_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    session_manager: SessionManager = Depends(get_session_manager),
) -> SessionClaims:
    """Validate the session cookie; no database round trip."""
    token = request.cookies.get(settings.auth.session_cookie_name)
    if not token:
        raise AuthenticationError("No authentication token")

    claims = session_manager.validate(token)
    if claims is None:
        SecurityLogger.log_unauthorized_access(
            path=str(request.url.path),
            method=request.method,
            ip_address=_client_ip(request),
            reason="invalid_session_token",
        )
        raise AuthenticationError("Invalid authentication token")

    return claims


async def get_current_user(
    claims: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    magic_link_service: MagicLinkService = Depends(get_magic_link_service),
) -> User:
    """Re-fetch the session's user by the email it was minted for."""
    user = await magic_link_service.get_user_by_email(db, claims.email)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def require_admin(
    request: Request,
    settings: Settings = Depends(get_settings),
    session_manager: SessionManager = Depends(get_session_manager),
) -> None:
    """Dependency to require a valid admin cookie."""
    token = request.cookies.get(settings.admin.cookie_name)
    if not token or not session_manager.validate_admin(token):
        SecurityLogger.log_unauthorized_access(
            path=str(request.url.path),
            method=request.method,
            ip_address=_client_ip(request),
            reason="missing_or_invalid_admin_token",
        )
        raise AuthenticationError("Admin authentication required")
