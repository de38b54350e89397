"""Authentication routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ...config.settings import Settings
from ...core.auth import SessionManager
from ...core.exceptions import EmailDeliveryError, ValidationError
from ...core.security import clear_session_cookie, get_current_user, set_session_cookie
from ...database import get_db
from ...models.user import User
from ...schemas.auth import (
    AuthUserResponse,
    SigninRequest,
    SignupRequest,
    UserPublic,
    VerifyRequest,
)
from ...schemas.common import SuccessResponse
from ...services.email_service import EmailService
from ...services.magic_link import MagicLinkService
from ...services.recaptcha import RecaptchaVerifier
from ..deps import (
    get_email_service,
    get_magic_link_service,
    get_recaptcha_verifier,
    get_session_manager,
    get_settings,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def _check_recaptcha(
    verifier: RecaptchaVerifier,
    token: Optional[str],
    request: Request
) -> None:
    if not verifier.enabled:
        return
    if not token:
        raise ValidationError("Email and reCAPTCHA token are required")
    remote_ip = request.client.host if request.client else None
    if not await verifier.verify(token, remote_ip=remote_ip):
        raise ValidationError("reCAPTCHA verification failed")


@router.post("/signup", response_model=SuccessResponse)
async def signup(
    signup_request: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    magic_link_service: MagicLinkService = Depends(get_magic_link_service),
    email_service: EmailService = Depends(get_email_service),
    recaptcha_verifier: RecaptchaVerifier = Depends(get_recaptcha_verifier),
):
    """Create an account and email its verification link."""
    await _check_recaptcha(recaptcha_verifier, signup_request.recaptcha_token, request)

    # Raises ConflictError for an existing email; commits the new user otherwise
    user, pending = await magic_link_service.register(db, signup_request.email)

    result = await email_service.send_signup_email(user.email, pending.token)
    if not result["success"]:
        raise EmailDeliveryError("Failed to send verification email")

    return SuccessResponse(message="Verification email sent successfully")


@router.post("/signin", response_model=SuccessResponse)
async def signin(
    signin_request: SigninRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    magic_link_service: MagicLinkService = Depends(get_magic_link_service),
    email_service: EmailService = Depends(get_email_service),
    recaptcha_verifier: RecaptchaVerifier = Depends(get_recaptcha_verifier),
):
    """Email a fresh sign-in link to an existing account."""
    await _check_recaptcha(recaptcha_verifier, signin_request.recaptcha_token, request)

    pending = await magic_link_service.issue_token(db, signin_request.email)

    result = await email_service.send_signin_email(signin_request.email, pending.token)
    if not result["success"]:
        raise EmailDeliveryError("Failed to send signin email")

    return SuccessResponse(message="Signin email sent successfully")


@router.post("/verify", response_model=AuthUserResponse)
async def verify(
    verify_request: VerifyRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    magic_link_service: MagicLinkService = Depends(get_magic_link_service),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Consume a magic-link token and start a cookie session."""
    user = await magic_link_service.verify(db, verify_request.token, verify_request.email)

    session_token = session_manager.mint(user.id, user.email, user.email_verified)
    set_session_cookie(response, session_token, settings)

    return AuthUserResponse(
        message="Email verified successfully",
        user=UserPublic.model_validate(user),
    )


@router.get("/me", response_model=AuthUserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return AuthUserResponse(user=UserPublic.model_validate(current_user))


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings),
):
    """Logout user (client-side cookie removal; sessions are not revoked)."""
    clear_session_cookie(response, settings)
    return SuccessResponse(message="Logged out successfully")
