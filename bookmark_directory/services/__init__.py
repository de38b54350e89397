"""Services module."""
from .bookmarks import bookmark_service
from .email_service import EmailService
from .favorites import favorite_service
from .magic_link import MagicLinkService, PendingVerification
from .recaptcha import RecaptchaVerifier
from .users import user_admin_service

__all__ = [
    "bookmark_service",
    "EmailService",
    "favorite_service",
    "MagicLinkService",
    "PendingVerification",
    "RecaptchaVerifier",
    "user_admin_service",
]
