"""Accessors for the per-application services built by ``create_app``."""
from fastapi import Request

from ..config.settings import Settings
from ..core.auth import SessionManager
from ..services.email_service import EmailService
from ..services.magic_link import MagicLinkService
from ..services.recaptcha import RecaptchaVerifier


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_magic_link_service(request: Request) -> MagicLinkService:
    return request.app.state.magic_link_service


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_recaptcha_verifier(request: Request) -> RecaptchaVerifier:
    return request.app.state.recaptcha_verifier
