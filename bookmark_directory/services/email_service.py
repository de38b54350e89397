"""
Resend email transport for magic-link delivery.

``send`` never raises: delivery problems come back as an unsuccessful result
so callers can decide how to surface them without losing the token they
already committed.
"""

import logging
from typing import Optional

import resend
from starlette.concurrency import run_in_threadpool

from ..config.settings import EmailSettings
from ..core.logging import BusinessLogger
from .email_templates import signin_email, signup_email, verification_link

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending transactional emails through Resend."""

    def __init__(
        self,
        api_key: Optional[str],
        from_address: str,
        site_url: str,
        site_name: str,
    ):
        self.api_key = api_key
        self.from_address = from_address
        self.site_url = site_url
        self.site_name = site_name
        if api_key:
            resend.api_key = api_key
        logger.info("EmailService initialised (from=%s, configured=%s)", from_address, bool(api_key))

    @classmethod
    def from_settings(cls, email: EmailSettings) -> "EmailService":
        return cls(
            api_key=email.resend_api_key,
            from_address=email.from_address,
            site_url=email.site_url,
            site_name=email.site_name,
        )

    async def send(self, to: str, subject: str, html: str) -> dict:
        """Send one message; returns ``{"success", "email_id", "error"}``."""
        if not self.api_key:
            error = "RESEND_API_KEY is not configured"
            BusinessLogger.log_email_sent(to=to, subject=subject, success=False, error_message=error)
            return {"success": False, "email_id": "", "error": error}

        try:
            email = await run_in_threadpool(
                resend.Emails.send,
                {
                    "from": self.from_address,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
            )
        except Exception as e:
            logger.exception("Failed to send email to %s", to)
            BusinessLogger.log_email_sent(to=to, subject=subject, success=False, error_message=str(e))
            return {"success": False, "email_id": "", "error": str(e)}

        email_id = email.get("id", "") if isinstance(email, dict) else str(email)
        BusinessLogger.log_email_sent(to=to, subject=subject, success=True, email_id=email_id)
        return {"success": True, "email_id": email_id, "error": None}

    async def send_signup_email(self, to: str, token: str) -> dict:
        subject, html = signup_email(self.site_name, verification_link(self.site_url, token, to))
        return await self.send(to, subject, html)

    async def send_signin_email(self, to: str, token: str) -> dict:
        subject, html = signin_email(self.site_name, verification_link(self.site_url, token, to))
        return await self.send(to, subject, html)
