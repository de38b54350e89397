"""Logging configuration and utilities."""
import logging
import sys
from typing import Any, Dict

import structlog
from structlog.stdlib import LoggerFactory


def configure_logging(log_level: str = "INFO"):
    """Configure structured logging."""

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Set third-party log levels
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


class RequestLogger:
    """Request logging utility."""

    @staticmethod
    def log_request(
        method: str,
        path: str,
        request_id: str = None,
        extra_data: Dict[str, Any] = None
    ):
        """Log incoming request."""
        logger = structlog.get_logger("api.request")
        logger.info(
            "Request started",
            method=method,
            path=path,
            request_id=request_id,
            **(extra_data or {})
        )

    @staticmethod
    def log_response(
        method: str,
        path: str,
        status_code: int,
        response_time_ms: float,
        request_id: str = None
    ):
        logger = structlog.get_logger("api.response")
        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            response_time_ms=round(response_time_ms, 2),
            request_id=request_id
        )


_auth_events = structlog.get_logger("business.auth")
_email_events = structlog.get_logger("business.email")
_favorite_events = structlog.get_logger("business.favorite")
_security_events = structlog.get_logger("security")


class BusinessLogger:
    """Business event logging utility."""

    @staticmethod
    def log_user_signed_up(user_id: str, email: str):
        _auth_events.info("User signed up", event_type="user_signed_up", user_id=user_id, email=email)

    @staticmethod
    def log_signin_requested(user_id: str, email: str):
        """A fresh signin token was written for an existing user."""
        _auth_events.info(
            "Signin requested", event_type="signin_requested", user_id=user_id, email=email
        )

    @staticmethod
    def log_email_verified(user_id: str, email: str, first_verification: bool):
        _auth_events.info(
            "Email verified",
            event_type="email_verified",
            user_id=user_id,
            email=email,
            first_verification=first_verification,
        )

    @staticmethod
    def log_email_sent(
        to: str,
        subject: str,
        success: bool,
        email_id: str = None,
        error_message: str = None
    ):
        """Log an outbound email attempt; failures are logged at error level."""
        if success:
            _email_events.info("Email sent", event_type="email_sent", to=to, subject=subject, email_id=email_id)
        else:
            _email_events.error(
                "Email delivery failed",
                event_type="email_failed",
                to=to,
                subject=subject,
                error_message=error_message,
            )

    @staticmethod
    def log_favorite_added(user_id: str, bookmark_id: int):
        _favorite_events.info(
            "Favorite added", event_type="favorite_added", user_id=user_id, bookmark_id=bookmark_id
        )

    @staticmethod
    def log_favorite_removed(user_id: str, bookmark_id: int):
        _favorite_events.info(
            "Favorite removed", event_type="favorite_removed", user_id=user_id, bookmark_id=bookmark_id
        )


class SecurityLogger:
    """Security event logging utility.

    Successful attempts go out at info level, everything else at warning so
    that failed verifications and admin logins can be alerted on.
    """

    @staticmethod
    def log_verification_attempt(
        success: bool,
        user_id: str = None,
        email: str = None,
        failure_reason: str = None
    ):
        log = _security_events.info if success else _security_events.warning
        log(
            "Magic link verified" if success else "Magic link rejected",
            event_type="verification_attempt",
            success=success,
            user_id=user_id,
            email=email,
            failure_reason=failure_reason,
        )

    @staticmethod
    def log_admin_login_attempt(success: bool, ip_address: str = None, failure_reason: str = None):
        log = _security_events.info if success else _security_events.warning
        log(
            "Admin logged in" if success else "Admin login refused",
            event_type="admin_login_attempt",
            success=success,
            ip_address=ip_address,
            failure_reason=failure_reason,
        )

    @staticmethod
    def log_unauthorized_access(path: str, method: str, ip_address: str = None, reason: str = None):
        _security_events.warning(
            "Unauthorized access attempt",
            event_type="unauthorized_access",
            path=path,
            method=method,
            ip_address=ip_address,
            reason=reason,
        )

    @staticmethod
    def log_rate_limit_exceeded(ip_address: str, path: str):
        _security_events.warning(
            "Rate limit exceeded", event_type="rate_limit_exceeded", ip_address=ip_address, path=path
        )
