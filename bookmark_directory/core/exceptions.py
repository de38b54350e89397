"""Custom exceptions for the application."""


class BaseAPIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = None,
        details: dict = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAPIException):
    """Authentication error."""

    def __init__(self, message: str = "Authentication failed", details: dict = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTHENTICATION_ERROR",
            details=details
        )


class ValidationError(BaseAPIException):
    """Malformed or missing request input."""

    def __init__(self, message: str = "Validation failed", details: dict = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details
        )


class NotFoundError(BaseAPIException):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND_ERROR",
            details=details
        )


class ConflictError(BaseAPIException):
    """Resource conflict error."""

    def __init__(self, message: str = "Resource conflict", details: dict = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT_ERROR",
            details=details
        )


class InvalidTokenError(BaseAPIException):
    """Verification token does not match any pending request."""

    def __init__(self, message: str = "Invalid verification token", details: dict = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_TOKEN",
            details=details
        )


class ExpiredTokenError(BaseAPIException):
    """Verification token matched but is past its expiry."""

    def __init__(self, message: str = "Verification token expired", details: dict = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="EXPIRED_TOKEN",
            details=details
        )


class RateLimitExceeded(BaseAPIException):
    """Rate limit exceeded error."""

    def __init__(self, message: str = "Rate limit exceeded", details: dict = None):
        super().__init__(
            message=message,
            status_code=429,
            error_code="RATE_LIMIT_EXCEEDED",
            details=details
        )


class ExternalServiceError(BaseAPIException):
    """External service error."""

    def __init__(self, message: str = "External service error", details: dict = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="EXTERNAL_SERVICE_ERROR",
            details=details
        )


class EmailDeliveryError(ExternalServiceError):
    """The email transport rejected or failed to send a message."""

    def __init__(self, message: str = "Failed to send email", details: dict = None):
        super().__init__(message=message, details=details)
        self.error_code = "EMAIL_DELIVERY_ERROR"
