"""Authentication schemas."""
import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .common import BaseSchema


def normalize_email(email: str) -> str:
    """Emails are stored and compared stripped and lower-cased."""
    return email.strip().lower()


class EmailRequest(BaseSchema):
    """Signup / signin request schema."""

    email: EmailStr = Field(..., description="Account email address")
    recaptcha_token: Optional[str] = Field(None, description="reCAPTCHA v3 token")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)


class SignupRequest(EmailRequest):
    """Signup request schema."""


class SigninRequest(EmailRequest):
    """Signin request schema."""


class VerifyRequest(BaseSchema):
    """Magic-link verification request schema."""

    token: str = Field(..., min_length=1, description="Verification token from the emailed link")
    email: str = Field(..., min_length=1, description="Email address from the emailed link")


class UserPublic(BaseSchema):
    """The subset of a user exposed to its owner."""

    id: uuid.UUID = Field(..., description="User ID")
    email: str = Field(..., description="User email address")
    email_verified: bool = Field(..., description="Whether the email has been verified")


class AuthUserResponse(BaseSchema):
    """Response carrying the authenticated user."""

    success: bool = Field(True, description="Success status")
    message: Optional[str] = Field(None, description="Status message")
    user: UserPublic = Field(..., description="User information")


class SessionClaims(BaseSchema):
    """Claims embedded in a session credential."""

    user_id: uuid.UUID
    email: str
    email_verified: bool
    issued_at: datetime
    expires_at: datetime


class AdminLoginRequest(BaseSchema):
    """Admin login request schema."""

    password: str = Field(..., min_length=1, description="Admin password")
