"""Signed session credentials.

Sessions are stateless HS256 JWTs kept in an HTTP-only cookie. They carry the
user's id, email and verification flag as of mint time and are never looked
up server-side, so they cannot be revoked before they expire.
"""
import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..config.settings import AdminSettings, AuthSettings
from ..schemas.auth import SessionClaims

SESSION_TOKEN_TYPE = "session"
ADMIN_TOKEN_TYPE = "admin"


class SessionManager:
    """Mints and validates session and admin credentials."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        session_lifetime: timedelta = timedelta(days=7),
        admin_lifetime: timedelta = timedelta(hours=1),
    ):
        if not secret_key:
            raise ValueError("A non-empty secret key is required to sign sessions")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.session_lifetime = session_lifetime
        self.admin_lifetime = admin_lifetime

    @classmethod
    def from_settings(cls, auth: AuthSettings, admin: AdminSettings) -> "SessionManager":
        return cls(
            secret_key=auth.secret_key,
            algorithm=auth.algorithm,
            session_lifetime=timedelta(days=auth.session_expire_days),
            admin_lifetime=timedelta(minutes=admin.session_expire_minutes),
        )

    def _encode(self, data: dict, token_type: str, lifetime: timedelta) -> str:
        issued_at = datetime.now(timezone.utc)
        to_encode = data.copy()
        to_encode.update({
            "iat": issued_at,
            "exp": issued_at + lifetime,
            "type": token_type,
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: str) -> Optional[dict]:
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type:
            return None
        return payload

    def mint(self, user_id: uuid.UUID, email: str, email_verified: bool) -> str:
        """Create a session JWT valid for ``session_lifetime``."""
        return self._encode(
            {
                "sub": str(user_id),
                "email": email,
                "email_verified": bool(email_verified),
            },
            SESSION_TOKEN_TYPE,
            self.session_lifetime,
        )

    def validate(self, token: str) -> Optional[SessionClaims]:
        """Return the embedded claims, or None for any bad, foreign or expired token."""
        payload = self._decode(token, SESSION_TOKEN_TYPE)
        if payload is None:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        try:
            return SessionClaims(
                user_id=uuid.UUID(user_id),
                email=email,
                email_verified=bool(payload.get("email_verified", False)),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            return None

    def mint_admin(self) -> str:
        """Create a short-lived admin dashboard credential."""
        return self._encode({"sub": "admin"}, ADMIN_TOKEN_TYPE, self.admin_lifetime)

    def validate_admin(self, token: str) -> bool:
        return self._decode(token, ADMIN_TOKEN_TYPE) is not None


def check_admin_password(candidate: str, configured: Optional[str]) -> bool:
    """Constant-time comparison; admin access is closed when no password is configured."""
    if not configured or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), configured.encode("utf-8"))
