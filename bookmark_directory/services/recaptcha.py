"""reCAPTCHA v3 verification."""
import logging
from typing import Optional

import httpx

from ..config.settings import RecaptchaSettings
from ..core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class RecaptchaVerifier:
    """Checks a client token against Google's siteverify endpoint."""

    def __init__(
        self,
        secret_key: Optional[str],
        min_score: float = 0.5,
        verify_url: str = "https://www.google.com/recaptcha/api/siteverify",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.min_score = min_score
        self.verify_url = verify_url
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, recaptcha: RecaptchaSettings) -> "RecaptchaVerifier":
        return cls(
            secret_key=recaptcha.secret_key,
            min_score=recaptcha.min_score,
            verify_url=recaptcha.verify_url,
            timeout=recaptcha.timeout,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.secret_key)

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        """True when Google reports success with a score at or above ``min_score``."""
        data = {"secret": self.secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.verify_url, data=data)
                response.raise_for_status()
                payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"unexpected siteverify body: {payload!r}")
            success = bool(payload.get("success"))
            score = float(payload.get("score") or 0.0)
        except (httpx.HTTPError, TypeError, ValueError) as e:
            logger.error("reCAPTCHA verification request failed: %s", e)
            raise ExternalServiceError("reCAPTCHA verification unavailable") from e

        if not success or score < self.min_score:
            logger.info(
                "reCAPTCHA rejected (success=%s, score=%.2f, errors=%s)",
                success, score, payload.get("error-codes"),
            )
            return False
        return True
