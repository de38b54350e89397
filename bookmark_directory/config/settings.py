"""Application configuration settings."""
from typing import List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    url: str = Field(
        default="sqlite+aiosqlite:///./directory.db",
        validation_alias="DATABASE_URL"
    )
    echo: bool = Field(default=False, validation_alias="DATABASE_ECHO")
    pool_size: int = Field(default=10, validation_alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(default=20, validation_alias="DATABASE_MAX_OVERFLOW")


DEFAULT_SECRET_KEY = "your-secret-key-change-in-production"


class AuthSettings(BaseSettings):
    """Session and magic-link configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        validation_alias="AUTH_SECRET_KEY"
    )
    algorithm: str = Field(default="HS256", validation_alias="AUTH_ALGORITHM")
    session_expire_days: int = Field(default=7, validation_alias="SESSION_EXPIRE_DAYS")
    verification_expire_hours: int = Field(default=24, validation_alias="VERIFICATION_EXPIRE_HOURS")
    session_cookie_name: str = Field(default="auth-token", validation_alias="SESSION_COOKIE_NAME")


class AdminSettings(BaseSettings):
    """Admin dashboard access configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    password: Optional[str] = Field(default=None, validation_alias="ADMIN_PASSWORD")
    session_expire_minutes: int = Field(default=60, validation_alias="ADMIN_SESSION_EXPIRE_MINUTES")
    cookie_name: str = Field(default="admin-token", validation_alias="ADMIN_COOKIE_NAME")


class EmailSettings(BaseSettings):
    """Outbound email configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    resend_api_key: Optional[str] = Field(default=None, validation_alias="RESEND_API_KEY")
    from_address: str = Field(
        default="unusual-directory <noreply@dir.nahar.tv>",
        validation_alias="EMAIL_FROM"
    )
    site_url: str = Field(default="https://dir.nahar.tv", validation_alias="SITE_URL")
    site_name: str = Field(default="unusual-directory", validation_alias="SITE_NAME")


class RecaptchaSettings(BaseSettings):
    """reCAPTCHA v3 configuration. The check is skipped when no secret is set."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    secret_key: Optional[str] = Field(default=None, validation_alias="RECAPTCHA_SECRET_KEY")
    min_score: float = Field(default=0.5, validation_alias="RECAPTCHA_MIN_SCORE")
    verify_url: str = Field(
        default="https://www.google.com/recaptcha/api/siteverify",
        validation_alias="RECAPTCHA_VERIFY_URL"
    )
    timeout: float = Field(default=10.0, validation_alias="RECAPTCHA_TIMEOUT")

    @property
    def enabled(self) -> bool:
        return bool(self.secret_key)


class APISettings(BaseSettings):
    """API configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    title: str = "Bookmark Directory"
    description: str = "Categorized bookmark directory with passwordless email sign-in"
    version: str = "0.1.0"
    host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    port: int = Field(default=8000, validation_alias="API_PORT")
    reload: bool = Field(default=False, validation_alias="API_RELOAD")
    workers: int = Field(default=1, validation_alias="API_WORKERS")

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_requests: int = Field(default=100, validation_alias="RATE_LIMIT_REQUESTS")
    rate_limit_window: int = Field(default=60, validation_alias="RATE_LIMIT_WINDOW")  # seconds

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        validation_alias="CORS_ORIGINS"
    )


class MonitoringSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # Sub-configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    recaptcha: RecaptchaSettings = Field(default_factory=RecaptchaSettings)
    api: APISettings = Field(default_factory=APISettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def check_secret_key(self) -> None:
        """Refuse to sign sessions with the published default key in production."""
        if self.is_production and self.auth.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("AUTH_SECRET_KEY must be set in production")

    @model_validator(mode="after")
    def require_real_secret_in_production(self) -> "Settings":
        self.check_secret_key()
        return self


# Global settings instance
settings = Settings()
