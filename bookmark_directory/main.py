"""Main FastAPI application."""
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import Settings
from .core.auth import SessionManager
from .core.exceptions import BaseAPIException
from .core.logging import configure_logging
from .database import close_db, get_db, init_db
from .api.middleware import (
    RequestLoggingMiddleware,
    ErrorHandlingMiddleware,
    RateLimitingMiddleware,
    SecurityHeadersMiddleware,
    api_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .api.routes import auth, bookmarks, favorites, admin
from .schemas.common import HealthResponse
from .services.email_service import EmailService
from .services.magic_link import MagicLinkService
from .services.recaptcha import RecaptchaVerifier


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Everything that holds configuration (the session signing secret in
    particular) is built here from ``settings`` and hung off ``app.state``.
    """
    settings = settings or Settings()
    # Settings built with model_copy/model_construct skip validation
    settings.check_secret_key()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_logging(settings.monitoring.log_level)
        await init_db(settings.database)
        yield
        # Shutdown
        await close_db()

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.session_manager = SessionManager.from_settings(settings.auth, settings.admin)
    app.state.magic_link_service = MagicLinkService(
        verification_lifetime=timedelta(hours=settings.auth.verification_expire_hours)
    )
    app.state.email_service = EmailService.from_settings(settings.email)
    app.state.recaptcha_verifier = RecaptchaVerifier.from_settings(settings.recaptcha)

    # Exception handlers
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Add middleware
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RateLimitingMiddleware,
        requests_per_window=settings.api.rate_limit_requests,
        window_seconds=settings.api.rate_limit_window,
        enabled=settings.api.rate_limit_enabled,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router)
    app.include_router(bookmarks.router)
    app.include_router(favorites.router)
    app.include_router(admin.router)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": "Bookmark Directory API",
            "version": settings.api.version,
            "status": "healthy"
        }

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    async def health(db: AsyncSession = Depends(get_db)):
        services = {}
        try:
            await db.execute(text("SELECT 1"))
            services["database"] = "healthy"
        except Exception:
            services["database"] = "unhealthy"

        status = "healthy" if all(s == "healthy" for s in services.values()) else "degraded"
        return HealthResponse(status=status, version=settings.api.version, services=services)

    return app


if __name__ == "__main__":
    import uvicorn

    from .config import settings as env_settings

    uvicorn.run(
        "bookmark_directory.main:create_app",
        factory=True,
        host=env_settings.api.host,
        port=env_settings.api.port,
        reload=env_settings.api.reload,
        workers=env_settings.api.workers if not env_settings.api.reload else 1,
    )
