"""API middleware for logging, rate limiting, and error handling."""
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.exceptions import BaseAPIException, RateLimitExceeded
from ..core.logging import RequestLogger, SecurityLogger

logger = logging.getLogger(__name__)


def error_body(exc: BaseAPIException) -> dict:
    """JSON body shared by every error response."""
    return {
        "error": exc.message,
        "error_code": exc.error_code,
        "details": exc.details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def error_response(exc: BaseAPIException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate request ID
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        RequestLogger.log_request(
            method=request.method,
            path=str(request.url.path),
            request_id=request_id,
            extra_data={
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent")
            }
        )

        response = await call_next(request)

        response_time_ms = (time.time() - start_time) * 1000
        RequestLogger.log_response(
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            request_id=request_id
        )

        response.headers["X-Request-ID"] = request_id
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns anything the exception handlers did not catch into a JSON 500."""

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except BaseAPIException as e:
            return error_response(e)

        except Exception as e:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "error_code": "INTERNAL_ERROR",
                    "details": {"message": str(e)} if self.debug else {},
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            )


class RateLimitingMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiting middleware."""

    def __init__(
        self,
        app,
        requests_per_window: int = 100,
        window_seconds: int = 60,
        enabled: bool = True
    ):
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds
        self.enabled = enabled
        self.request_times = {}  # client_ip -> list of request times
        self._last_sweep = 0.0

    def _sweep(self, now: float) -> None:
        """Forget clients with no request inside the current window."""
        idle = [
            ip for ip, times in self.request_times.items()
            if not times or now - times[-1] >= self.window_seconds
        ]
        for ip in idle:
            del self.request_times[ip]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        current_time = time.time()

        if current_time - self._last_sweep >= self.window_seconds:
            self._sweep(current_time)

        # Drop requests that fell out of the window
        self.request_times[client_ip] = [
            req_time for req_time in self.request_times.get(client_ip, [])
            if current_time - req_time < self.window_seconds
        ]

        if len(self.request_times[client_ip]) >= self.requests_per_window:
            SecurityLogger.log_rate_limit_exceeded(
                ip_address=client_ip,
                path=str(request.url.path)
            )
            return error_response(RateLimitExceeded())

        self.request_times[client_ip].append(current_time)

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to responses."""

    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return error_response(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors (400), not 422."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid {field}" if field else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={
            "error": message,
            "error_code": "VALIDATION_ERROR",
            "details": {
                "errors": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                    for err in errors
                ]
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": str(exc.detail),
            "error_code": "HTTP_EXCEPTION",
            "details": {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers=getattr(exc, "headers", None),
    )
