"""Tests for middleware and error handling."""
import httpx
from starlette.requests import Request
from starlette.responses import Response

from bookmark_directory.api import middleware
from bookmark_directory.api.middleware import RateLimitingMiddleware
from bookmark_directory.config.settings import APISettings
from bookmark_directory.main import create_app


async def test_security_headers_and_request_id(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Strict-Transport-Security" not in response.headers
    assert response.headers["X-Request-ID"]


async def test_health_reports_database(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"] == {"database": "healthy"}


async def test_unknown_route_returns_json_error(client):
    response = await client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"


async def test_malformed_json_is_a_client_error(client):
    response = await client.post(
        "/auth/signup", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400


async def test_rate_limit(test_settings):
    settings = test_settings.model_copy(
        update={"api": APISettings(rate_limit_enabled=True, rate_limit_requests=2, rate_limit_window=60)}
    )
    app = create_app(settings)
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        assert (await client.get("/")).status_code == 200
        assert (await client.get("/")).status_code == 200
        limited = await client.get("/")

    assert limited.status_code == 429
    assert limited.json()["error_code"] == "RATE_LIMIT_EXCEEDED"


def _request_from(ip: str) -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": [],
        "client": (ip, 50000),
    })


async def test_rate_limiter_forgets_idle_clients(monkeypatch):
    clock = {"now": 1000.0}
    monkeypatch.setattr(middleware.time, "time", lambda: clock["now"])
    limiter = RateLimitingMiddleware(app=None, requests_per_window=5, window_seconds=60)

    async def call_next(request):
        return Response("ok")

    for n in range(200):
        await limiter.dispatch(_request_from(f"10.0.{n // 256}.{n % 256}"), call_next)
    assert len(limiter.request_times) == 200

    # Once a full window has passed, the next request sweeps every idle client
    clock["now"] += 61
    response = await limiter.dispatch(_request_from("192.0.2.1"), call_next)

    assert response.status_code == 200
    assert list(limiter.request_times) == ["192.0.2.1"]


async def test_rate_limiter_keeps_active_clients(monkeypatch):
    clock = {"now": 1000.0}
    monkeypatch.setattr(middleware.time, "time", lambda: clock["now"])
    limiter = RateLimitingMiddleware(app=None, requests_per_window=2, window_seconds=60)

    async def call_next(request):
        return Response("ok")

    await limiter.dispatch(_request_from("10.0.0.1"), call_next)
    clock["now"] += 59
    await limiter.dispatch(_request_from("10.0.0.1"), call_next)
    clock["now"] += 2
    await limiter.dispatch(_request_from("10.0.0.2"), call_next)

    assert set(limiter.request_times) == {"10.0.0.1", "10.0.0.2"}
    assert (await limiter.dispatch(_request_from("10.0.0.1"), call_next)).status_code == 200
    assert (await limiter.dispatch(_request_from("10.0.0.1"), call_next)).status_code == 429
