"""Test configuration and fixtures."""
from typing import List

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bookmark_directory.config.settings import (
    AdminSettings,
    APISettings,
    AuthSettings,
    DatabaseSettings,
    EmailSettings,
    RecaptchaSettings,
    Settings,
)
from bookmark_directory.database import get_db
from bookmark_directory.main import create_app
from bookmark_directory.models import Base, Bookmark, Category, User
from bookmark_directory.services.magic_link import MagicLinkService

# In-memory SQLite shared by every session through a single pooled connection
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET_KEY = "test-secret-key"
ADMIN_PASSWORD = "admin-password"


class FakeEmailService:
    """Records outgoing magic links instead of calling Resend."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[dict] = []

    async def _record(self, kind: str, to: str, token: str) -> dict:
        self.sent.append({"kind": kind, "to": to, "token": token})
        if self.fail:
            return {"success": False, "email_id": "", "error": "transport down"}
        return {"success": True, "email_id": f"email-{len(self.sent)}", "error": None}

    async def send_signup_email(self, to: str, token: str) -> dict:
        return await self._record("signup", to, token)

    async def send_signin_email(self, to: str, token: str) -> dict:
        return await self._record("signin", to, token)

    def last_token(self, to: str) -> str:
        for message in reversed(self.sent):
            if message["to"] == to:
                return message["token"]
        raise AssertionError(f"no email sent to {to}")


@pytest.fixture
def test_settings():
    """Settings isolated from the developer's environment."""
    return Settings(
        environment="test",
        debug=False,
        database=DatabaseSettings(url=TEST_DATABASE_URL),
        auth=AuthSettings(secret_key=TEST_SECRET_KEY),
        admin=AdminSettings(password=ADMIN_PASSWORD),
        email=EmailSettings(resend_api_key=None, site_url="https://directory.test"),
        recaptcha=RecaptchaSettings(secret_key=None),
        api=APISettings(rate_limit_enabled=False),
    )


@pytest_asyncio.fixture
async def async_engine():
    """Create async engine for tests."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(session_factory):
    """Session for calling services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def magic_link_service():
    return MagicLinkService()


@pytest.fixture
def email_outbox():
    return FakeEmailService()


@pytest.fixture
def app(test_settings, session_factory, email_outbox):
    """Application wired to the test database and the fake mailer."""
    application = create_app(test_settings)

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.state.email_service = email_outbox

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


@pytest_asyncio.fixture
async def test_user(session_factory):
    """Create a verified user with no pending token."""
    async with session_factory() as session:
        user = User(email="test@example.com", email_verified=True)
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
def login(app, client):
    """Put a session cookie for ``user`` into the client's cookie jar."""
    def _login(user: User) -> str:
        token = app.state.session_manager.mint(user.id, user.email, user.email_verified)
        client.cookies.set("auth-token", token)
        return token

    return _login


@pytest_asyncio.fixture
async def admin_client(client):
    """Client holding a valid admin cookie."""
    response = await client.post("/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest_asyncio.fixture
async def catalog(session_factory):
    """Two categories and three bookmarks, one of them archived."""
    async with session_factory() as session:
        tools = Category(name="Tools", slug="tools")
        reading = Category(name="Reading", slug="reading")
        session.add_all([tools, reading])
        await session.flush()

        bookmarks = [
            Bookmark(url="https://a.example", title="Alpha", slug="alpha", category_id=tools.id),
            Bookmark(
                url="https://b.example", title="Beta", slug="beta",
                category_id=reading.id, is_promoted=True,
            ),
            Bookmark(
                url="https://c.example", title="Gamma", slug="gamma",
                category_id=tools.id, is_archived=True,
            ),
        ]
        session.add_all(bookmarks)
        await session.commit()
        return {
            "categories": {"tools": tools, "reading": reading},
            "bookmarks": {b.slug: b for b in bookmarks},
        }
