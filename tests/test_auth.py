"""Tests for authentication endpoints."""
import uuid
from datetime import timedelta

from sqlalchemy import select, update

from bookmark_directory.models import User
from bookmark_directory.models.base import as_utc, utcnow


async def _stored_user(session_factory, email: str) -> User:
    async with session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


async def test_signup_creates_user_and_sends_link(client, session_factory, email_outbox):
    """Test signup of a new email."""
    response = await client.post("/auth/signup", json={"email": "NewUser@Example.com"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Verification email sent successfully"}

    user = await _stored_user(session_factory, "newuser@example.com")
    assert user is not None
    assert user.email_verified is False
    assert email_outbox.sent == [
        {"kind": "signup", "to": "newuser@example.com", "token": user.verification_token}
    ]


async def test_signup_duplicate_email(client, test_user, email_outbox):
    """Test signup with an email that already has an account."""
    response = await client.post("/auth/signup", json={"email": test_user.email})

    assert response.status_code == 409
    assert "already exists" in response.json()["error"]
    assert email_outbox.sent == []


async def test_signup_requires_valid_email(client):
    for body in ({}, {"email": ""}, {"email": "not-an-email"}, {"email": 42}):
        response = await client.post("/auth/signup", json=body)
        assert response.status_code == 400, body
        assert response.json()["error_code"] == "VALIDATION_ERROR"


async def test_signin_unknown_email(client, session_factory, email_outbox):
    """Signin never creates an account."""
    response = await client.post("/auth/signin", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert await _stored_user(session_factory, "ghost@example.com") is None
    assert email_outbox.sent == []


async def test_signin_replaces_pending_token(client, session_factory, email_outbox):
    await client.post("/auth/signup", json={"email": "a@x.com"})
    first = email_outbox.last_token("a@x.com")

    response = await client.post("/auth/signin", json={"email": "a@x.com"})
    assert response.status_code == 200
    assert response.json()["message"] == "Signin email sent successfully"

    second = email_outbox.last_token("a@x.com")
    assert second != first
    assert email_outbox.sent[-1]["kind"] == "signin"

    stale = await client.post("/auth/verify", json={"token": first, "email": "a@x.com"})
    assert stale.status_code == 400
    assert stale.json()["error_code"] == "INVALID_TOKEN"

    fresh = await client.post("/auth/verify", json={"token": second, "email": "a@x.com"})
    assert fresh.status_code == 200


async def test_verify_sets_session_cookie(client, session_factory, email_outbox):
    await client.post("/auth/signup", json={"email": "a@x.com"})
    token = email_outbox.last_token("a@x.com")

    response = await client.post("/auth/verify", json={"token": token, "email": "a@x.com"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Email verified successfully"
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["emailVerified"] is True

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("auth-token=")
    assert "HttpOnly" in cookie
    assert "Max-Age=604800" in cookie
    assert "Path=/" in cookie
    assert "samesite=lax" in cookie.lower()

    user = await _stored_user(session_factory, "a@x.com")
    assert str(user.id) == body["user"]["id"]
    assert user.verification_token is None
    assert user.verification_expires is None
    assert user.last_sign_in is not None


async def test_verify_token_is_single_use(client, email_outbox):
    await client.post("/auth/signup", json={"email": "a@x.com"})
    token = email_outbox.last_token("a@x.com")

    first = await client.post("/auth/verify", json={"token": token, "email": "a@x.com"})
    second = await client.post("/auth/verify", json={"token": token, "email": "a@x.com"})

    assert first.status_code == 200
    assert second.status_code == 400
    assert "set-cookie" not in second.headers


async def test_verify_rejects_bad_input(client):
    invalid = await client.post("/auth/verify", json={"token": "nope", "email": "a@x.com"})
    assert invalid.status_code == 400
    assert invalid.json()["error_code"] == "INVALID_TOKEN"

    missing = await client.post("/auth/verify", json={"token": "", "email": "a@x.com"})
    assert missing.status_code == 400
    assert missing.json()["error_code"] == "VALIDATION_ERROR"


async def test_verify_expired_token(client, session_factory, email_outbox):
    await client.post("/auth/signup", json={"email": "a@x.com"})
    token = email_outbox.last_token("a@x.com")
    async with session_factory() as session:
        await session.execute(
            update(User)
            .where(User.email == "a@x.com")
            .values(verification_expires=utcnow() - timedelta(seconds=1))
        )
        await session.commit()

    response = await client.post("/auth/verify", json={"token": token, "email": "a@x.com"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "EXPIRED_TOKEN"
    user = await _stored_user(session_factory, "a@x.com")
    assert user.email_verified is False
    assert user.verification_token == token


async def test_me_requires_cookie(client):
    response = await client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["error"] == "No authentication token"


async def test_me_rejects_invalid_cookie(client):
    client.cookies.set("auth-token", "garbage")

    response = await client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid authentication token"


async def test_me_returns_current_user(client, test_user, login):
    login(test_user)

    response = await client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["user"] == {
        "id": str(test_user.id),
        "email": "test@example.com",
        "emailVerified": True,
    }


async def test_me_for_deleted_user(client, login):
    login(User(id=uuid.uuid4(), email="gone@example.com", email_verified=True))

    response = await client.get("/auth/me")

    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


async def test_full_magic_link_flow(client, session_factory, email_outbox):
    """Signup, verify, then sign in again from a fresh link."""
    assert (await client.post("/auth/signup", json={"email": "flow@example.com"})).status_code == 200
    signup_token = email_outbox.last_token("flow@example.com")
    assert (await client.post(
        "/auth/verify", json={"token": signup_token, "email": "flow@example.com"}
    )).status_code == 200

    me = await client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["emailVerified"] is True
    first_sign_in = as_utc((await _stored_user(session_factory, "flow@example.com")).last_sign_in)

    assert (await client.post("/auth/signin", json={"email": "flow@example.com"})).status_code == 200
    signin_token = email_outbox.last_token("flow@example.com")
    assert (await client.post(
        "/auth/verify", json={"token": signin_token, "email": "flow@example.com"}
    )).status_code == 200

    user = await _stored_user(session_factory, "flow@example.com")
    assert as_utc(user.last_sign_in) >= first_sign_in
    assert user.verification_token is None


async def test_logout_clears_cookie(client, test_user, login):
    login(test_user)

    response = await client.post("/auth/logout")

    assert response.status_code == 200
    cookie = response.headers["set-cookie"]
    assert cookie.startswith('auth-token=""')
    assert "Max-Age=0" in cookie


async def test_email_failure_keeps_pending_token(client, session_factory, email_outbox):
    """A failed send is reported, but the issued link still works."""
    email_outbox.fail = True

    response = await client.post("/auth/signup", json={"email": "a@x.com"})

    assert response.status_code == 502
    assert response.json()["error_code"] == "EMAIL_DELIVERY_ERROR"
    user = await _stored_user(session_factory, "a@x.com")
    assert user.verification_token == email_outbox.last_token("a@x.com")

    retry = await client.post("/auth/signup", json={"email": "a@x.com"})
    assert retry.status_code == 409

    verified = await client.post(
        "/auth/verify", json={"token": email_outbox.last_token("a@x.com"), "email": "a@x.com"}
    )
    assert verified.status_code == 200
