"""Tests for magic-link emails."""
from html import escape
from urllib.parse import parse_qs, urlparse

import resend

from bookmark_directory.services.email_service import EmailService
from bookmark_directory.services.email_templates import (
    signin_email,
    signup_email,
    verification_link,
)


def _service(api_key="re_test_key") -> EmailService:
    return EmailService(
        api_key=api_key,
        from_address="Directory <noreply@directory.test>",
        site_url="https://directory.test/",
        site_name="Directory",
    )


def test_verification_link_carries_token_and_email():
    link = verification_link("https://directory.test/", "abc-123", "a+b@x.com")

    parsed = urlparse(link)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://directory.test/verify"
    assert parse_qs(parsed.query) == {"token": ["abc-123"], "email": ["a+b@x.com"]}


def test_templates_embed_link():
    link = verification_link("https://directory.test", "tok", "a@x.com")

    subject, html = signup_email("Directory", link)
    assert subject == "Verify your email address - Directory"
    assert escape(link, quote=True) in html

    subject, html = signin_email("Directory", link)
    assert subject == "Sign in to Directory"
    assert escape(link, quote=True) in html


async def test_send_without_api_key_reports_failure(monkeypatch):
    def unexpected(params):
        raise AssertionError("Resend must not be called without a key")

    monkeypatch.setattr(resend.Emails, "send", unexpected)

    result = await _service(api_key=None).send("a@x.com", "Hi", "<p>Hi</p>")

    assert result["success"] is False
    assert "RESEND_API_KEY" in result["error"]


async def test_send_signup_email_through_resend(monkeypatch):
    calls = []

    def fake_send(params):
        calls.append(params)
        return {"id": "email_123"}

    monkeypatch.setattr(resend.Emails, "send", fake_send)

    result = await _service().send_signup_email("a@x.com", "tok-1")

    assert result == {"success": True, "email_id": "email_123", "error": None}
    assert len(calls) == 1
    sent = calls[0]
    assert sent["from"] == "Directory <noreply@directory.test>"
    assert sent["to"] == ["a@x.com"]
    assert sent["subject"] == "Verify your email address - Directory"
    assert "token=tok-1" in sent["html"]


async def test_send_failure_is_reported_not_raised(monkeypatch):
    def broken_send(params):
        raise RuntimeError("resend is down")

    monkeypatch.setattr(resend.Emails, "send", broken_send)

    result = await _service().send_signin_email("a@x.com", "tok-1")

    assert result["success"] is False
    assert result["error"] == "resend is down"
