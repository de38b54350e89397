"""HTML bodies for magic-link emails."""
from html import escape
from typing import Tuple
from urllib.parse import urlencode


def verification_link(site_url: str, token: str, email: str) -> str:
    """Link to the verify page carrying the token and the address it was sent to."""
    query = urlencode({"token": token, "email": email})
    return f"{site_url.rstrip('/')}/verify?{query}"


def _layout(site_name: str, heading: str, intro: str, button: str, link: str, ignore_note: str) -> str:
    site_name = escape(site_name)
    link = escape(link, quote=True)
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #333;">{heading}</h2>
      <p>Hi there,</p>
      <p>{intro}</p>
      <div style="text-align: center; margin: 30px 0;">
        <a href="{link}"
           style="background-color: #6366f1; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
          {button}
        </a>
      </div>
      <p>Or copy and paste this link into your browser:</p>
      <p style="word-break: break-all; color: #666;">{link}</p>
      <p>This link will expire in 24 hours.</p>
      <p>{ignore_note}</p>
      <hr style="margin: 30px 0; border: none; border-top: 1px solid #eee;">
      <p style="color: #666; font-size: 14px;">
        Best regards,<br>
        The {site_name} team
      </p>
    </div>
    """


def signup_email(site_name: str, link: str) -> Tuple[str, str]:
    """Subject and HTML for the signup verification email."""
    subject = f"Verify your email address - {site_name}"
    html = _layout(
        site_name,
        heading=f"Welcome to {escape(site_name)}!",
        intro="Thanks for signing up! Please verify your email address by clicking the button below:",
        button="Verify Email Address",
        link=link,
        ignore_note="If you didn't create an account, you can safely ignore this email.",
    )
    return subject, html


def signin_email(site_name: str, link: str) -> Tuple[str, str]:
    """Subject and HTML for the signin email."""
    subject = f"Sign in to {site_name}"
    html = _layout(
        site_name,
        heading=f"Sign in to {escape(site_name)}",
        intro=(
            "You requested to sign in to your account. "
            "Click the button below to complete the sign-in process:"
        ),
        button="Sign In",
        link=link,
        ignore_note="If you didn't request to sign in, you can safely ignore this email.",
    )
    return subject, html
