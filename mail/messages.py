"""Message builders rendered from Jinja templates."""

from __future__ import annotations

from urllib.parse import urlencode

from flask import current_app, render_template

from .mailer import Message


def verification_link(frontend_url: str, page: str, token: str) -> str:
    """Return the frontend URL the recipient follows to verify the account."""
    return f"{frontend_url.rstrip('/')}/{page}?{urlencode({'token': token})}"


def build_verification_message(recipient: str, full_name: str, link: str) -> Message:
    """Render the account verification email. Requires an application context."""

    app_name = current_app.config.get("APP_NAME", "Cloudcore")
    html = render_template(
        "emails/verify_account.html",
        full_name=full_name,
        verification_link=link,
        app_name=app_name,
    )
    return Message(
        sender=current_app.config.get("EMAIL_USER"),
        recipient=recipient,
        subject=f"Verify Your {app_name} Account",
        html=html,
    )
