"""User model definition."""

from __future__ import annotations

import re
import secrets
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


MIN_PASSWORD_LENGTH = 8
EMAIL_PATTERN = re.compile(r".+@.+\..+")
TOKEN_BYTES = 32


class ValidationError(ValueError):
    """Raised when a user record fails field validation."""


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.search(email))


def generate_verification_token() -> str:
    """Return 32 random bytes as a 64 character hex string."""
    return secrets.token_hex(TOKEN_BYTES)


def validate_user_fields(
    full_name: str | None, email: str | None, password: str | None
) -> tuple[str, str]:
    """Validate candidate fields and return the normalized (full_name, email)."""

    name = (full_name or "").strip()
    normalized_email = normalize_email(email)

    if not name:
        raise ValidationError("Full name is required.")
    if not normalized_email:
        raise ValidationError("Email is required.")
    if not password:
        raise ValidationError("Password is required.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if not is_valid_email(normalized_email):
        raise ValidationError("Please enter a valid email address.")

    return name, normalized_email


def hash_password_if_changed(user: "User", password: Optional[str]) -> bool:
    """Hash ``password`` onto ``user`` unless it is absent or already stored.

    Returns True when the stored hash was replaced.
    """

    if password is None:
        return False
    if user.password_hash and check_password_hash(user.password_hash, password):
        return False
    user.password_hash = generate_password_hash(password)
    return True


class User(db.Model):
    """Represents a registered account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    verification_token = db.Column(db.String(64), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @classmethod
    def create(
        cls,
        full_name: str | None,
        email: str | None,
        password: str | None,
        verification_token: Optional[str] = None,
    ) -> "User":
        """Build a validated, unverified user with a hashed password."""

        name, normalized_email = validate_user_fields(full_name, email, password)
        user = cls(
            full_name=name,
            email=normalized_email,
            is_verified=False,
            verification_token=verification_token or None,
        )
        hash_password_if_changed(user, password)
        return user

    def set_password(self, password: str) -> bool:
        """Replace the stored hash when the password differs from it."""

        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        return hash_password_if_changed(self, password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def mark_verified(self) -> None:
        """Mark the user as verified and retire the verification token."""

        self.is_verified = True
        self.verification_token = None

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
