"""Storage abstraction layer for user records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from models.user import User


class ConflictError(Exception):
    """A write would violate a uniqueness constraint."""


class DuplicateEmailError(ConflictError):
    """Another user already holds the email address."""


class DuplicateTokenError(ConflictError):
    """Another user already holds the verification token."""


class AbstractUserStore(ABC):
    """Interface for user storage backends."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email``, if any."""

    @abstractmethod
    def find_by_token(self, token: str) -> User | None:
        """Return the user holding the verification ``token``, if any."""

    @abstractmethod
    def insert(self, user: User) -> User:
        """Persist a new user, raising a ConflictError on duplicates."""

    @abstractmethod
    def save(self, user: User) -> User:
        """Persist changes to an existing user, raising a ConflictError on duplicates."""
