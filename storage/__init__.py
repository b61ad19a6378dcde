"""User storage backends."""

from .abstract_storage import (
    AbstractUserStore,
    ConflictError,
    DuplicateEmailError,
    DuplicateTokenError,
)
from .sql_storage import SQLUserStore, connect_database

__all__ = [
    "AbstractUserStore",
    "ConflictError",
    "DuplicateEmailError",
    "DuplicateTokenError",
    "SQLUserStore",
    "connect_database",
]
