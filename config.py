"""Application configuration module."""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def database_url() -> str:
    """Return the SQLAlchemy URL, preferring MONGODB_URI over DATABASE_URL."""
    return (
        os.getenv("MONGODB_URI")
        or os.getenv("DATABASE_URL")
        or "sqlite:///app.db"
    )


class Config:
    """Base configuration for the Flask application."""

    # Core
    DATABASE_URL = database_url()
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    DB_CREATE_ALL = _env_flag("DB_CREATE_ALL", True)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SERVER_PORT = int(os.getenv("SERVER_PORT", "5000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    APP_NAME = os.getenv("APP_NAME", "Cloudcore")

    # Frontend links and CORS origin
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5500").rstrip("/")
    VERIFY_PAGE = os.getenv("VERIFY_PAGE", "thank-you-verify.html")
    VERIFIED_PAGE = os.getenv("VERIFIED_PAGE", "thank-you-verified.html")

    # Outgoing mail
    EMAIL_USER = os.getenv("EMAIL_USER")
    EMAIL_PASS = os.getenv("EMAIL_PASS")
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "465"))
    MAIL_USE_SSL = _env_flag("MAIL_USE_SSL", True)
    MAIL_SUPPRESS_SEND = _env_flag("MAIL_SUPPRESS_SEND", False)
    MAIL_MAX_WORKERS = int(os.getenv("MAIL_MAX_WORKERS", "4"))
