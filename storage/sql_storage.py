"""SQLAlchemy-backed user storage."""

from __future__ import annotations

from flask import Flask
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.user import User, normalize_email

from .abstract_storage import AbstractUserStore, DuplicateEmailError, DuplicateTokenError


class SQLUserStore(AbstractUserStore):
    """Persist users through the Flask-SQLAlchemy session."""

    def __init__(self, session=None):
        self.session = session or db.session

    def find_by_email(self, email: str) -> User | None:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.session.execute(
            db.select(User).filter_by(email=normalized)
        ).scalar_one_or_none()

    def find_by_token(self, token: str) -> User | None:
        if not token:
            return None
        return self.session.execute(
            db.select(User).filter_by(verification_token=token)
        ).scalar_one_or_none()

    def insert(self, user: User) -> User:
        self.session.add(user)
        self._commit(user)
        return user

    def save(self, user: User) -> User:
        self._commit(user)
        return user

    def _commit(self, user: User) -> None:
        with self.session.no_autoflush:
            email = user.email
            token = user.verification_token
            user_id = user.id
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self._held_by_other(self.find_by_email(email), user_id):
                raise DuplicateEmailError(email) from exc
            if token and self._held_by_other(self.find_by_token(token), user_id):
                raise DuplicateTokenError() from exc
            raise

    @staticmethod
    def _held_by_other(holder: User | None, user_id: int | None) -> bool:
        return holder is not None and (user_id is None or holder.id != user_id)


def connect_database(app: Flask) -> None:
    """Bind the database to ``app`` and terminate the process if it is unreachable.

    With ``DB_CREATE_ALL`` set, missing tables are created once connected.
    """

    try:
        db.init_app(app)
        with app.app_context():
            try:
                db.session.execute(text("SELECT 1"))
                if app.config.get("DB_CREATE_ALL"):
                    db.create_all()
            finally:
                db.session.remove()
    except SQLAlchemyError as exc:
        app.logger.critical("Database connection error: %s", exc)
        raise SystemExit(1) from exc
    app.logger.info("Database connected.")
