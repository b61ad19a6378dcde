"""Tests for the sign-up endpoint."""

from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from models import db
from models.user import User
from storage import DuplicateEmailError, DuplicateTokenError, SQLUserStore

VALID = {"fullName": "Ann", "email": "ann@x.com", "password": "longenough"}


def _signup(client: FlaskClient, **overrides):
    payload = dict(VALID)
    payload.update(overrides)
    return client.post("/api/signup", json=payload)


def test_signup_creates_unverified_user(app, client, mailer):
    response = _signup(client)

    assert response.status_code == 201
    assert response.get_json() == {
        "msg": "Sign up successful! Please check your email for verification."
    }

    with app.app_context():
        user = SQLUserStore().find_by_email("ann@x.com")
        assert user is not None
        assert user.is_verified is False
        assert len(user.verification_token) == 64
        assert user.password_hash != "longenough"
        assert user.check_password("longenough")
        token = user.verification_token

    mailer.flush()
    assert len(mailer.outbox) == 1
    message = mailer.outbox[0]
    assert message.recipient == "ann@x.com"
    assert message.sender == "noreply@example.com"
    assert message.subject == "Verify Your Cloudcore Account"
    assert "Hello Ann," in message.html
    assert f"https://frontend.example/thank-you-verify.html?token={token}" in message.html
    assert "expire in 24 hours" in message.html


def test_signup_normalizes_name_and_email(app, client):
    response = _signup(client, fullName="  Ann Lee ", email="Ann@X.com")

    assert response.status_code == 201
    with app.app_context():
        user = User.query.one()
        assert user.full_name == "Ann Lee"
        assert user.email == "ann@x.com"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"email": "ann@x.com", "password": "longenough"},
        {"fullName": "Ann", "password": "longenough"},
        {"fullName": "Ann", "email": "ann@x.com"},
        {"fullName": "Ann", "email": "ann@x.com", "password": ""},
        {"fullName": "Ann", "email": "ann@x.com", "password": 12345678},
    ],
)
def test_signup_requires_all_fields(client, payload):
    response = client.post("/api/signup", json=payload)

    assert response.status_code == 400
    assert response.get_json() == {"msg": "Please enter all fields."}


def test_signup_without_json_body(client):
    response = client.post("/api/signup", data="fullName=Ann")

    assert response.status_code == 400
    assert response.get_json() == {"msg": "Please enter all fields."}


@pytest.mark.parametrize(
    "password, status_code",
    [("1234567", 400), ("12345678", 201)],
)
def test_signup_password_length_boundary(client, password, status_code):
    response = _signup(client, password=password)

    assert response.status_code == status_code
    if status_code == 400:
        assert response.get_json() == {
            "msg": "Password must be at least 8 characters long."
        }


@pytest.mark.parametrize(
    "email, status_code",
    [("a@b.c", 201), ("not-an-email", 400), ("missing@tld", 400)],
)
def test_signup_email_shape(client, email, status_code):
    response = _signup(client, email=email)

    assert response.status_code == status_code
    if status_code == 400:
        assert response.get_json() == {"msg": "Please enter a valid email address."}


def test_signup_duplicate_email(client):
    assert _signup(client).status_code == 201

    response = _signup(client, email="ANN@x.com", fullName="Another Ann")

    assert response.status_code == 400
    assert response.get_json() == {"msg": "A user with this email already exists."}


def test_signup_whitespace_name_fails_model_validation(app, client):
    response = _signup(client, fullName="   ")

    assert response.status_code == 400
    assert response.get_json() == {"msg": "Full name is required."}
    with app.app_context():
        assert User.query.count() == 0


def test_signup_insert_race_reports_duplicate_email(client, monkeypatch):
    """A conflict at insert time maps to the duplicate-email message."""

    def _conflict(self, user):
        raise DuplicateEmailError(user.email)

    monkeypatch.setattr(SQLUserStore, "insert", _conflict)

    response = _signup(client)

    assert response.status_code == 400
    assert response.get_json() == {"msg": "A user with this email already exists."}


def test_signup_token_collision(client, monkeypatch):
    def _conflict(self, user):
        raise DuplicateTokenError()

    monkeypatch.setattr(SQLUserStore, "insert", _conflict)

    response = _signup(client)

    assert response.status_code == 400
    assert response.get_json() == {"msg": "Could not complete sign up, please try again."}


def test_signup_unexpected_error_returns_500(client, monkeypatch):
    def _boom(self, email):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(SQLUserStore, "find_by_email", _boom)

    response = _signup(client)

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Server Error"
    assert response.mimetype == "text/plain"


def test_signup_succeeds_when_mail_dispatch_fails(app, client, mailer, monkeypatch):
    """The response does not depend on the outcome of the verification email."""

    def _broken(message):
        raise ConnectionError("smtp down")

    monkeypatch.setattr(mailer, "dispatch", _broken)

    response = _signup(client)

    assert response.status_code == 201
    with app.app_context():
        assert User.query.count() == 1


def test_signup_succeeds_when_delivery_fails(app, client, mailer, monkeypatch, caplog):
    def _refuse(message):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(mailer, "send", _refuse)

    response = _signup(client)
    mailer.flush()

    assert response.status_code == 201
    assert "Error sending email to ann@x.com" in caplog.text
    with app.app_context():
        assert db.session.query(User).count() == 1
