"""Sign-up blueprint creating unverified accounts and sending verification mail."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, HTTPException

from mail import build_verification_message, verification_link
from models.user import (
    MIN_PASSWORD_LENGTH,
    User,
    ValidationError,
    generate_verification_token,
    is_valid_email,
)
from storage import DuplicateEmailError, DuplicateTokenError, SQLUserStore
from utils.request_validation import parse_json_request, require_fields

signup_bp = Blueprint("signup", __name__)

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists."


@signup_bp.route("/signup", methods=["POST"])
def signup() -> tuple:
    """Register a new, unverified user and email them a verification link."""
    payload = parse_json_request(request)
    fields = require_fields(
        payload, ("fullName", "email", "password"), "Please enter all fields."
    )
    full_name, email, password = fields["fullName"], fields["email"], fields["password"]

    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if not is_valid_email(email):
        raise BadRequest("Please enter a valid email address.")

    store = SQLUserStore()
    if store.find_by_email(email) is not None:
        raise BadRequest(DUPLICATE_EMAIL_MESSAGE)

    token = generate_verification_token()
    try:
        user = store.insert(User.create(full_name, email, password, token))
    except ValidationError as exc:
        raise BadRequest(str(exc)) from exc
    except DuplicateEmailError as exc:
        raise BadRequest(DUPLICATE_EMAIL_MESSAGE) from exc
    except DuplicateTokenError as exc:
        raise BadRequest("Could not complete sign up, please try again.") from exc

    current_app.logger.info("Registered user %s", user.email)

    link = verification_link(
        current_app.config["FRONTEND_URL"], current_app.config["VERIFY_PAGE"], token
    )
    try:
        message = build_verification_message(user.email, user.full_name, link)
        current_app.extensions["mailer"].dispatch(message)
    except Exception:
        current_app.logger.exception("Error sending verification email to %s", user.email)

    return (
        jsonify({"msg": "Sign up successful! Please check your email for verification."}),
        HTTPStatus.CREATED,
    )


@signup_bp.errorhandler(BadRequest)
def _handle_bad_request(error: BadRequest):
    current_app.logger.info("Sign up rejected: %s", error.description)
    return jsonify({"msg": error.description}), HTTPStatus.BAD_REQUEST


@signup_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    if isinstance(error, HTTPException):
        return error
    current_app.logger.exception("Error during sign-up process", exc_info=error)
    return "Server Error", HTTPStatus.INTERNAL_SERVER_ERROR, {"Content-Type": "text/plain; charset=utf-8"}
