"""Verification blueprint consuming single-use email verification tokens."""

from __future__ import annotations

from http import HTTPStatus
from urllib.parse import urlencode

from flask import Blueprint, current_app, redirect, request
from flask.typing import ResponseReturnValue
from werkzeug.exceptions import BadRequest, HTTPException

from storage import SQLUserStore

verify_bp = Blueprint("verify", __name__)

TEXT_PLAIN = {"Content-Type": "text/plain; charset=utf-8"}


def _verified_page(status: str) -> str:
    base = current_app.config["FRONTEND_URL"].rstrip("/")
    page = current_app.config["VERIFIED_PAGE"]
    return f"{base}/{page}?{urlencode({'status': status})}"


@verify_bp.route("/verify-email", methods=["GET"])
def verify_email() -> ResponseReturnValue:
    """Mark the account holding ``token`` as verified and redirect to the frontend."""
    token = request.args.get("token", "")
    if not token:
        raise BadRequest("Verification token missing.")

    store = SQLUserStore()
    user = store.find_by_token(token)
    if user is None:
        raise BadRequest("Invalid or expired verification token.")

    if user.is_verified:
        return redirect(_verified_page("already_verified"))

    user.mark_verified()
    store.save(user)
    current_app.logger.info("Verified user %s", user.email)

    return redirect(_verified_page("success"))


@verify_bp.errorhandler(BadRequest)
def _handle_bad_request(error: BadRequest):
    return error.description, HTTPStatus.BAD_REQUEST, TEXT_PLAIN


@verify_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    if isinstance(error, HTTPException):
        return error
    current_app.logger.exception("Error during email verification", exc_info=error)
    return (
        "Server Error during email verification.",
        HTTPStatus.INTERNAL_SERVER_ERROR,
        TEXT_PLAIN,
    )
