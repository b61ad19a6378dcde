"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest


def parse_json_request(req: Request) -> dict:
    """Return the parsed JSON object, or an empty dict for any other body."""

    data = req.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return data


def require_fields(
    data: dict,
    required_keys: Iterable[str],
    message: str = "Missing required fields.",
) -> dict[str, str]:
    """Return the required string fields or raise a 400 error.

    Absent keys, empty strings and non-string values all count as missing.
    """

    values = {key: data.get(key) for key in required_keys}
    missing = [
        key for key, value in values.items() if not isinstance(value, str) or not value
    ]
    if missing:
        raise BadRequest(message)
    return values
