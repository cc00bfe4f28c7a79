"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest

from models.user import GENDERS, MAX_DAILY_NORMA

# Maps JSON field names onto the User columns a profile body may write.
PROFILE_FIELDS = {
    "name": "name",
    "gender": "gender",
    "dailyNorma": "daily_norma",
}
MAX_NAME_LENGTH = 64


def _is_blank(value: object) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return not value


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if _is_blank(data.get(key))]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(", ".join(sorted(missing)))
            )

    return data


def text_field(payload: dict, key: str) -> str:
    """Return a string field stripped of surrounding whitespace."""

    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string.")
    return value.strip()


def _parse_daily_norma(value: object) -> float:
    if isinstance(value, bool):
        raise BadRequest("dailyNorma must be a number.")
    try:
        norma = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise BadRequest("dailyNorma must be a number.") from None
    if not 0 < norma <= MAX_DAILY_NORMA:
        raise BadRequest(f"dailyNorma must be greater than 0 and at most {MAX_DAILY_NORMA:g}.")
    return norma


def profile_updates(payload: dict) -> dict:
    """Validate the allow-listed profile fields of a payload.

    Keys outside ``PROFILE_FIELDS`` are ignored, so protected columns such as
    ``verified`` or ``token`` can never be written through a profile body.
    Returns a mapping of column name to validated value.
    """

    updates: dict = {}
    for key, column in PROFILE_FIELDS.items():
        if key not in payload:
            continue
        value = payload[key]
        if key == "name":
            name = text_field(payload, key)
            if not name or len(name) > MAX_NAME_LENGTH:
                raise BadRequest(f"name must be 1-{MAX_NAME_LENGTH} characters.")
            value = name
        elif key == "gender":
            if value not in GENDERS:
                raise BadRequest("gender must be one of: {}.".format(", ".join(GENDERS)))
        else:
            value = _parse_daily_norma(value)
        updates[column] = value
    return updates
