"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import math
import re
from typing import Iterable, Mapping

from flask import Request
from werkzeug.exceptions import BadRequest

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72
# primary keys are signed 64-bit integers
MAX_RECORD_ID = 2**63 - 1


def parse_json_request(req: Request, *, allow_empty: bool = False) -> dict:
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

    return data


def pick(
    data: dict,
    fields: Iterable[str],
    *,
    drop_empty: bool = False,
    raw: Iterable[str] = (),
) -> dict:
    """Keep only whitelisted keys, optionally treating empty strings as absent.

    String values are stripped, except for the fields named in ``raw``.
    """

    unstripped = set(raw)
    picked = {}
    for field in fields:
        if field not in data:
            continue
        value = data[field]
        if drop_empty and (value is None or value == ""):
            continue
        if isinstance(value, str) and field not in unstripped:
            value = value.strip()
        picked[field] = value
    return picked


def parse_record_id(value: object) -> int | None:
    """Return ``value`` as a primary key, or None when it cannot be one."""

    try:
        key = int(value)
    except (TypeError, ValueError):
        return None
    if not 0 < key <= MAX_RECORD_ID:
        return None
    return key


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def is_valid_email(value: object) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def string_errors(
    data: dict,
    fields: Iterable[str],
    *,
    required: bool = True,
    max_lengths: Mapping[str, int] | None = None,
) -> list[str]:
    errors = []
    for field in fields:
        value = data.get(field)
        if value is None or value == "":
            if required:
                errors.append(f"{field} is required")
        elif not isinstance(value, str):
            errors.append(f"{field} must be a string")
        elif max_lengths and field in max_lengths and len(value) > max_lengths[field]:
            errors.append(f"{field} must be at most {max_lengths[field]} characters")
    return errors


def email_errors(data: dict, *, required: bool = True) -> list[str]:
    value = data.get("email")
    if value is None or value == "":
        return ["email is required"] if required else []
    if not is_valid_email(value):
        return ["email must be a valid email"]
    if len(value) > EMAIL_MAX_LENGTH:
        return [f"email must be at most {EMAIL_MAX_LENGTH} characters"]
    return []


def password_errors(data: dict, *, required: bool = True) -> list[str]:
    """Check ``password`` and that ``confirm_password`` matches it."""

    password = data.get("password")
    if password is None or password == "":
        if required:
            return ["password is required", *_confirm_errors(data, password)]
        if data.get("confirm_password"):
            return ["confirm_password must match password"]
        return []

    errors = []
    if not isinstance(password, str):
        errors.append("password must be a string")
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"password must be at least {PASSWORD_MIN_LENGTH} characters")
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
    errors.extend(_confirm_errors(data, password))
    return errors


def _confirm_errors(data: dict, password: object) -> list[str]:
    confirm = data.get("confirm_password")
    if confirm is None or confirm == "":
        return ["confirm_password is required"]
    if confirm != password:
        return ["confirm_password must match password"]
    return []


def parse_number(value: object) -> float | None:
    """Return ``value`` as a number, accepting numeric strings."""

    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return None


def raise_for_errors(errors: list[str]) -> None:
    if errors:
        raise BadRequest("; ".join(errors))
