"""Password hashing and token helpers."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
from flask import current_app, has_app_context
from flask_jwt_extended import create_access_token

DEFAULT_BCRYPT_ROUNDS = 10
DEFAULT_RESET_TOKEN_TTL_HOURS = 24
ONE_TIME_TOKEN_BYTES = 40


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, matching stored columns."""

    return datetime.now(UTC).replace(tzinfo=None)


def _configured(key: str, default: int) -> int:
    if not has_app_context():
        return default
    return int(current_app.config.get(key, default))


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash for ``password``."""

    cost = rounds or _configured("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)
    digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=cost))
    return digest.decode("utf-8")


def check_password(password: str, password_hash: str | None) -> bool:
    """Verify ``password`` against a stored bcrypt hash."""

    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def issue_session_token(user) -> str:
    """Sign a bearer token carrying the user's id as subject and its role."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role},
    )


def generate_one_time_token() -> str:
    """Random hex token used for email verification and password resets."""

    return secrets.token_hex(ONE_TIME_TOKEN_BYTES)


def reset_token_expiry(now: datetime | None = None) -> datetime:
    """Return the moment a freshly issued reset token stops being valid."""

    hours = _configured("RESET_TOKEN_TTL_HOURS", DEFAULT_RESET_TOKEN_TTL_HOURS)
    return (now or utcnow()) + timedelta(hours=hours)
