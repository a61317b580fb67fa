"""User directory: accounts, registration and credential workflows."""

from __future__ import annotations

from typing import Any, Mapping

from flask import current_app

from models import db
from models.user import ROLE_ADMIN, ROLE_USER, User, find_by_email
from services import mailer
from services.errors import ConflictError, InvalidTokenError, NotFoundError
from utils.request_validation import parse_record_id
from utils.security import (
    generate_one_time_token,
    issue_session_token,
    reset_token_expiry,
    utcnow,
)

PROFILE_FIELDS = ("title", "first_name", "last_name", "email")
UPDATABLE_FIELDS = PROFILE_FIELDS + ("role",)


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Return the profile and a session token for valid, verified credentials."""

    user = find_by_email(email)
    if user is None or not user.is_verified or not user.check_password(password):
        return None

    return {**user.to_dict(), "access_token": issue_session_token(user)}


def register(params: Mapping[str, Any], origin: str | None = None) -> None:
    """Register an account without revealing whether the email is already taken.

    Both branches return nothing; only the notice that is emailed differs.
    """

    if find_by_email(params["email"]) is not None:
        _notify_already_registered(params["email"], origin)
    else:
        _create_unverified_account(params, origin)


def _notify_already_registered(email: str, origin: str | None) -> None:
    current_app.logger.info("Registration attempted for existing account")
    mailer.send_already_registered_email(email, origin)


def _create_unverified_account(params: Mapping[str, Any], origin: str | None) -> None:
    # not atomic: two concurrent first registrations can both become admins
    is_first_user = User.query.count() == 0

    user = User(**{field: params[field] for field in PROFILE_FIELDS})
    user.role = ROLE_ADMIN if is_first_user else ROLE_USER
    user.is_verified = False
    user.verification_token = generate_one_time_token()
    user.set_password(params["password"])

    # committed only once the notice has been handed to the mail server
    db.session.add(user)
    db.session.flush()
    try:
        mailer.send_verification_email(user, origin)
    except Exception:
        db.session.rollback()
        raise

    db.session.commit()
    current_app.logger.info("Registered user id=%s role=%s", user.id, user.role)


def verify_email(token: str) -> None:
    user = User.query.filter_by(verification_token=token).first()
    if user is None:
        raise NotFoundError("Verification failed")

    user.mark_verified()
    db.session.commit()
    current_app.logger.info("Verified user id=%s", user.id)


def forgot_password(email: str, origin: str | None = None) -> None:
    """Issue a reset token; unknown emails are ignored silently."""

    user = find_by_email(email)
    if user is None:
        return

    user.issue_reset_token(generate_one_time_token(), reset_token_expiry())
    try:
        mailer.send_password_reset_email(user, origin)
    except Exception:
        db.session.rollback()
        raise

    db.session.commit()
    current_app.logger.info("Issued password reset token for user id=%s", user.id)


def _get_user_by_reset_token(token: str) -> User:
    user = User.query.filter(
        User.reset_token == token,
        User.reset_token_expires > utcnow(),
    ).first()
    if user is None:
        raise InvalidTokenError("Invalid token")
    return user


def validate_reset_token(token: str) -> None:
    _get_user_by_reset_token(token)


def reset_password(token: str, password: str) -> None:
    user = _get_user_by_reset_token(token)

    user.set_password(password)
    user.is_verified = True
    user.clear_reset_token()
    user.touch()
    db.session.commit()
    current_app.logger.info("Password reset completed for user id=%s", user.id)


def get_all() -> list[dict[str, Any]]:
    return [user.to_dict() for user in User.query.order_by(User.id).all()]


def get_by_id(user_id: int | str) -> dict[str, Any]:
    return _get_user(user_id).to_dict()


def create(params: Mapping[str, Any]) -> dict[str, Any]:
    """Create a pre-verified account (admin path)."""

    email = params["email"]
    if find_by_email(email) is not None:
        raise ConflictError(f'Email "{email}" is already registered')

    user = User(**{field: params[field] for field in PROFILE_FIELDS})
    user.role = params.get("role") or ROLE_USER
    user.is_verified = True
    user.set_password(params["password"])

    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Admin created user id=%s role=%s", user.id, user.role)
    return user.to_dict()


def update(user_id: int | str, params: Mapping[str, Any]) -> dict[str, Any]:
    user = _get_user(user_id)

    email = params.get("email")
    if email and email != user.email:
        other = find_by_email(email)
        if other is not None and other.id != user.id:
            raise ConflictError(f'Email "{email}" is already taken')

    if params.get("password"):
        user.set_password(params["password"])

    for field in UPDATABLE_FIELDS:
        if params.get(field) is not None:
            setattr(user, field, params[field])

    user.touch()
    db.session.commit()
    return user.to_dict()


def delete(user_id: int | str) -> None:
    user = _get_user(user_id)
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("Deleted user id=%s", user_id)


def _get_user(user_id: int | str) -> User:
    key = parse_record_id(user_id)
    if key is None:
        raise NotFoundError("User not found")

    user = db.session.get(User, key)
    if user is None:
        raise NotFoundError("User not found")
    return user
