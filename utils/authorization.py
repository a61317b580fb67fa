"""Bearer-token identity resolution and role/ownership checks."""

from __future__ import annotations

from functools import wraps

from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from models import db
from models.user import User
from services.errors import UnauthorizedError
from utils.request_validation import parse_record_id


def _load_caller() -> User | None:
    user_id = parse_record_id(get_jwt_identity())
    if user_id is None:
        return None
    return db.session.get(User, user_id)


def authorize(*roles: str):
    """Require a valid bearer token, and one of ``roles`` when any are given.

    The caller is looked up on every request so role changes and deletions
    take effect immediately; it is exposed as ``g.current_user``.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = _load_caller()
            if user is None:
                raise UnauthorizedError()
            if roles and user.role not in roles:
                raise UnauthorizedError()
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user() -> User:
    return g.current_user


def is_self_or_admin(resource_id: int | str, user: User) -> bool:
    # literal comparison against the path id; records carry no owner column
    return str(resource_id) == str(user.id) or user.is_admin


def require_self_or_admin(resource_id: int | str) -> User:
    user = current_user()
    if not is_self_or_admin(resource_id, user):
        raise UnauthorizedError()
    return user
