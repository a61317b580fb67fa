"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import ROLE_ADMIN, ROLE_USER, ROLES, User  # noqa: E402,F401
from .todo import Todo  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "Todo",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_USER",
]
