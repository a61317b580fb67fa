"""User model definition."""

from typing import Optional

from utils.security import check_password, hash_password, utcnow

from . import db


ROLE_ADMIN = "Admin"
ROLE_USER = "User"
ROLES = (ROLE_ADMIN, ROLE_USER)


class User(db.Model):
    """Represents a registered account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(32), nullable=False)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default=ROLE_USER)
    verification_token = db.Column(db.String(128), nullable=True, index=True)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    reset_token = db.Column(db.String(128), nullable=True, index=True)
    reset_token_expires = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password(password, self.password_hash)

    def mark_verified(self) -> None:
        self.is_verified = True
        self.verification_token = None

    def issue_reset_token(self, token: str, expires_at) -> None:
        self.reset_token = token
        self.reset_token_expires = expires_at

    def clear_reset_token(self) -> None:
        self.reset_token = None
        self.reset_token_expires = None

    def touch(self) -> None:
        self.updated_at = utcnow()

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        """Serialize the public profile; credentials and tokens are never included."""

        return {
            "id": self.id,
            "title": self.title,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"


def find_by_email(email: Optional[str]) -> Optional[User]:
    """Return the user registered with ``email`` (case-insensitive)."""

    if not email:
        return None
    return User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()
