"""Seed an administrator user."""

import os

from app import create_app
from models import db
from models.user import ROLE_ADMIN, User, find_by_email

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "AdminPass123")


def seed_admin(email: str, password: str) -> str:
    """Create or reset a verified admin account and return the action taken."""

    admin = find_by_email(email)
    if admin is None:
        admin = User(
            title="Admin",
            first_name="Site",
            last_name="Administrator",
            email=email.strip().lower(),
        )
        db.session.add(admin)
        action = "created"
    else:
        admin.touch()
        action = "updated"

    admin.role = ROLE_ADMIN
    admin.mark_verified()
    admin.clear_reset_token()
    admin.set_password(password)
    db.session.commit()
    return action


def main() -> None:
    app = create_app()
    with app.app_context():
        action = seed_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
        print(f"Admin user {action}: {ADMIN_EMAIL}")


if __name__ == "__main__":
    main()
