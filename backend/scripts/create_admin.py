#!/usr/bin/env python3
"""Create an admin account, or promote an existing one and give it a new password.

Example:
    python scripts/create_admin.py --email ops@example.com --password 'S3cure!pass' --role superadmin
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger, setup_logging
from app.core.security import hash_password
from app.db.session import session_scope
from app.models.user import ADMIN_ROLES, User, UserRole

logger = get_logger(__name__)


def create_admin_user(
    email: str = "admin@example.com",
    password: str = "Admin123!",
    name: str = "Admin User",
    role: str = UserRole.ADMIN.value,
) -> User:
    """Existing accounts are re-activated and lifted out of any ban."""
    email = email.strip().lower()
    with session_scope() as db:
        user = db.scalars(select(User).where(User.email == email)).first()
        created = user is None
        if created:
            user = User(email=email)
            db.add(user)
        user.name = name
        user.role = role
        user.password_hash = hash_password(password)
        user.is_active = True
        user.banned, user.banned_at, user.banned_reason = False, None, None
        db.flush()
        db.refresh(user)
    logger.info("Admin account ready", extra={"email": email, "role": role, "new_account": created})
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default="Admin123!")
    parser.add_argument("--name", default="Admin User")
    parser.add_argument("--role", choices=[r.value for r in ADMIN_ROLES], default=UserRole.ADMIN.value)
    args = parser.parse_args(argv)

    setup_logging()
    try:
        user = create_admin_user(args.email, args.password, args.name, args.role)
    except SQLAlchemyError as e:
        print(f"✗ Could not create admin: {e}", file=sys.stderr)
        return 1
    print(f"✓ {user.email} is now {user.role}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
