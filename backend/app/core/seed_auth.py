"""Demo logins for local development, created at startup when SEED_DEMO_ACCOUNTS is on."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.logging import get_logger
from app.core.security import hash_password
from app.db.session import session_scope
from app.models.user import User, UserRole

logger = get_logger(__name__)

DEMO_ACCOUNTS = {
    "admin@example.com": ("Admin User", "Admin123!", UserRole.ADMIN),
    "student@example.com": ("Student User", "Student123!", UserRole.STUDENT),
}


def seed_demo_accounts() -> int:
    """Create whichever demo accounts are missing and return how many were added. Dev only."""
    if settings.ENV != "dev" or not settings.SEED_DEMO_ACCOUNTS:
        return 0

    try:
        with session_scope() as db:
            existing = set(db.scalars(select(User.email).where(User.email.in_(list(DEMO_ACCOUNTS)))))
            missing = [email for email in DEMO_ACCOUNTS if email not in existing]
            for email in missing:
                name, password, role = DEMO_ACCOUNTS[email]
                db.add(User(email=email, name=name, password_hash=hash_password(password), role=role.value))
    except SQLAlchemyError:
        logger.exception("Demo account seeding failed")
        return 0

    if missing:
        logger.info("Demo accounts created", extra={"emails": missing})
    return len(missing)
