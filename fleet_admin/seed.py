import uuid

import structlog
from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from fleet_admin.core.config import settings
from fleet_admin.core.security import hash_password
from fleet_admin.models.user import User

log = structlog.get_logger(__name__)


def ensure_user(db: Session, email: str, password: str, role: str, name: str) -> bool:
    email = email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        return False
    db.add(
        User(
            id=str(uuid.uuid4()),
            email=email,
            full_name=name,
            role=role,
            password_hash=hash_password(password),
            is_active=True,
        )
    )
    db.commit()
    return True


def run(db: Session) -> None:
    """Create the first admin from ADMIN_EMAIL / ADMIN_PASSWORD when both are set."""
    # If migrations haven't been applied yet, seeding must not crash the API.
    try:
        db.execute(text("SELECT 1 FROM users LIMIT 1"))
    except ProgrammingError:
        db.rollback()
        log.warning("seed.skipped", reason="missing_tables")
        return

    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    if ensure_user(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, "superadmin", settings.ADMIN_NAME):
        log.info("seed.admin_created", email=settings.ADMIN_EMAIL)
