"""Database utility helpers."""

from __future__ import annotations

from sqlalchemy.orm import Session

from jobboard.core import settings
from jobboard.core.logging import get_logger
from jobboard.core.security import get_password_hash
from jobboard.db.models import Base, User

logger = get_logger(__name__)


def create_tables(db_session: Session) -> None:
    Base.metadata.create_all(bind=db_session.get_bind())


def seed_default_data(db_session: Session) -> None:
    """Create tables and the default admin account (idempotent, never in production)."""
    if settings.is_production:
        logger.info("Skipping default seed in production environment")
        return

    create_tables(db_session)

    admin = db_session.query(User).filter(User.email == settings.admin_default_email).first()
    if admin:
        return

    admin = User(
        name="Administrator",
        email=settings.admin_default_email,
        hashed_password=get_password_hash(settings.admin_default_password),
        role="admin",
    )
    db_session.add(admin)
    db_session.commit()
    logger.info("Created default admin user", extra={"email": settings.admin_default_email})
