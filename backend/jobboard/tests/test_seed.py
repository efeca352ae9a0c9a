"""Tests for default data seeding."""

from unittest.mock import patch

from jobboard.core.config import settings
from jobboard.core.security import verify_password
from jobboard.db.models import User
from jobboard.db.utils import seed_default_data


def test_seed_creates_admin_once(db_session):
    seed_default_data(db_session)
    seed_default_data(db_session)

    admins = db_session.query(User).filter(User.email == settings.admin_default_email).all()
    assert len(admins) == 1
    assert admins[0].role == "admin"
    assert verify_password(settings.admin_default_password, admins[0].hashed_password)


def test_seed_skipped_in_production(db_session):
    with patch.object(settings, "environment", "production"):
        seed_default_data(db_session)

    assert db_session.query(User).count() == 0
