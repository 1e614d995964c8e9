"""Tests for the database initialization script."""

from __future__ import annotations

import pytest
from conftest import TestingSessionLocal, engine

from skillmetrics import init_db
from skillmetrics.auth import verify_password
from skillmetrics.config import settings
from skillmetrics.database import Base
from skillmetrics.models.user import User


@pytest.fixture(autouse=True)
def test_database(monkeypatch):
    """Point the script at the in-memory test database."""
    monkeypatch.setattr(init_db, "SessionLocal", TestingSessionLocal)
    monkeypatch.setattr(init_db, "engine", engine)


class TestInitDatabase:
    """Tests for init_database()."""

    def test_creates_tables_idempotently(self):
        """Test tables are created and a second run is harmless."""
        Base.metadata.drop_all(bind=engine)

        init_db.init_database()
        init_db.init_database()

        with TestingSessionLocal() as session:
            assert session.query(User).count() == 0


class TestSeedAdmin:
    """Tests for seed_admin()."""

    def test_skips_without_credentials(self, db, monkeypatch):
        """Test nothing is created when ADMIN_EMAIL/ADMIN_PASSWORD are unset."""
        monkeypatch.setattr(settings, "admin_email", None)
        monkeypatch.setattr(settings, "admin_password", None)

        assert init_db.seed_admin() is False
        assert db.query(User).count() == 0

    def test_skips_with_only_email(self, db, monkeypatch):
        monkeypatch.setattr(settings, "admin_password", None)

        assert init_db.seed_admin(email="root@example.com") is False
        assert db.query(User).count() == 0

    def test_creates_admin(self, db):
        """Test an admin account is created with a working password."""
        assert init_db.seed_admin(email="Root@Example.com", password="s3cret!") is True

        user = db.query(User).one()
        assert user.email == "root@example.com"
        assert user.is_admin is True
        assert verify_password("s3cret!", user.password)

    def test_uses_settings_values(self, db, monkeypatch):
        """Test credentials fall back to the configured settings."""
        monkeypatch.setattr(settings, "admin_email", "boss@example.com")
        monkeypatch.setattr(settings, "admin_password", "from-env")

        assert init_db.seed_admin() is True
        assert verify_password("from-env", db.query(User).one().password)

    def test_skips_existing_email(self, db, alice):
        """Test an existing account is neither duplicated nor promoted."""
        assert init_db.seed_admin(email="ALICE@example.com", password="other") is False

        db.refresh(alice)
        assert db.query(User).count() == 1
        assert alice.is_admin is False
        assert not verify_password("other", alice.password)
