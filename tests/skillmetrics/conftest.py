"""Shared fixtures: in-memory database, API client and user helpers."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skillmetrics.auth import hash_password
from skillmetrics.database import Base, get_db
from skillmetrics.dependencies import get_email_service
from skillmetrics.main import app
from skillmetrics.models.user import User
from skillmetrics.services.email_service import EmailService

DEFAULT_PASSWORD = "secret123"

# ---------------------------------------------------------------------------
# In-memory SQLite test database (shared via StaticPool)
# ---------------------------------------------------------------------------
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Dependency override that uses the test in-memory database."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def setup_db():
    """Create and tear down tables around each test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_service():
    """Mock email service recording the emails each request queues."""
    return MagicMock(spec=EmailService)


@pytest.fixture
def client(email_service):
    """TestClient with the DB and email dependencies overridden."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    """SQLAlchemy session for pre-populating test data."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Factory creating users with a known password."""

    def _make_user(email: str, is_admin: bool = False, **fields) -> User:
        user = User(
            email=email,
            username=fields.pop("username", email.split("@")[0]),
            password=hash_password(DEFAULT_PASSWORD),
            is_admin=is_admin,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", is_admin=True, first_name="Ada", last_name="Admin")


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com")


def login(client: TestClient, user: User, password: str = DEFAULT_PASSWORD) -> None:
    """Log ``client`` in as ``user``, replacing any existing session."""
    response = client.post("/api/login", json={"email": user.email, "password": password})
    assert response.status_code == 200, response.text
