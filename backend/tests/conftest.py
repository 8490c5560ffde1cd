"""Shared fixtures: an in-memory database, an API client bound to it, and signed-in users."""

import os

# app.core.config and app.db.engine read these at import time
os.environ.update(
    DATABASE_URL="sqlite://",
    ENV="test",
    SEED_DEMO_ACCOUNTS="false",
    EMAIL_BACKEND="console",
)

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app import models  # noqa: F401
from app.core.security import create_access_token
from app.db.base import Base
from app.db.engine import engine
from app.db.session import SessionLocal, get_db
from app.main import app
from app.models.user import User
from app.services.email.console import ConsoleEmailProvider
from app.services.email.service import set_email_service
from tests.helpers.seed import create_test_admin, create_test_student


@pytest.fixture
def db() -> Iterator[Session]:
    """Session on a freshly created schema, dropped again after the test."""
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        yield session
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Requests share the test's session, so rows a test writes are visible to the API and back."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def outbox() -> Iterator[ConsoleEmailProvider]:
    provider = ConsoleEmailProvider()
    set_email_service(provider)
    yield provider
    set_email_service(None)


def bearer_for(user: User) -> dict[str, str]:
    return {"Authorization": "Bearer " + create_access_token(user_id=str(user.id), role=user.role)}


@pytest.fixture
def test_user(db: Session) -> User:
    return create_test_student(db, email="student@test.example.com")


@pytest.fixture
def test_admin_user(db: Session) -> User:
    return create_test_admin(db, email="admin@test.example.com")


@pytest.fixture
def auth_headers_student(test_user: User) -> dict[str, str]:
    return bearer_for(test_user)


@pytest.fixture
def auth_headers_admin(test_admin_user: User) -> dict[str, str]:
    return bearer_for(test_admin_user)
