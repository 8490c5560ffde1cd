"""Tests for the forgot/reset password flow."""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.security import hash_token
from app.services.email.console import ConsoleEmailProvider
from tests.helpers.seed import create_test_student

GENERIC_MESSAGE = "If that email exists, a reset link has been created."


def test_forgot_password_unknown_email_is_generic(client: TestClient, outbox: ConsoleEmailProvider) -> None:
    response = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 200
    assert response.json() == {"message": GENERIC_MESSAGE}
    assert outbox.sent == []


def test_forgot_password_stores_hashed_token_and_sends_email(
    client: TestClient, db: Session, outbox: ConsoleEmailProvider
) -> None:
    user = create_test_student(db, email="driver@example.com")

    response = client.post("/api/auth/forgot-password", json={"email": "driver@example.com"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == GENERIC_MESSAGE
    token = data["resetToken"]
    assert len(token) == 48
    assert "expiresAt" in data

    db.refresh(user)
    assert user.reset_token_hash == hash_token(token)
    assert user.reset_token_hash != token

    assert len(outbox.sent) == 1
    assert outbox.sent[0].to == "driver@example.com"
    assert f"token={token}" in outbox.sent[0].body_text


def test_reset_password_with_valid_token(client: TestClient, db: Session, outbox: ConsoleEmailProvider) -> None:
    user = create_test_student(db, email="driver@example.com", password="OldPass123")
    token = client.post("/api/auth/forgot-password", json={"email": user.email}).json()["resetToken"]

    response = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "NewPass123"})
    assert response.status_code == 200
    assert response.json() == {"message": "Password updated successfully"}

    login = client.post("/api/auth/login", json={"email": user.email, "password": "NewPass123"})
    assert login.status_code == 200

    # Tokens are single use
    again = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "Another123"})
    assert again.status_code == 400


def test_reset_password_invalid_token(client: TestClient) -> None:
    response = client.post(
        "/api/auth/reset-password", json={"token": "not-a-real-token", "newPassword": "NewPass123"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired token"


def test_reset_password_expired_token(client: TestClient, db: Session) -> None:
    token = "f" * 48
    user = create_test_student(db, email="driver@example.com")
    user.reset_token_hash = hash_token(token)
    user.reset_token_expires = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    response = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "NewPass123"})
    assert response.status_code == 400

    db.refresh(user)
    assert user.reset_token_hash == hash_token(token)
