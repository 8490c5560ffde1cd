"""Tests for registration, login and the current-user endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.security import verify_access_token
from app.models.user import User
from tests.helpers.seed import create_test_student


def test_register_creates_student_and_returns_token(client: TestClient, db: Session) -> None:
    response = client.post(
        "/api/auth/register",
        json={"email": "New.Driver@Example.com", "password": "secret1", "name": "New Driver"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "new.driver@example.com"
    assert data["user"]["role"] == "student"
    assert data["user"]["name"] == "New Driver"
    assert "createdAt" in data["user"]
    assert verify_access_token(data["token"])["sub"] == data["user"]["id"]

    user = db.query(User).filter(User.email == "new.driver@example.com").one()
    assert user.password_hash and user.password_hash != "secret1"


def test_register_duplicate_email_conflicts(client: TestClient, test_user: User) -> None:
    response = client.post(
        "/api/auth/register",
        json={"email": test_user.email, "password": "secret1"},
    )
    assert response.status_code == 409
    data = response.json()
    assert data["error_code"] == "CONFLICT"
    assert data["message"] == "Email already registered"


def test_register_short_password_is_validation_error(client: TestClient) -> None:
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "VALIDATION_ERROR"
    assert data["details"][0]["field"] == "password"
    assert data["request_id"]


def test_login_success_updates_last_login(client: TestClient, db: Session) -> None:
    user = create_test_student(db, email="driver@example.com", password="Passw0rd!")
    assert user.last_login_at is None

    response = client.post("/api/auth/login", json={"email": "DRIVER@example.com", "password": "Passw0rd!"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == str(user.id)
    db.refresh(user)
    assert user.last_login_at is not None


def test_login_wrong_password(client: TestClient, db: Session) -> None:
    create_test_student(db, email="driver@example.com", password="Passw0rd!")
    response = client.post("/api/auth/login", json={"email": "driver@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_unknown_email(client: TestClient) -> None:
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHORIZED"


def test_login_google_only_account(client: TestClient, db: Session) -> None:
    create_test_student(db, email="g@example.com", password=None, google_id="google-123")
    response = client.post("/api/auth/login", json={"email": "g@example.com", "password": "anything"})
    assert response.status_code == 400
    assert response.json()["message"] == "Use Google Sign-In for this account."


def test_login_banned_account_is_forbidden(client: TestClient, db: Session) -> None:
    create_test_student(
        db, email="banned@example.com", password="Passw0rd!", banned=True, banned_reason="Cheating"
    )
    response = client.post("/api/auth/login", json={"email": "banned@example.com", "password": "Passw0rd!"})
    assert response.status_code == 403
    data = response.json()
    assert data["message"] == "Account is banned"
    assert data["details"] == {"reason": "Cheating"}


def test_me_and_profile_return_public_user(
    client: TestClient, test_user: User, auth_headers_student: dict[str, str]
) -> None:
    for path in ("/api/auth/me", "/api/users/profile"):
        response = client.get(path, headers=auth_headers_student)
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(test_user.id)
        assert data["email"] == test_user.email
        assert data["role"] == "student"
        assert "passwordHash" not in data
