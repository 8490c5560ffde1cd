"""Tests for the admin system settings endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.system_settings import SystemSettings
from app.models.user import User


def test_defaults_created_on_first_read(client: TestClient, db: Session, auth_headers_admin: dict[str, str]) -> None:
    assert db.query(SystemSettings).count() == 0

    data = client.get("/api/admin/settings", headers=auth_headers_admin).json()

    assert data["systemName"] == "PROVIQUIZ"
    assert data["passingCriteria"] == 60
    assert data["questionRandomization"] is True
    assert data["maintenanceMode"] is False
    assert data["lockedIncrements"] == []
    assert db.query(SystemSettings).count() == 1


def test_partial_update(
    client: TestClient, test_admin_user: User, auth_headers_admin: dict[str, str]
) -> None:
    client.put(
        "/api/admin/settings",
        json={"examRules": "No phones", "logoUrl": "https://cdn.example.com/logo.png"},
        headers=auth_headers_admin,
    )

    data = client.put(
        "/api/admin/settings",
        json={"passingCriteria": 75, "logoUrl": None, "systemName": None},
        headers=auth_headers_admin,
    ).json()

    assert data["passingCriteria"] == 75
    assert data["logoUrl"] is None
    assert data["examRules"] == "No phones"
    assert data["systemName"] == "PROVIQUIZ"
    assert data["updatedByUserId"] == str(test_admin_user.id)


def test_update_validation(client: TestClient, auth_headers_admin: dict[str, str]) -> None:
    response = client.put("/api/admin/settings", json={"passingCriteria": 150}, headers=auth_headers_admin)
    assert response.status_code == 400
    response = client.put("/api/admin/settings", json={"logoUrl": "not a url"}, headers=auth_headers_admin)
    assert response.status_code == 400
