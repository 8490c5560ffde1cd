"""Tests for the student performance and weak-area endpoints."""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.analytics_service import get_weak_areas
from tests.helpers.seed import create_exam, create_question

T0 = datetime(2026, 4, 1, 8, 0, 0, tzinfo=timezone.utc)


def _seed_bank(db: Session) -> None:
    create_question(db, 1, category="Signs", topic="Warning")
    create_question(db, 2, category="Signs", topic="Regulatory")
    create_question(db, 3, category="Parking", topic="Regulatory")
    create_question(db, 4)


def test_performance_empty(client: TestClient, auth_headers_student: dict[str, str]) -> None:
    data = client.get("/api/analytics/performance", headers=auth_headers_student).json()
    assert data == {
        "examCount": 0,
        "averageAccuracy": 0.0,
        "totalDurationSeconds": 0,
        "recent": [],
        "byCategory": [],
        "byTopic": [],
    }


def test_performance_breakdown(
    client: TestClient, db: Session, test_user: User, auth_headers_student: dict[str, str]
) -> None:
    _seed_bank(db)
    create_exam(
        db, test_user, [(1, "a", "a"), (2, "b", "a"), (3, "a", "a")], completed_at=T0, duration_seconds=300
    )
    create_exam(
        db,
        test_user,
        [(1, "a", "a"), (4, None, "a"), (99, "b", "a")],
        completed_at=T0 + timedelta(hours=2),
        duration_seconds=200,
    )

    data = client.get("/api/analytics/performance", headers=auth_headers_student).json()

    assert data["examCount"] == 2
    assert data["averageAccuracy"] == 0.5
    assert data["totalDurationSeconds"] == 500
    assert [r["score"] for r in data["recent"]] == [2, 1]

    by_category = {c["category"]: c for c in data["byCategory"]}
    assert by_category["Signs"] == {"category": "Signs", "total": 3, "correct": 2, "accuracy": 2 / 3}
    assert by_category["uncategorized"]["total"] == 2
    assert data["byCategory"][0]["category"] == "Signs"

    by_topic = {t["topic"]: t for t in data["byTopic"]}
    assert by_topic["Regulatory"]["correct"] == 1


def test_weak_areas_need_minimum_attempts(db: Session, test_user: User) -> None:
    _seed_bank(db)
    # Signs: 6 attempts, 3 correct; Parking: 3 attempts, all wrong
    for i in range(3):
        create_exam(
            db,
            test_user,
            [(1, "a", "a"), (2, "b", "a"), (3, "c", "a")],
            completed_at=T0 + timedelta(minutes=i),
        )

    data = get_weak_areas(db, test_user.id, limit=10)

    assert [c["category"] for c in data["worst_categories"]] == ["Signs"]
    assert data["worst_categories"][0]["accuracy"] == 0.5
    assert [m["question_id"] for m in data["most_missed"][:2]] == [2, 3]
    assert data["most_missed"][0]["missed_count"] == 3


def test_weak_areas_endpoint_fills_missing_taxonomy(
    client: TestClient, db: Session, test_user: User, auth_headers_student: dict[str, str]
) -> None:
    create_exam(db, test_user, [(50, "b", "a")])

    data = client.get("/api/analytics/weak-areas", headers=auth_headers_student).json()

    assert data["worstCategories"] == []
    missed = data["mostMissed"][0]
    assert missed["questionId"] == 50
    assert missed["question"] is None
    assert missed["category"] == "uncategorized"
    assert missed["topic"] == "uncategorized"


def test_weak_areas_only_counts_own_answers(
    client: TestClient,
    db: Session,
    test_user: User,
    test_admin_user: User,
    auth_headers_student: dict[str, str],
) -> None:
    create_exam(db, test_admin_user, [(7, "b", "a")])
    data = client.get("/api/analytics/weak-areas", headers=auth_headers_student).json()
    assert data["mostMissed"] == []
