"""Tests for the admin dashboard and analytics overview."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.exam_config import ExamConfig
from app.models.user import User
from app.services.system_settings import get_or_create_settings
from tests.helpers.seed import create_exam, create_question


def _seed_exams(db: Session, user: User) -> None:
    create_question(db, 1, increment=1, category="Signs")
    create_question(db, 2, increment=2, category="Parking", status="draft")
    # 2/2 = 100%, 1/2 = 50%, 0/2 = 0%
    create_exam(db, user, [(1, "a", "a"), (2, "a", "a")])
    create_exam(db, user, [(1, "a", "a"), (2, "b", "a")])
    create_exam(db, user, [(1, "c", "a"), (2, "b", "a")])


def test_overview_counters(
    client: TestClient, db: Session, test_user: User, auth_headers_admin: dict[str, str]
) -> None:
    _seed_exams(db, test_user)
    db.add(ExamConfig(name="Mock", question_count=10, increments=[1], enabled=True))
    db.add(ExamConfig(name="Off", question_count=10, increments=[2], enabled=False))
    db.commit()

    data = client.get("/api/admin/overview", headers=auth_headers_admin).json()

    assert data["userCount"] == 2
    assert data["questionCount"] == 2
    assert data["examCount"] == 3
    assert data["activeExamConfigs"] == 1
    assert data["questionsByIncrement"] == [
        {"increment": 1, "total": 1, "published": 1},
        {"increment": 2, "total": 1, "published": 0},
    ]
    assert len(data["trend"]) == 1
    assert data["trend"][0]["exams"] == 3
    assert data["trend"][0]["accuracy"] == 0.5


def test_pass_rate_follows_passing_criteria(
    client: TestClient, db: Session, test_user: User, auth_headers_admin: dict[str, str]
) -> None:
    _seed_exams(db, test_user)

    default = client.get("/api/admin/analytics/overview", headers=auth_headers_admin).json()
    assert default["passed"] == 1
    assert default["failed"] == 2

    settings = get_or_create_settings(db)
    settings.passing_criteria = 50
    db.commit()

    lowered = client.get("/api/admin/analytics/overview", headers=auth_headers_admin).json()
    assert lowered["passed"] == 2
    assert lowered["passRate"] == 2 / 3


def test_analytics_overview(
    client: TestClient, db: Session, test_user: User, auth_headers_admin: dict[str, str]
) -> None:
    _seed_exams(db, test_user)

    data = client.get("/api/admin/analytics/overview", headers=auth_headers_admin).json()

    assert data["totalExams"] == 3
    assert data["averageAccuracy"] == 0.5
    missed = data["mostFailedQuestions"]
    assert [m["questionId"] for m in missed] == [2, 1]
    assert missed[0]["missedCount"] == 2
    assert missed[0]["category"] == "Parking"
    assert data["averageByIncrement"] == [
        {"increment": 1, "averageAccuracy": 2 / 3, "totalQuestions": 3},
        {"increment": 2, "averageAccuracy": 1 / 3, "totalQuestions": 3},
    ]


def test_analytics_overview_empty(client: TestClient, auth_headers_admin: dict[str, str]) -> None:
    data = client.get("/api/admin/analytics/overview", headers=auth_headers_admin).json()
    assert data["totalExams"] == 0
    assert data["passRate"] == 0.0
    assert data["mostFailedQuestions"] == []
    assert data["averageByIncrement"] == []
