"""Tests for exam delivery, submission and history."""

import random
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.exam_session import ExamSession
from app.models.user import User
from app.services.question_bank import select_exam_questions
from tests.helpers.seed import create_exam, create_question, create_questions

STARTED = datetime(2026, 3, 1, 10, 0, 0, tzinfo=timezone.utc)


def _submission(answers: list[tuple[int, str | None]], **extra) -> dict:
    body = {
        "mode": "timed",
        "startedAt": STARTED.isoformat(),
        "completedAt": (STARTED + timedelta(minutes=12, seconds=30)).isoformat(),
        "answers": [{"questionId": qid, "selected": selected} for qid, selected in answers],
    }
    body.update(extra)
    return body


class TestStartExam:
    def test_default_batch_size(self, client: TestClient, db: Session) -> None:
        create_questions(db, 30)
        response = client.get("/api/exams/start")

        assert response.status_code == 200
        data = response.json()
        assert data["limit"] == 20
        assert data["totalAvailable"] == 30
        assert len(data["questions"]) == 20
        assert len({q["id"] for q in data["questions"]}) == 20

    def test_post_is_accepted(self, client: TestClient, db: Session) -> None:
        create_questions(db, 5)
        response = client.post("/api/exams/start", params={"limit": 3})
        assert response.status_code == 200
        assert len(response.json()["questions"]) == 3

    def test_range_is_inclusive(self, client: TestClient, db: Session) -> None:
        create_questions(db, 20)
        response = client.get("/api/exams/start", params={"rangeStart": 5, "rangeEnd": 9, "limit": 50})

        data = response.json()
        assert data["totalAvailable"] == 5
        assert sorted(q["id"] for q in data["questions"]) == [5, 6, 7, 8, 9]

    def test_image_filter(self, client: TestClient, db: Session) -> None:
        create_question(db, 1, image_url="https://cdn.example.com/sign.png")
        create_question(db, 2, image_url="N/A")
        create_question(db, 3)
        create_question(db, 4, image_url="https://cdn.example.com/lane.png")

        images = client.get("/api/exams/start", params={"imageFilter": "images"}).json()
        text = client.get("/api/exams/start", params={"imageFilter": "text"}).json()

        assert sorted(q["id"] for q in images["questions"]) == [1, 4]
        assert sorted(q["id"] for q in text["questions"]) == [2, 3]

    def test_soft_deleted_questions_never_served(self, client: TestClient, db: Session) -> None:
        create_questions(db, 3)
        create_question(db, 4, is_deleted=True)

        data = client.get("/api/exams/start", params={"limit": 50}).json()
        assert data["totalAvailable"] == 3
        assert 4 not in {q["id"] for q in data["questions"]}

    def test_limit_above_maximum_rejected(self, client: TestClient) -> None:
        response = client.get("/api/exams/start", params={"limit": 201})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_unknown_image_filter_rejected(self, client: TestClient) -> None:
        response = client.get("/api/exams/start", params={"imageFilter": "video"})
        assert response.status_code == 400

    def test_selection_is_reproducible_with_seeded_rng(self, db: Session) -> None:
        create_questions(db, 15)
        first, _ = select_exam_questions(db, limit=5, rng=random.Random(7))
        second, _ = select_exam_questions(db, limit=5, rng=random.Random(7))
        assert [q.id for q in first] == [q.id for q in second]


class TestSubmitExam:
    def test_twenty_question_exam(
        self, client: TestClient, db: Session, test_user: User, auth_headers_student: dict[str, str]
    ) -> None:
        create_questions(db, 20, correct="b")
        answers: list[tuple[int, str | None]] = (
            [(qid, "b") for qid in range(1, 15)]
            + [(qid, "c") for qid in range(15, 18)]
            + [(qid, None) for qid in range(18, 21)]
        )

        response = client.post("/api/exams/submit", json=_submission(answers), headers=auth_headers_student)

        assert response.status_code == 201
        data = response.json()
        assert data["score"] == 14
        assert data["totalQuestions"] == 20
        assert data["durationSeconds"] == 750
        assert [a["questionId"] for a in data["answers"]] == list(range(1, 21))
        assert data["answers"][17] == {"questionId": 18, "selected": None, "correct": "b", "isCorrect": False}

        exam = db.query(ExamSession).filter(ExamSession.user_id == test_user.id).one()
        assert exam.score == 14
        assert len(exam.answers) == 20

    def test_answer_key_comes_from_question_bank(
        self, client: TestClient, db: Session, auth_headers_student: dict[str, str]
    ) -> None:
        create_question(db, 1, correct="d")
        body = _submission([(1, "a")])
        body["answers"][0]["correct"] = "a"
        body["answers"][0]["isCorrect"] = True

        data = client.post("/api/exams/submit", json=body, headers=auth_headers_student).json()

        assert data["score"] == 0
        assert data["answers"][0]["correct"] == "d"

    def test_unknown_question_uses_fallback_key(
        self, client: TestClient, auth_headers_student: dict[str, str]
    ) -> None:
        data = client.post(
            "/api/exams/submit", json=_submission([(999, "a")]), headers=auth_headers_student
        ).json()
        assert data["answers"][0]["correct"] == "a"
        assert data["score"] == 1

    def test_deleted_question_keeps_its_stored_key(
        self, client: TestClient, db: Session, auth_headers_student: dict[str, str]
    ) -> None:
        create_question(db, 3, correct="c", is_deleted=True)
        data = client.post(
            "/api/exams/submit", json=_submission([(3, "a")]), headers=auth_headers_student
        ).json()
        assert data["answers"][0]["correct"] == "c"
        assert data["score"] == 0

    def test_duplicate_client_session_id(
        self, client: TestClient, db: Session, auth_headers_student: dict[str, str]
    ) -> None:
        create_questions(db, 2)
        body = _submission([(1, "a"), (2, "b")], clientSessionId="session-1")

        first = client.post("/api/exams/submit", json=body, headers=auth_headers_student)
        second = client.post("/api/exams/submit", json=body, headers=auth_headers_student)

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.json()["examId"] == second.json()["examId"]
        assert db.query(ExamSession).count() == 1

    def test_negative_duration_is_clamped(
        self, client: TestClient, auth_headers_student: dict[str, str]
    ) -> None:
        body = _submission([])
        body["completedAt"] = (STARTED - timedelta(seconds=5)).isoformat()
        data = client.post("/api/exams/submit", json=body, headers=auth_headers_student).json()
        assert data["durationSeconds"] == 0
        assert data["totalQuestions"] == 0

    def test_invalid_option_rejected(self, client: TestClient, auth_headers_student: dict[str, str]) -> None:
        response = client.post(
            "/api/exams/submit", json=_submission([(1, "e")]), headers=auth_headers_student
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_requires_authentication(self, client: TestClient) -> None:
        response = client.post("/api/exams/submit", json=_submission([]))
        assert response.status_code == 401


class TestHistory:
    def test_mine_lists_only_own_exams_newest_first(
        self,
        client: TestClient,
        db: Session,
        test_user: User,
        test_admin_user: User,
        auth_headers_student: dict[str, str],
    ) -> None:
        older = create_exam(db, test_user, [(1, "a", "a")], completed_at=STARTED)
        newer = create_exam(db, test_user, [(1, "b", "a")], completed_at=STARTED + timedelta(days=1))
        create_exam(db, test_admin_user, [(1, "a", "a")])

        data = client.get("/api/exams/mine", headers=auth_headers_student).json()

        assert {e["id"] for e in data} == {str(older.id), str(newer.id)}
        assert data[0]["completedAt"] >= data[1]["completedAt"]

    def test_stats_average_accuracy(
        self, client: TestClient, db: Session, test_user: User, auth_headers_student: dict[str, str]
    ) -> None:
        create_exam(db, test_user, [(1, "a", "a"), (2, "a", "b")])  # 0.5
        create_exam(db, test_user, [(1, "a", "a"), (2, "b", "b"), (3, "c", "c"), (4, "a", "a")])  # 1.0

        data = client.get("/api/exams/stats", headers=auth_headers_student).json()

        assert data == {"examCount": 2, "averageScore": 0.75}

    def test_stats_without_exams(self, client: TestClient, auth_headers_student: dict[str, str]) -> None:
        data = client.get("/api/exams/stats", headers=auth_headers_student).json()
        assert data == {"examCount": 0, "averageScore": 0.0}
