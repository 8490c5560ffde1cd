"""Tests for the question bank endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.question import Question
from tests.helpers.seed import DEFAULT_OPTIONS, create_question, create_questions


def _question_body(**overrides) -> dict:
    body = {
        "question": "What does a red octagonal sign mean?",
        "options": {"a": "Stop", "b": "Yield", "c": "No entry", "d": "Parking"},
        "correct": "a",
        "category": "Signs",
        "topic": "Regulatory",
    }
    body.update(overrides)
    return body


class TestReadQuestions:
    def test_list_ordered_by_id_without_deleted(self, client: TestClient, db: Session) -> None:
        create_question(db, 3)
        create_question(db, 1)
        create_question(db, 2, is_deleted=True)

        data = client.get("/api/questions").json()

        assert data["total"] == 2
        assert [q["id"] for q in data["items"]] == [1, 3]
        assert data["items"][0]["options"] == DEFAULT_OPTIONS
        assert "pk" not in data["items"][0]

    def test_list_by_category(self, client: TestClient, db: Session) -> None:
        create_question(db, 1, category="Signs")
        create_question(db, 2, category="Parking")

        data = client.get("/api/questions", params={"category": "Parking"}).json()
        assert data["total"] == 1
        assert [q["id"] for q in data["items"]] == [2]

    def test_list_pages_with_skip(self, client: TestClient, db: Session) -> None:
        create_questions(db, 5)

        data = client.get("/api/questions", params={"limit": 2, "skip": 3}).json()

        assert data["total"] == 5
        assert [q["id"] for q in data["items"]] == [4, 5]

    def test_random_caps_at_fifty(self, client: TestClient, db: Session) -> None:
        create_questions(db, 60)
        assert len(client.get("/api/questions/random").json()) == 20
        assert len(client.get("/api/questions/random", params={"limit": 500}).json()) == 50

    def test_search_matches_text_and_options(self, client: TestClient, db: Session) -> None:
        create_question(db, 1, question="When may you overtake on the right?")
        create_question(db, 2, options={**DEFAULT_OPTIONS, "c": "Overtake carefully"})
        create_question(db, 3)

        data = client.get("/api/questions/all", params={"q": "OVERTAKE"}).json()

        assert data["total"] == 2
        assert [q["id"] for q in data["items"]] == [1, 2]

    def test_search_filters_and_paging(self, client: TestClient, db: Session) -> None:
        create_questions(db, 5, increment=2, status="draft")
        create_questions(db, 3, start_id=6, increment=1)

        data = client.get(
            "/api/questions/all", params={"increment": 2, "status": "draft", "limit": 2, "skip": 2}
        ).json()

        assert data["total"] == 5
        assert [q["id"] for q in data["items"]] == [3, 4]


class TestWriteQuestions:
    def test_create_assigns_next_id(
        self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]
    ) -> None:
        create_question(db, 41)
        response = client.post("/api/questions", json=_question_body(), headers=auth_headers_admin)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 42
        assert data["status"] == "draft"
        assert data["difficulty"] == "medium"

    def test_created_question_reads_back_unchanged(
        self, client: TestClient, auth_headers_admin: dict[str, str]
    ) -> None:
        body = _question_body(
            explanation="A stop sign requires a full stop.",
            difficulty="hard",
            imageUrl="https://cdn.example.com/signs/stop.png",
            increment=2,
            status="published",
        )
        created = client.post("/api/questions", json=body, headers=auth_headers_admin).json()

        data = client.get("/api/questions/all", params={"q": "octagonal"}).json()

        assert data["total"] == 1
        stored = data["items"][0]
        assert stored["id"] == created["id"]
        for field, value in body.items():
            assert stored[field] == value, field

    def test_create_with_taken_id_conflicts(
        self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]
    ) -> None:
        create_question(db, 7, is_deleted=True)
        response = client.post("/api/questions", json=_question_body(id=7), headers=auth_headers_admin)
        assert response.status_code == 409
        assert response.json()["message"] == "Question id 7 already exists"

    def test_create_rejects_bad_correct_option(
        self, client: TestClient, auth_headers_admin: dict[str, str]
    ) -> None:
        response = client.post("/api/questions", json=_question_body(correct="e"), headers=auth_headers_admin)
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "correct"

    def test_create_rejects_invalid_image_url(
        self, client: TestClient, auth_headers_admin: dict[str, str]
    ) -> None:
        response = client.post(
            "/api/questions", json=_question_body(imageUrl="not a url"), headers=auth_headers_admin
        )
        assert response.status_code == 400

    def test_students_cannot_create(self, client: TestClient, auth_headers_student: dict[str, str]) -> None:
        response = client.post("/api/questions", json=_question_body(), headers=auth_headers_student)
        assert response.status_code == 403

    def test_bulk_insert_numbers_sequentially(
        self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]
    ) -> None:
        create_question(db, 10)
        response = client.post(
            "/api/questions/bulk",
            json=[_question_body(), _question_body(question="What does a yellow line mean?")],
            headers=auth_headers_admin,
        )

        assert response.status_code == 201
        assert response.json() == {"inserted": 2}
        ids = [row.id for row in db.query(Question.id).order_by(Question.id)]
        assert ids == [10, 11, 12]

    def test_bulk_insert_is_all_or_nothing(
        self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]
    ) -> None:
        response = client.post(
            "/api/questions/bulk",
            json=[_question_body(), _question_body(correct="z")],
            headers=auth_headers_admin,
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "1.correct"
        assert db.query(Question).count() == 0

    def test_bulk_insert_requires_array(self, client: TestClient, auth_headers_admin: dict[str, str]) -> None:
        response = client.post("/api/questions/bulk", json=_question_body(), headers=auth_headers_admin)
        assert response.status_code == 400
        assert response.json()["message"] == "Expected an array of questions"

    def test_update_is_partial(self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]) -> None:
        create_question(db, 1, category="Signs", image_url="https://cdn.example.com/a.png", increment=1)

        response = client.put(
            "/api/questions/1",
            json={"correct": "c", "imageUrl": "", "explanation": None},
            headers=auth_headers_admin,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["correct"] == "c"
        assert data["imageUrl"] is None
        assert data["category"] == "Signs"
        assert data["increment"] == 1

    def test_update_can_clear_increment(
        self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]
    ) -> None:
        create_question(db, 1, increment=3)
        data = client.put("/api/questions/1", json={"increment": None}, headers=auth_headers_admin).json()
        assert data["increment"] is None

    def test_update_missing_question(self, client: TestClient, auth_headers_admin: dict[str, str]) -> None:
        response = client.put("/api/questions/99", json={"correct": "b"}, headers=auth_headers_admin)
        assert response.status_code == 404
        assert response.json()["message"] == "Question not found"

    def test_delete_is_soft(self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]) -> None:
        create_question(db, 5)

        response = client.delete("/api/questions/5", headers=auth_headers_admin)

        assert response.status_code == 200
        assert response.json() == {"message": "Question deleted (soft)", "id": 5}
        db.expire_all()
        assert db.query(Question).filter(Question.id == 5).one().is_deleted is True
        assert client.delete("/api/questions/5", headers=auth_headers_admin).status_code == 404

    def test_deleted_question_leaves_reads_and_exams(
        self, client: TestClient, db: Session, auth_headers_admin: dict[str, str]
    ) -> None:
        create_questions(db, 3)

        client.delete("/api/questions/2", headers=auth_headers_admin)

        listed = client.get("/api/questions/all").json()
        assert listed["total"] == 2
        assert [q["id"] for q in listed["items"]] == [1, 3]
        exam = client.get("/api/exams/start", params={"limit": 10}).json()
        assert exam["totalAvailable"] == 2
        assert sorted(q["id"] for q in exam["questions"]) == [1, 3]
