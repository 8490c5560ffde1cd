"""Factories that write users, questions and graded exams straight to the database."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.exam_session import ExamAnswer, ExamSession
from app.models.question import Question
from app.models.user import User, UserRole

DEFAULT_OPTIONS = {
    "a": "Stop and give way",
    "b": "Slow down",
    "c": "Sound the horn",
    "d": "Speed up",
}


def create_test_user(
    db: Session,
    email: str | None = None,
    password: str | None = "TestPass123!",
    role: UserRole = UserRole.STUDENT,
    **columns: Any,
) -> User:
    """Committed user. ``password=None`` gives a Google-only account; other keywords set columns."""
    columns.setdefault("name", f"Test {role.value}")
    user = User(
        email=(email or f"{role.value}-{uuid.uuid4().hex[:8]}@test.example.com").strip().lower(),
        password_hash=hash_password(password) if password else None,
        role=role.value,
        **columns,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_test_admin(
    db: Session, email: str | None = None, password: str | None = "AdminPass123!", **columns: Any
) -> User:
    return create_test_user(db, email, password, UserRole.ADMIN, **columns)


def create_test_student(
    db: Session, email: str | None = None, password: str | None = "StudentPass123!", **columns: Any
) -> User:
    return create_test_user(db, email, password, UserRole.STUDENT, **columns)


def create_question(db: Session, question_id: int, **kwargs: Any) -> Question:
    """Create one question with id ``question_id``; any column can be overridden."""
    options = kwargs.pop("options", DEFAULT_OPTIONS)
    question = Question(
        id=question_id,
        question=kwargs.pop("question", f"Road sign question number {question_id}?"),
        correct=kwargs.pop("correct", "a"),
        status=kwargs.pop("status", "published"),
        **kwargs,
    )
    question.options = options
    db.add(question)
    db.commit()
    return question


def create_questions(db: Session, count: int, start_id: int = 1, **kwargs: Any) -> list[Question]:
    return [create_question(db, question_id, **kwargs) for question_id in range(start_id, start_id + count)]


def create_exam(
    db: Session,
    user: User,
    answers: list[tuple[int, str | None, str]],
    mode: str = "timed",
    completed_at: datetime | None = None,
    duration_seconds: int = 600,
) -> ExamSession:
    """
    Store a graded exam directly, bypassing the submit endpoint.

    ``answers`` holds ``(question_id, selected, correct)`` triples.
    """
    completed_at = completed_at or datetime.now(timezone.utc)
    exam = ExamSession(
        user_id=user.id,
        mode=mode,
        started_at=completed_at - timedelta(seconds=duration_seconds),
        completed_at=completed_at,
        duration_seconds=duration_seconds,
        score=sum(1 for _, selected, correct in answers if selected == correct),
        total_questions=len(answers),
    )
    exam.answers = [
        ExamAnswer(
            position=position,
            question_id=question_id,
            selected=selected,
            correct=correct,
            is_correct=selected is not None and selected == correct,
        )
        for position, (question_id, selected, correct) in enumerate(answers)
    ]
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam
