"""Exam submission, history and per-user statistics."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.logging import get_logger
from app.models.exam_session import ExamAnswer, ExamSession
from app.models.question import Question
from app.schemas.exam import ExamSubmitRequest
from app.services.grading import grade_answers

logger = get_logger(__name__)

RECENT_EXAMS_LIMIT = 50


def find_submitted(db: Session, user_id: UUID, client_session_id: str) -> ExamSession | None:
    return (
        db.query(ExamSession)
        .options(selectinload(ExamSession.answers))
        .filter(
            ExamSession.user_id == user_id,
            ExamSession.client_session_id == client_session_id,
        )
        .first()
    )


def submit_exam(db: Session, user_id: UUID, payload: ExamSubmitRequest) -> tuple[ExamSession, bool]:
    """
    Grade and persist a submitted exam.

    Correct answers are read from the question bank; whatever the client
    computed is ignored. A question missing from the bank is graded with the
    fallback key.

    Args:
        db: Database session
        user_id: Submitting user
        payload: Validated submission

    Returns:
        Tuple of (exam session, created). ``created`` is False when the same
        ``client_session_id`` was already submitted by this user.
    """
    if payload.client_session_id:
        existing = find_submitted(db, user_id, payload.client_session_id)
        if existing:
            logger.info(
                "Duplicate exam submission ignored",
                extra={"user_id": str(user_id), "exam_id": str(existing.id)},
            )
            return existing, False

    question_ids = {a.question_id for a in payload.answers}
    answer_key: dict[int, str] = {}
    if question_ids:
        rows = db.query(Question.id, Question.correct).filter(Question.id.in_(question_ids)).all()
        answer_key = {row.id: row.correct for row in rows}

    result = grade_answers(((a.question_id, a.selected) for a in payload.answers), answer_key)

    elapsed = (payload.completed_at - payload.started_at).total_seconds()
    duration_seconds = max(0, round(elapsed))

    exam = ExamSession(
        user_id=user_id,
        mode=payload.mode,
        started_at=payload.started_at,
        completed_at=payload.completed_at,
        duration_seconds=duration_seconds,
        score=result.correct_count,
        total_questions=result.total,
        client_session_id=payload.client_session_id,
    )
    exam.answers = [
        ExamAnswer(
            position=position,
            question_id=graded.question_id,
            selected=graded.selected,
            correct=graded.correct,
            is_correct=graded.is_correct,
        )
        for position, graded in enumerate(result.answers)
    ]
    db.add(exam)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent retry with the same client session id won the race
        db.rollback()
        if payload.client_session_id:
            existing = find_submitted(db, user_id, payload.client_session_id)
            if existing:
                return existing, False
        raise
    db.refresh(exam)

    logger.info(
        "Exam submitted",
        extra={
            "user_id": str(user_id),
            "exam_id": str(exam.id),
            "score": exam.score,
            "total_questions": exam.total_questions,
            "duration_seconds": duration_seconds,
        },
    )
    return exam, True


def list_user_exams(db: Session, user_id: UUID, limit: int = RECENT_EXAMS_LIMIT) -> list[ExamSession]:
    """Newest exams of a user first."""
    return (
        db.query(ExamSession)
        .filter(ExamSession.user_id == user_id)
        .order_by(ExamSession.created_at.desc(), ExamSession.completed_at.desc())
        .limit(limit)
        .all()
    )


def user_exam_stats(db: Session, user_id: UUID) -> dict[str, float | int]:
    """Exam count and mean per-exam accuracy (0..1) of a user."""
    rows = (
        db.query(ExamSession.score, ExamSession.total_questions)
        .filter(ExamSession.user_id == user_id)
        .all()
    )
    if not rows:
        return {"exam_count": 0, "average_score": 0.0}
    accuracies = [score / max(total, 1) for score, total in rows]
    return {
        "exam_count": len(rows),
        "average_score": sum(accuracies) / len(accuracies),
    }
