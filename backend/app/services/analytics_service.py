"""Reporting queries over submitted exams.

Exam answers live in ``exam_answers`` (one row per answered question) so the
per-question and per-increment reports are plain GROUP BY / JOIN queries. The
join to ``questions`` is an outer join on the numeric id; answers whose
question is gone (or soft-deleted) are still counted but carry no text.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from app.models.exam_config import ExamConfig
from app.models.exam_session import ExamAnswer, ExamSession
from app.models.question import Question, QuestionStatus
from app.models.user import User
from app.services.system_settings import pass_mark_percent


TREND_DAYS = 14
MOST_MISSED_LIMIT = 20
UNCATEGORIZED = "uncategorized"
WEAK_AREA_MIN_ATTEMPTS = 5


def _ratio(numerator: int | float | None, denominator: int | float | None) -> float:
    if not denominator:
        return 0.0
    return (numerator or 0) / denominator


def _question_join():
    """Outer-join condition from an answer to its live question."""
    return and_(Question.id == ExamAnswer.question_id, Question.is_deleted.is_(False))


def _passing_filter(pass_mark: int):
    return and_(
        ExamSession.total_questions > 0,
        ExamSession.score * 100 >= pass_mark * ExamSession.total_questions,
    )


def count_passed(db: Session, pass_mark: int) -> int:
    return db.query(func.count(ExamSession.id)).filter(_passing_filter(pass_mark)).scalar() or 0


def exam_trend(db: Session, days: int = TREND_DAYS, now: datetime | None = None) -> list[dict[str, Any]]:
    """
    Exams per day and accuracy (correct / questions) over the last ``days`` days.

    Only days with at least one exam are returned, oldest first.
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=days)
    rows = (
        db.query(ExamSession.created_at, ExamSession.score, ExamSession.total_questions)
        .filter(ExamSession.created_at >= since)
        .all()
    )

    by_day: dict[date, dict[str, int]] = {}
    for created_at, score, total in rows:
        bucket = by_day.setdefault(created_at.date(), {"exams": 0, "correct": 0, "questions": 0})
        bucket["exams"] += 1
        bucket["correct"] += score
        bucket["questions"] += total

    return [
        {
            "date": day.isoformat(),
            "exams": bucket["exams"],
            "accuracy": _ratio(bucket["correct"], bucket["questions"]),
        }
        for day, bucket in sorted(by_day.items())
    ]


def questions_by_increment(db: Session) -> list[dict[str, int]]:
    """Total and published question counts per increment (live questions only)."""
    published = func.sum(case((Question.status == QuestionStatus.PUBLISHED.value, 1), else_=0))
    rows = (
        db.query(Question.increment, func.count(Question.pk), published)
        .filter(Question.is_deleted.is_(False), Question.increment.isnot(None))
        .group_by(Question.increment)
        .order_by(Question.increment)
        .all()
    )
    return [
        {"increment": increment, "total": total, "published": int(published_count or 0)}
        for increment, total, published_count in rows
    ]


def get_admin_overview(db: Session, now: datetime | None = None) -> dict[str, Any]:
    """Dashboard counters, 14-day trend, per-increment counts and pass rate."""
    user_count = db.query(func.count(User.id)).scalar() or 0
    question_count = (
        db.query(func.count(Question.pk)).filter(Question.is_deleted.is_(False)).scalar() or 0
    )
    exam_count = db.query(func.count(ExamSession.id)).scalar() or 0
    active_configs = (
        db.query(func.count(ExamConfig.id)).filter(ExamConfig.enabled.is_(True)).scalar() or 0
    )
    passed = count_passed(db, pass_mark_percent(db))

    return {
        "user_count": user_count,
        "question_count": question_count,
        "exam_count": exam_count,
        "trend": exam_trend(db, now=now),
        "questions_by_increment": questions_by_increment(db),
        "pass_rate": _ratio(passed, exam_count),
        "active_exam_configs": active_configs,
    }


def most_missed_questions(
    db: Session,
    limit: int = MOST_MISSED_LIMIT,
    user_id: UUID | None = None,
) -> list[dict[str, Any]]:
    """Questions answered incorrectly most often, optionally for one user."""
    missed = func.count(ExamAnswer.id).label("missed_count")
    query = db.query(ExamAnswer.question_id, missed).filter(ExamAnswer.is_correct.is_(False))
    if user_id is not None:
        query = query.join(ExamSession, ExamSession.id == ExamAnswer.exam_session_id).filter(
            ExamSession.user_id == user_id
        )
    top = (
        query.group_by(ExamAnswer.question_id)
        .order_by(missed.desc(), ExamAnswer.question_id)
        .limit(limit)
        .subquery()
    )

    rows = (
        db.query(
            top.c.question_id,
            top.c.missed_count,
            Question.question,
            Question.category,
            Question.topic,
            Question.increment,
        )
        .outerjoin(
            Question,
            and_(Question.id == top.c.question_id, Question.is_deleted.is_(False)),
        )
        .order_by(top.c.missed_count.desc(), top.c.question_id)
        .all()
    )
    return [
        {
            "question_id": row.question_id,
            "missed_count": row.missed_count,
            "question": row.question,
            "category": row.category,
            "topic": row.topic,
            "increment": row.increment,
        }
        for row in rows
    ]


def average_by_increment(db: Session) -> list[dict[str, Any]]:
    """Accuracy of all graded answers grouped by the question's increment."""
    correct = func.sum(case((ExamAnswer.is_correct.is_(True), 1), else_=0))
    rows = (
        db.query(Question.increment, correct, func.count(ExamAnswer.id))
        .select_from(ExamAnswer)
        .outerjoin(Question, _question_join())
        .group_by(Question.increment)
        .all()
    )
    # Unknown increment (None) sorts first
    rows.sort(key=lambda row: (row[0] is not None, row[0] or 0))
    return [
        {
            "increment": increment,
            "average_accuracy": _ratio(int(total_correct or 0), total),
            "total_questions": total,
        }
        for increment, total_correct, total in rows
    ]


def get_analytics_overview(db: Session) -> dict[str, Any]:
    """Pass/fail split, global accuracy, most missed questions, per-increment accuracy."""
    total_exams, total_correct, total_questions = db.query(
        func.count(ExamSession.id),
        func.coalesce(func.sum(ExamSession.score), 0),
        func.coalesce(func.sum(ExamSession.total_questions), 0),
    ).one()
    passed = count_passed(db, pass_mark_percent(db))

    return {
        "total_exams": total_exams,
        "passed": passed,
        "failed": total_exams - passed,
        "pass_rate": _ratio(passed, total_exams),
        "average_accuracy": _ratio(total_correct, total_questions),
        "most_failed_questions": most_missed_questions(db),
        "average_by_increment": average_by_increment(db),
    }


def _accuracy_by(db: Session, user_id: UUID, column) -> list[dict[str, Any]]:
    label = func.coalesce(column, UNCATEGORIZED)
    correct = func.sum(case((ExamAnswer.is_correct.is_(True), 1), else_=0))
    rows = (
        db.query(label, func.count(ExamAnswer.id), correct)
        .select_from(ExamAnswer)
        .join(ExamSession, ExamSession.id == ExamAnswer.exam_session_id)
        .outerjoin(Question, _question_join())
        .filter(ExamSession.user_id == user_id)
        .group_by(label)
        .all()
    )
    stats = [
        {
            "name": name,
            "total": total,
            "correct": int(total_correct or 0),
            "accuracy": _ratio(int(total_correct or 0), total),
        }
        for name, total, total_correct in rows
    ]
    stats.sort(key=lambda s: (-s["total"], s["name"]))
    return stats


def get_user_performance(db: Session, user_id: UUID) -> dict[str, Any]:
    """Student dashboard: totals, last 10 exams (oldest first), accuracy by category/topic."""
    exam_count, total_correct, total_questions, total_duration = (
        db.query(
            func.count(ExamSession.id),
            func.coalesce(func.sum(ExamSession.score), 0),
            func.coalesce(func.sum(ExamSession.total_questions), 0),
            func.coalesce(func.sum(ExamSession.duration_seconds), 0),
        )
        .filter(ExamSession.user_id == user_id)
        .one()
    )

    recent_exams = (
        db.query(ExamSession)
        .filter(ExamSession.user_id == user_id)
        .order_by(ExamSession.created_at.desc(), ExamSession.completed_at.desc())
        .limit(10)
        .all()
    )
    recent = [
        {
            "created_at": exam.created_at,
            "mode": exam.mode,
            "accuracy": exam.accuracy,
            "score": exam.score,
            "total_questions": exam.total_questions,
            "duration_seconds": exam.duration_seconds,
        }
        for exam in reversed(recent_exams)
    ]

    return {
        "exam_count": exam_count,
        "average_accuracy": _ratio(total_correct, max(total_questions, 1)),
        "total_duration_seconds": total_duration,
        "recent": recent,
        "by_category": [
            {"category": s.pop("name"), **s} for s in _accuracy_by(db, user_id, Question.category)
        ],
        "by_topic": [{"topic": s.pop("name"), **s} for s in _accuracy_by(db, user_id, Question.topic)],
    }


def get_weak_areas(db: Session, user_id: UUID, limit: int = 10) -> dict[str, Any]:
    """Lowest-accuracy categories (with enough attempts) and most missed questions of a user."""
    categories = [
        s for s in _accuracy_by(db, user_id, Question.category) if s["total"] >= WEAK_AREA_MIN_ATTEMPTS
    ]
    categories.sort(key=lambda s: (s["accuracy"], -s["total"]))

    most_missed = [
        {
            **row,
            "category": row["category"] or UNCATEGORIZED,
            "topic": row["topic"] or UNCATEGORIZED,
        }
        for row in most_missed_questions(db, limit=limit, user_id=user_id)
    ]
    return {
        "worst_categories": [{"category": s.pop("name"), **s} for s in categories[:limit]],
        "most_missed": most_missed,
    }


def get_user_progress(db: Session, user_id: UUID, window: int = 100) -> dict[str, Any]:
    """Admin view of one student's last ``window`` exams."""
    exams = (
        db.query(ExamSession)
        .filter(ExamSession.user_id == user_id)
        .order_by(ExamSession.created_at.desc(), ExamSession.completed_at.desc())
        .limit(window)
        .all()
    )
    total_questions = sum(e.total_questions for e in exams)
    total_correct = sum(e.score for e in exams)
    return {
        "total_exams": len(exams),
        "total_questions": total_questions,
        "total_correct": total_correct,
        "average_accuracy": _ratio(total_correct, total_questions),
        "recent_exams": exams[:10],
    }
