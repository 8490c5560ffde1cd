"""Question bank queries shared by the public and admin endpoints."""

import random
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.core.logging import get_logger
from app.models.question import OPTION_KEYS, Question, has_image

logger = get_logger(__name__)

IMAGE_FILTERS = ("all", "images", "text")


def active_questions(db: Session) -> Query:
    """Base query for every read: soft-deleted questions are never returned."""
    return db.query(Question).filter(Question.is_deleted.is_(False))


def get_active_question(db: Session, question_id: int) -> Question | None:
    return active_questions(db).filter(Question.id == question_id).first()


def next_question_id(db: Session) -> int:
    """Next free numeric id. Soft-deleted rows keep their id reserved."""
    current = db.query(func.max(Question.id)).scalar()
    return (current or 0) + 1


def search_questions(
    db: Session,
    q: str | None = None,
    category: str | None = None,
    increment: int | None = None,
    status: str | None = None,
) -> Query:
    """Filtered question query; ``q`` matches text, options and taxonomy, case-insensitively."""
    query = active_questions(db)
    if q and q.strip():
        term = f"%{q.strip()}%"
        query = query.filter(
            or_(
                Question.question.ilike(term),
                Question.option_a.ilike(term),
                Question.option_b.ilike(term),
                Question.option_c.ilike(term),
                Question.option_d.ilike(term),
                Question.category.ilike(term),
                Question.topic.ilike(term),
                Question.explanation.ilike(term),
            )
        )
    if category:
        query = query.filter(Question.category == category)
    if increment is not None:
        query = query.filter(Question.increment == increment)
    if status:
        query = query.filter(Question.status == status)
    return query


def apply_question_fields(question: Question, data: dict[str, Any]) -> Question:
    """Copy validated schema data (snake_case keys) onto a Question row."""
    for field, value in data.items():
        if field == "options":
            if value is not None:
                for key in OPTION_KEYS:
                    setattr(question, f"option_{key}", value[key])
        elif field == "id":
            continue
        else:
            setattr(question, field, value)
    return question


def select_exam_questions(
    db: Session,
    limit: int,
    range_start: int | None = None,
    range_end: int | None = None,
    image_filter: str = "all",
    rng: random.Random | None = None,
) -> tuple[list[Question], int]:
    """
    Pick a random batch of questions for an exam.

    The filtered pool is shuffled in memory (Fisher-Yates via ``Random.shuffle``)
    and the first ``limit`` questions are returned.

    Args:
        db: Database session
        limit: Maximum number of questions to return
        range_start: Lowest question id to include (inclusive)
        range_end: Highest question id to include (inclusive)
        image_filter: "all", "images" (only with a picture) or "text" (only without)
        rng: Random source, injectable for reproducible tests

    Returns:
        Tuple of (selected questions, size of the filtered pool)
    """
    query = active_questions(db)
    if range_start is not None:
        query = query.filter(Question.id >= range_start)
    if range_end is not None:
        query = query.filter(Question.id <= range_end)

    pool = query.order_by(Question.id).all()
    if image_filter == "images":
        pool = [q for q in pool if has_image(q.image_url)]
    elif image_filter == "text":
        pool = [q for q in pool if not has_image(q.image_url)]

    total_available = len(pool)
    (rng or random.SystemRandom()).shuffle(pool)

    logger.debug(
        "Exam questions selected",
        extra={
            "pool_size": total_available,
            "limit": limit,
            "image_filter": image_filter,
            "range_start": range_start,
            "range_end": range_end,
        },
    )
    return pool[:limit], total_available
