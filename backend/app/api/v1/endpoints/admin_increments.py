"""Admin increment management.

Questions are grouped into three study increments. A locked increment is
read-only: questions cannot be assigned to it or reordered within it.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.core.app_exceptions import bad_request, conflict
from app.core.dependencies import require_admin
from app.core.logging import get_logger
from app.db.session import get_db
from app.models.question import INCREMENTS, Question, QuestionStatus
from app.models.user import User
from app.schemas.increment import (
    IncrementQuestion,
    IncrementStats,
    LockRequest,
    LockResponse,
    QuestionIdsRequest,
    ReorderResponse,
)
from app.schemas.taxonomy import UpdatedCountResponse
from app.services.question_bank import active_questions
from app.services.system_settings import is_increment_locked, set_increment_lock

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/increments", tags=["Admin - Increments"])


def valid_increment(increment: int = Path(...)) -> int:
    if increment not in INCREMENTS:
        raise bad_request("Invalid increment (must be 1, 2, or 3)")
    return increment


def _ensure_unlocked(db: Session, increment: int) -> None:
    if is_increment_locked(db, increment):
        raise conflict(f"Increment {increment} is locked")


@router.get("/stats", response_model=list[IncrementStats], summary="Increment statistics")
async def increment_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[IncrementStats]:
    published = func.sum(case((Question.status == QuestionStatus.PUBLISHED.value, 1), else_=0))
    draft = func.sum(case((Question.status == QuestionStatus.DRAFT.value, 1), else_=0))
    rows = (
        db.query(Question.increment, func.count(Question.pk), published, draft)
        .filter(Question.is_deleted.is_(False), Question.increment.in_(INCREMENTS))
        .group_by(Question.increment)
        .order_by(Question.increment)
        .all()
    )
    return [
        IncrementStats(
            increment=increment,
            total=total,
            published=int(published_count or 0),
            draft=int(draft_count or 0),
        )
        for increment, total, published_count, draft_count in rows
    ]


@router.get(
    "/{increment}/questions",
    response_model=list[IncrementQuestion],
    summary="Questions in an increment",
    description="Ordered by custom position when set, then by id.",
)
async def increment_questions(
    increment: int = Depends(valid_increment),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[IncrementQuestion]:
    questions = (
        active_questions(db)
        .filter(Question.increment == increment)
        .order_by(Question.increment_position.is_(None), Question.increment_position, Question.id)
        .all()
    )
    return [IncrementQuestion.model_validate(q) for q in questions]


@router.patch("/{increment}/assign", response_model=UpdatedCountResponse, summary="Assign questions")
async def assign_questions(
    payload: QuestionIdsRequest,
    increment: int = Depends(valid_increment),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UpdatedCountResponse:
    _ensure_unlocked(db, increment)
    updated = (
        db.query(Question)
        .filter(Question.is_deleted.is_(False), Question.id.in_(payload.question_ids))
        .update({Question.increment: increment}, synchronize_session=False)
    )
    db.commit()

    logger.info(
        "Questions assigned to increment",
        extra={"increment": increment, "updated": updated, "user_id": str(current_user.id)},
    )
    return UpdatedCountResponse(message="Questions assigned", updated=updated)


@router.patch(
    "/{increment}/reorder",
    response_model=ReorderResponse,
    summary="Reorder questions",
    description="Questions take the position of their id in the list and are moved into the increment.",
)
async def reorder_questions(
    payload: QuestionIdsRequest,
    increment: int = Depends(valid_increment),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ReorderResponse:
    _ensure_unlocked(db, increment)
    questions = {
        q.id: q for q in active_questions(db).filter(Question.id.in_(payload.question_ids)).all()
    }
    for position, question_id in enumerate(payload.question_ids):
        question = questions.get(question_id)
        if question is None:
            continue
        question.increment = increment
        question.increment_position = position
    db.commit()

    return ReorderResponse(message="Questions reordered", count=len(payload.question_ids))


@router.patch("/{increment}/lock", response_model=LockResponse, summary="Lock or unlock")
async def lock_increment(
    payload: LockRequest,
    increment: int = Depends(valid_increment),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> LockResponse:
    settings_row = set_increment_lock(db, increment, payload.locked)
    settings_row.updated_by_user_id = current_user.id
    db.commit()

    logger.info(
        "Increment lock changed",
        extra={"increment": increment, "locked": payload.locked, "user_id": str(current_user.id)},
    )
    return LockResponse(
        message="Increment locked" if payload.locked else "Increment unlocked",
        increment=increment,
        locked=payload.locked,
    )
