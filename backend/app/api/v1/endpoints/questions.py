"""Question bank endpoints (public reads, admin writes)."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.common.pagination import LimitSkip, clamp_limit, limit_skip_params
from app.core.app_exceptions import AppError, bad_request, conflict, not_found
from app.core.dependencies import require_admin
from app.core.errors import VALIDATION_MESSAGE, validation_issues
from app.core.logging import get_logger
from app.db.session import get_db
from app.models.question import Question
from app.models.user import User
from app.schemas.question import (
    BulkInsertResponse,
    QuestionCreate,
    QuestionDeleteResponse,
    QuestionListResponse,
    QuestionOut,
    QuestionUpdate,
    StatusValue,
)
from app.services.question_bank import (
    active_questions,
    apply_question_fields,
    get_active_question,
    next_question_id,
    search_questions,
    select_exam_questions,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=QuestionListResponse,
    summary="List questions",
    description="Page of questions ordered by id (default 100, max 200), optionally by category.",
)
async def list_questions(
    page: LimitSkip = Depends(limit_skip_params(100, 200)),
    category: str | None = Query(None),
    db: Session = Depends(get_db),
) -> QuestionListResponse:
    query = active_questions(db)
    if category:
        query = query.filter(Question.category == category)
    total = query.count()
    questions = query.order_by(Question.id).offset(page.skip).limit(page.limit).all()
    return QuestionListResponse(items=[QuestionOut.model_validate(q) for q in questions], total=total)


@router.get(
    "/random",
    response_model=list[QuestionOut],
    summary="Random questions",
    description="Unfiltered random batch (default 20, max 50).",
)
async def random_questions(
    limit: int | None = Query(None),
    db: Session = Depends(get_db),
) -> list[QuestionOut]:
    questions, _ = select_exam_questions(db, limit=clamp_limit(limit, 20, 50))
    return [QuestionOut.model_validate(q) for q in questions]


@router.get(
    "/all",
    response_model=QuestionListResponse,
    summary="Search questions",
    description="Paged search over text, options, category, topic and explanation.",
)
async def all_questions(
    page: LimitSkip = Depends(limit_skip_params(50, 200)),
    q: str | None = Query(None, description="Case-insensitive text search"),
    category: str | None = Query(None),
    increment: int | None = Query(None, ge=1, le=3),
    status_filter: StatusValue | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
) -> QuestionListResponse:
    query = search_questions(db, q=q, category=category, increment=increment, status=status_filter)
    total = query.count()
    questions = query.order_by(Question.id).offset(page.skip).limit(page.limit).all()
    return QuestionListResponse(items=[QuestionOut.model_validate(x) for x in questions], total=total)


@router.post(
    "",
    response_model=QuestionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create question",
)
async def create_question(
    payload: QuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> QuestionOut:
    question_id = payload.id or next_question_id(db)
    if db.query(Question.pk).filter(Question.id == question_id).first():
        raise conflict(f"Question id {question_id} already exists")

    question = apply_question_fields(Question(id=question_id), payload.model_dump())
    db.add(question)
    db.commit()
    db.refresh(question)

    logger.info("Question created", extra={"question_id": question.id, "user_id": str(current_user.id)})
    return QuestionOut.model_validate(question)


@router.post(
    "/bulk",
    response_model=BulkInsertResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Bulk create questions",
    description="Validates every item first; ids are assigned sequentially after the current maximum.",
)
async def bulk_create_questions(
    payload: Any = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> BulkInsertResponse:
    if not isinstance(payload, list):
        raise bad_request("Expected an array of questions")

    items: list[QuestionCreate] = []
    issues: list[dict[str, Any]] = []
    for index, raw in enumerate(payload):
        try:
            items.append(QuestionCreate.model_validate(raw))
        except ValidationError as e:
            issues.extend(validation_issues(e.errors(), prefix=(index,)))
    if issues:
        raise AppError(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", VALIDATION_MESSAGE, issues)

    next_id = next_question_id(db)
    for offset, item in enumerate(items):
        db.add(apply_question_fields(Question(id=next_id + offset), item.model_dump()))
    db.commit()

    logger.info("Questions bulk inserted", extra={"count": len(items), "user_id": str(current_user.id)})
    return BulkInsertResponse(inserted=len(items))


@router.put(
    "/{question_id}",
    response_model=QuestionOut,
    summary="Update question",
    description="Partial update. Sending imageUrl as empty or null removes the image.",
)
async def update_question(
    question_id: int,
    payload: QuestionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> QuestionOut:
    question = get_active_question(db, question_id)
    if not question:
        raise not_found("Question not found")

    data = payload.model_dump(exclude_unset=True)
    # Only image_url and increment may be cleared with an explicit null
    data = {k: v for k, v in data.items() if v is not None or k in ("image_url", "increment")}
    apply_question_fields(question, data)
    db.commit()
    db.refresh(question)

    logger.info("Question updated", extra={"question_id": question.id, "user_id": str(current_user.id)})
    return QuestionOut.model_validate(question)


@router.delete(
    "/{question_id}",
    response_model=QuestionDeleteResponse,
    summary="Delete question (soft)",
)
async def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> QuestionDeleteResponse:
    question = get_active_question(db, question_id)
    if not question:
        raise not_found("Question not found")

    question.is_deleted = True
    db.commit()

    logger.info("Question soft-deleted", extra={"question_id": question_id, "user_id": str(current_user.id)})
    return QuestionDeleteResponse(message="Question deleted (soft)", id=question_id)
