"""Admin exam configuration endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.app_exceptions import not_found
from app.core.dependencies import require_admin
from app.core.logging import get_logger
from app.db.session import get_db
from app.models.exam_config import ExamConfig
from app.models.question import Question, QuestionStatus
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.exam_config import (
    ExamConfigCreate,
    ExamConfigOut,
    ExamConfigPreview,
    ExamConfigUpdate,
    PreviewQuestion,
)
from app.services.question_bank import active_questions

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/exam-configs", tags=["Admin - Exam Configs"])


def _get_config_or_404(db: Session, config_id: UUID) -> ExamConfig:
    config = db.query(ExamConfig).filter(ExamConfig.id == config_id).first()
    if not config:
        raise not_found("Exam config not found")
    return config


@router.get("", response_model=list[ExamConfigOut], summary="List exam configs")
async def list_configs(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[ExamConfigOut]:
    configs = db.query(ExamConfig).order_by(ExamConfig.created_at.desc()).all()
    return [ExamConfigOut.model_validate(c) for c in configs]


@router.post(
    "",
    response_model=ExamConfigOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create exam config",
)
async def create_config(
    payload: ExamConfigCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ExamConfigOut:
    config = ExamConfig(**payload.model_dump(), created_by=current_user.id)
    db.add(config)
    db.commit()
    db.refresh(config)

    logger.info("Exam config created", extra={"config_id": str(config.id), "user_id": str(current_user.id)})
    return ExamConfigOut.model_validate(config)


@router.get("/{config_id}", response_model=ExamConfigOut, summary="Get exam config")
async def get_config(
    config_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ExamConfigOut:
    return ExamConfigOut.model_validate(_get_config_or_404(db, config_id))


@router.put(
    "/{config_id}",
    response_model=ExamConfigOut,
    summary="Update exam config",
    description="Partial update; omitted fields keep their value.",
)
async def update_config(
    config_id: UUID,
    payload: ExamConfigUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ExamConfigOut:
    config = _get_config_or_404(db, config_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        # time_limit_minutes and description may be cleared
        if value is None and field not in ("time_limit_minutes", "description"):
            continue
        setattr(config, field, value)
    db.commit()
    db.refresh(config)
    return ExamConfigOut.model_validate(config)


@router.delete("/{config_id}", response_model=MessageResponse, summary="Delete exam config")
async def delete_config(
    config_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    config = _get_config_or_404(db, config_id)
    db.delete(config)
    db.commit()

    logger.info("Exam config deleted", extra={"config_id": str(config_id), "user_id": str(current_user.id)})
    return MessageResponse(message="Exam config deleted")


@router.get(
    "/{config_id}/preview",
    response_model=ExamConfigPreview,
    summary="Preview exam config",
    description=(
        "Published questions in the config's increments, ordered by id, capped at "
        "questionCount."
    ),
)
async def preview_config(
    config_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ExamConfigPreview:
    config = _get_config_or_404(db, config_id)
    query = active_questions(db).filter(
        Question.status == QuestionStatus.PUBLISHED.value,
        Question.increment.in_(config.increments or []),
    )
    total_available = query.count()
    questions = query.order_by(Question.id).limit(min(config.question_count, total_available)).all()

    return ExamConfigPreview(
        config=ExamConfigOut.model_validate(config),
        total_available=total_available,
        preview_questions=len(questions),
        questions=[PreviewQuestion.model_validate(q) for q in questions],
    )
