"""Admin category and topic management.

Categories and topics are free-text fields on questions; these endpoints
list the distinct values in use and rename or clear them in bulk.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.app_exceptions import bad_request
from app.core.dependencies import require_admin
from app.core.logging import get_logger
from app.db.session import get_db
from app.models.question import Question
from app.models.user import User
from app.schemas.taxonomy import RenameRequest, TaxonomyItem, UpdatedCountResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin - Categories"])


def list_values(db: Session, column) -> list[TaxonomyItem]:
    """Distinct non-empty values of ``column`` over live questions, with counts, sorted by name."""
    rows = (
        db.query(column, func.count(Question.pk))
        .filter(Question.is_deleted.is_(False), column.isnot(None), column != "")
        .group_by(column)
        .order_by(column)
        .all()
    )
    return [TaxonomyItem(name=name, question_count=count) for name, count in rows]


def replace_value(db: Session, column, old: str, new: str | None) -> int:
    """Set ``column`` to ``new`` on every live question currently holding ``old``."""
    updated = (
        db.query(Question)
        .filter(Question.is_deleted.is_(False), column == old)
        .update({column: new}, synchronize_session=False)
    )
    db.commit()
    logger.info(
        "Taxonomy value replaced",
        extra={"field": column.key, "old": old, "new": new, "updated": updated},
    )
    return updated


@router.get("/categories", response_model=list[TaxonomyItem], summary="List categories")
async def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[TaxonomyItem]:
    return list_values(db, Question.category)


@router.get("/topics", response_model=list[TaxonomyItem], summary="List topics")
async def list_topics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[TaxonomyItem]:
    return list_values(db, Question.topic)


@router.patch("/categories/rename", response_model=UpdatedCountResponse, summary="Rename category")
async def rename_category(
    payload: RenameRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UpdatedCountResponse:
    updated = replace_value(db, Question.category, payload.old_name, payload.new_name)
    return UpdatedCountResponse(message="Category renamed", updated=updated)


@router.patch("/topics/rename", response_model=UpdatedCountResponse, summary="Rename topic")
async def rename_topic(
    payload: RenameRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UpdatedCountResponse:
    updated = replace_value(db, Question.topic, payload.old_name, payload.new_name)
    return UpdatedCountResponse(message="Topic renamed", updated=updated)


@router.delete(
    "/categories/{name}",
    response_model=UpdatedCountResponse,
    summary="Remove category",
    description="Clears the category on every question that has it.",
)
async def delete_category(
    name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UpdatedCountResponse:
    if not name.strip():
        raise bad_request("Invalid category name")
    updated = replace_value(db, Question.category, name, None)
    return UpdatedCountResponse(message="Category removed", updated=updated)


@router.delete(
    "/topics/{name}",
    response_model=UpdatedCountResponse,
    summary="Remove topic",
    description="Clears the topic on every question that has it.",
)
async def delete_topic(
    name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UpdatedCountResponse:
    if not name.strip():
        raise bad_request("Invalid topic name")
    updated = replace_value(db, Question.topic, name, None)
    return UpdatedCountResponse(message="Topic removed", updated=updated)
