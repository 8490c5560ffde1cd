"""Student analytics endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.common.pagination import clamp_limit
from app.core.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.analytics import PerformanceResponse, WeakAreasResponse
from app.services.analytics_service import get_user_performance, get_weak_areas

router = APIRouter()


@router.get(
    "/performance",
    response_model=PerformanceResponse,
    summary="My performance",
    description="Totals, the last 10 exams (oldest first) and accuracy by category and topic.",
)
async def performance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PerformanceResponse:
    return PerformanceResponse.model_validate(get_user_performance(db, current_user.id))


@router.get(
    "/weak-areas",
    response_model=WeakAreasResponse,
    summary="My weak areas",
    description="Lowest-accuracy categories (at least 5 attempts) and most missed questions.",
)
async def weak_areas(
    limit: int | None = Query(None, description="Rows per list (default 10, max 50)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> WeakAreasResponse:
    return WeakAreasResponse.model_validate(
        get_weak_areas(db, current_user.id, limit=clamp_limit(limit, 10, 50))
    )
