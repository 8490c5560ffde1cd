"""Admin dashboard endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import require_admin
from app.db.session import get_db
from app.models.user import User
from app.schemas.analytics import AdminOverviewResponse, AnalyticsOverviewResponse
from app.services.analytics_service import get_admin_overview, get_analytics_overview

router = APIRouter(prefix="/admin", tags=["Admin - Dashboard"])


@router.get(
    "/overview",
    response_model=AdminOverviewResponse,
    summary="Dashboard overview",
    description="Counters, 14-day exam trend, questions per increment and pass rate.",
)
async def overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminOverviewResponse:
    return AdminOverviewResponse.model_validate(get_admin_overview(db))


@router.get(
    "/analytics/overview",
    response_model=AnalyticsOverviewResponse,
    summary="Exam analytics",
    description=(
        "Pass/fail split, overall accuracy, the 20 most missed questions and "
        "accuracy per increment."
    ),
)
async def analytics_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AnalyticsOverviewResponse:
    return AnalyticsOverviewResponse.model_validate(get_analytics_overview(db))
