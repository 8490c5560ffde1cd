"""Admin system settings endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import require_admin
from app.core.logging import get_logger
from app.db.session import get_db
from app.models.user import User
from app.schemas.system_settings import SystemSettingsOut, SystemSettingsUpdate
from app.services.system_settings import get_or_create_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/settings", tags=["Admin - Settings"])

# Fields that may be cleared with an explicit null
NULLABLE_FIELDS = frozenset({"logo_url", "exam_rules", "maintenance_message"})


@router.get(
    "",
    response_model=SystemSettingsOut,
    summary="Get system settings",
    description="Created with defaults on first access.",
)
async def get_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> SystemSettingsOut:
    return SystemSettingsOut.model_validate(get_or_create_settings(db))


@router.put(
    "",
    response_model=SystemSettingsOut,
    summary="Update system settings",
    description="Partial update; omitted fields keep their value.",
)
async def update_settings(
    payload: SystemSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> SystemSettingsOut:
    settings_row = get_or_create_settings(db)
    changed = []
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(settings_row, field, value)
        changed.append(field)
    settings_row.updated_by_user_id = current_user.id
    db.commit()
    db.refresh(settings_row)

    logger.info("System settings updated", extra={"fields": changed, "user_id": str(current_user.id)})
    return SystemSettingsOut.model_validate(settings_row)
