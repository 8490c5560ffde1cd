"""System settings schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.question import normalize_image_url


class SystemSettingsOut(CamelModel):
    system_name: str
    logo_url: str | None = None
    exam_rules: str | None = None
    passing_criteria: int
    question_randomization: bool
    maintenance_mode: bool
    maintenance_message: str | None = None
    locked_increments: list[int] = []
    updated_at: datetime | None = None
    updated_by_user_id: UUID | None = None


class SystemSettingsUpdate(CamelModel):
    """Partial update; omitted fields keep their value."""

    system_name: str | None = Field(None, min_length=1, max_length=200)
    logo_url: str | None = None
    exam_rules: str | None = None
    passing_criteria: int | None = Field(None, ge=0, le=100)
    question_randomization: bool | None = None
    maintenance_mode: bool | None = None
    maintenance_message: str | None = None

    @field_validator("logo_url")
    @classmethod
    def validate_logo_url(cls, v: str | None) -> str | None:
        return normalize_image_url(v)
