"""Schemas for admin user management."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel, DisplayName, NormalizedEmail, Password
from app.schemas.exam import ExamSummary

RoleValue = Literal["student", "admin", "superadmin"]


class AdminUserItem(CamelModel):
    """User as listed in the admin console."""

    id: UUID
    email: str
    name: str | None = None
    role: str
    created_at: datetime | None = None
    has_google: bool = False
    active: bool = Field(True, validation_alias="is_active")
    banned: bool = False
    banned_reason: str | None = None
    banned_at: datetime | None = None


class AdminUserListResponse(BaseModel):
    items: list[AdminUserItem]
    total: int


class AdminUserCreate(BaseModel):
    email: NormalizedEmail
    password: Password
    name: DisplayName = None
    role: RoleValue = "student"


class RoleUpdate(BaseModel):
    role: RoleValue


class ActivateUpdate(BaseModel):
    active: bool


class BanUpdate(BaseModel):
    banned: bool
    reason: str | None = Field(None, max_length=500)


class AdminPasswordReset(CamelModel):
    new_password: Password


class UserProgressResponse(CamelModel):
    total_exams: int
    total_questions: int
    total_correct: int
    average_accuracy: float
    recent_exams: list[ExamSummary]


class ExamUserSummary(CamelModel):
    id: UUID
    email: str
    name: str | None = None
    role: str


class AdminExamItem(ExamSummary):
    user: ExamUserSummary | None = None


class AdminExamListResponse(BaseModel):
    items: list[AdminExamItem]
    total: int
