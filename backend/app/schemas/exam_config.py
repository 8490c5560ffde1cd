"""Exam configuration schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import CamelModel

Increment = Literal[1, 2, 3]


def _dedupe(increments: list[int] | None) -> list[int] | None:
    if increments is None:
        return None
    return sorted(set(increments))


class ExamConfigCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    increments: list[Increment] = Field(..., min_length=1)
    question_count: int = Field(..., ge=1)
    time_limit_minutes: int | None = Field(None, ge=1)
    pass_mark_percent: int = Field(60, ge=0, le=100)
    randomize_questions: bool = True
    randomize_answers: bool = True
    enabled: bool = True

    @field_validator("increments")
    @classmethod
    def dedupe_increments(cls, v: list[int] | None) -> list[int] | None:
        return _dedupe(v)


class ExamConfigUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    increments: list[Increment] | None = Field(None, min_length=1)
    question_count: int | None = Field(None, ge=1)
    time_limit_minutes: int | None = Field(None, ge=1)
    pass_mark_percent: int | None = Field(None, ge=0, le=100)
    randomize_questions: bool | None = None
    randomize_answers: bool | None = None
    enabled: bool | None = None

    @field_validator("increments")
    @classmethod
    def dedupe_increments(cls, v: list[int] | None) -> list[int] | None:
        return _dedupe(v)


class ExamConfigOut(CamelModel):
    id: UUID
    name: str
    description: str | None = None
    increments: list[int]
    question_count: int
    time_limit_minutes: int | None = None
    pass_mark_percent: int
    randomize_questions: bool
    randomize_answers: bool
    enabled: bool
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PreviewQuestion(CamelModel):
    id: int
    question: str
    increment: int | None = None
    category: str | None = None


class ExamConfigPreview(CamelModel):
    config: ExamConfigOut
    total_available: int
    preview_questions: int
    questions: list[PreviewQuestion]
