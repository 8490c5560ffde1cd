"""Exam delivery and submission schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import CamelModel, as_utc
from app.schemas.question import OptionKey, QuestionOut

ImageFilter = Literal["all", "images", "text"]


class ExamStartResponse(CamelModel):
    questions: list[QuestionOut]
    limit: int
    total_available: int


class AnswerIn(CamelModel):
    question_id: int
    selected: OptionKey | None = None


class ExamSubmitRequest(CamelModel):
    mode: Literal["timed", "practice"] = "timed"
    started_at: datetime
    completed_at: datetime
    answers: list[AnswerIn] = Field(default_factory=list, max_length=500)
    client_session_id: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("started_at", "completed_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class GradedAnswerOut(CamelModel):
    question_id: int
    selected: str | None = None
    correct: str
    is_correct: bool


class ExamSubmitResponse(CamelModel):
    exam_id: UUID
    score: int
    total_questions: int
    duration_seconds: int
    answers: list[GradedAnswerOut]


class ExamSummary(CamelModel):
    id: UUID
    mode: str
    score: int
    total_questions: int
    duration_seconds: int
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None


class ExamStatsResponse(CamelModel):
    exam_count: int
    average_score: float
