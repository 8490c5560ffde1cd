"""Increment management schemas."""

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel


class IncrementQuestion(CamelModel):
    id: int
    question: str
    category: str | None = None
    topic: str | None = None
    status: str
    increment: int | None = None
    increment_position: int | None = None


class QuestionIdsRequest(CamelModel):
    question_ids: list[int] = Field(..., min_length=1, max_length=5000)


class LockRequest(BaseModel):
    locked: bool


class ReorderResponse(BaseModel):
    message: str
    count: int


class LockResponse(BaseModel):
    message: str
    increment: int
    locked: bool


class IncrementStats(BaseModel):
    increment: int
    total: int
    published: int
    draft: int
