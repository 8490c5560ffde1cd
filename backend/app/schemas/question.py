"""Question bank schemas."""

from datetime import datetime
from typing import Literal

from pydantic import AnyUrl, BaseModel, Field, PositiveInt, TypeAdapter, ValidationError, field_validator

from app.schemas.base import CamelModel

OptionKey = Literal["a", "b", "c", "d"]
Increment = Literal[1, 2, 3]
DifficultyValue = Literal["easy", "medium", "hard"]
StatusValue = Literal["draft", "published"]

_url_adapter = TypeAdapter(AnyUrl)


def normalize_image_url(value: str | None) -> str | None:
    """Blank values clear the image; anything else must be a URL."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("imageUrl must be a valid URL") from None
    return value


class QuestionOptions(BaseModel):
    a: str = Field(..., min_length=1)
    b: str = Field(..., min_length=1)
    c: str = Field(..., min_length=1)
    d: str = Field(..., min_length=1)


class QuestionCreate(CamelModel):
    """Body of POST /questions and of each item in POST /questions/bulk."""

    id: PositiveInt | None = None
    question: str = Field(..., min_length=5)
    options: QuestionOptions
    correct: OptionKey
    explanation: str | None = None
    category: str | None = None
    topic: str | None = None
    difficulty: DifficultyValue = "medium"
    image_url: str | None = None
    increment: Increment | None = None
    status: StatusValue = "draft"

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        return normalize_image_url(v)


class QuestionUpdate(CamelModel):
    """Partial update; only fields present in the body are written."""

    question: str | None = Field(None, min_length=5)
    options: QuestionOptions | None = None
    correct: OptionKey | None = None
    explanation: str | None = None
    category: str | None = None
    topic: str | None = None
    difficulty: DifficultyValue | None = None
    image_url: str | None = None
    increment: Increment | None = None
    status: StatusValue | None = None

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        return normalize_image_url(v)


class QuestionOut(CamelModel):
    id: int
    question: str
    options: dict[str, str]  # imported questions may carry blank options
    correct: OptionKey
    explanation: str | None = None
    category: str | None = None
    topic: str | None = None
    difficulty: str
    image_url: str | None = None
    source: str | None = None
    increment: int | None = None
    status: str
    is_deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuestionListResponse(BaseModel):
    items: list[QuestionOut]
    total: int


class BulkInsertResponse(BaseModel):
    inserted: int


class QuestionDeleteResponse(BaseModel):
    message: str
    id: int
