"""Question bank model."""

import uuid
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.sql import func

from app.db.base import Base

OPTION_KEYS = ("a", "b", "c", "d")
INCREMENTS = (1, 2, 3)

# imageUrl values that mean "this question has no picture"
NO_IMAGE_SENTINELS = frozenset({"n/a", "na", "none", "-"})


class QuestionStatus(str, PyEnum):
    """Question publication status."""

    DRAFT = "draft"
    PUBLISHED = "published"


class Difficulty(str, PyEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def has_image(image_url: str | None) -> bool:
    """Return True when ``image_url`` points at an actual picture."""
    if image_url is None:
        return False
    value = image_url.strip()
    if not value:
        return False
    return value.lower() not in NO_IMAGE_SENTINELS


class Question(Base):
    """Multiple-choice question with four options.

    ``id`` is the numeric, application-assigned identifier used by the API and
    by exam answers. ``pk`` is the storage key and never leaves the database.
    """

    __tablename__ = "questions"

    pk = Column(Uuid, primary_key=True, default=uuid.uuid4)
    id = Column(Integer, nullable=False)
    question = Column(Text, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)
    option_c = Column(Text, nullable=False)
    option_d = Column(Text, nullable=False)
    correct = Column(String(1), nullable=False)
    explanation = Column(Text, nullable=True)
    category = Column(String(200), nullable=True)
    topic = Column(String(200), nullable=True)
    difficulty = Column(String(10), nullable=False, default=Difficulty.MEDIUM.value)
    image_url = Column(String(2048), nullable=True)
    source = Column(String(200), nullable=True)
    increment = Column(Integer, nullable=True)
    increment_position = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default=QuestionStatus.DRAFT.value)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("correct IN ('a', 'b', 'c', 'd')", name="ck_questions_correct"),
        CheckConstraint("increment IS NULL OR increment IN (1, 2, 3)", name="ck_questions_increment"),
        Index("ix_questions_id", "id", unique=True),
        Index("ix_questions_deleted_status", "is_deleted", "status"),
        Index("ix_questions_increment", "increment"),
        Index("ix_questions_category", "category"),
    )

    @property
    def options(self) -> dict[str, str]:
        return {
            "a": self.option_a,
            "b": self.option_b,
            "c": self.option_c,
            "d": self.option_d,
        }

    @options.setter
    def options(self, value: dict[str, str]) -> None:
        for key in OPTION_KEYS:
            setattr(self, f"option_{key}", value[key])

    @property
    def has_image(self) -> bool:
        return has_image(self.image_url)
