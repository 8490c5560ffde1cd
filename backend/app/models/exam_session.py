"""Exam session models: one row per submitted exam plus its graded answers."""

import uuid
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class ExamMode(str, PyEnum):
    TIMED = "timed"
    PRACTICE = "practice"


class ExamSession(Base):
    """A submitted exam, graded by the server at submit time."""

    __tablename__ = "exam_sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    mode = Column(String(20), nullable=False, default=ExamMode.TIMED.value)
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False)
    duration_seconds = Column(Integer, nullable=False, default=0)
    score = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    client_session_id = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="exam_sessions")
    answers = relationship(
        "ExamAnswer",
        back_populates="exam_session",
        cascade="all, delete-orphan",
        order_by="ExamAnswer.position",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "client_session_id", name="uq_exam_sessions_user_client_session"),
        Index("ix_exam_sessions_user_created", "user_id", "created_at"),
        Index("ix_exam_sessions_created", "created_at"),
    )

    @property
    def accuracy(self) -> float:
        return self.score / max(self.total_questions, 1)


class ExamAnswer(Base):
    """Graded answer snapshot; ``question_id`` is the numeric Question.id."""

    __tablename__ = "exam_answers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    exam_session_id = Column(
        Uuid, ForeignKey("exam_sessions.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False)
    question_id = Column(Integer, nullable=False)
    selected = Column(String(1), nullable=True)
    correct = Column(String(1), nullable=False)
    is_correct = Column(Boolean, nullable=False)

    exam_session = relationship("ExamSession", back_populates="answers")

    __table_args__ = (
        Index("ix_exam_answers_session", "exam_session_id"),
        Index("ix_exam_answers_question_correct", "question_id", "is_correct"),
    )
