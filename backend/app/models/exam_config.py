"""Exam configuration model."""

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class ExamConfig(Base):
    """Named template for composing an exam from published questions."""

    __tablename__ = "exam_configs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    increments = Column(JSON, nullable=False, default=list)  # subset of [1, 2, 3]
    question_count = Column(Integer, nullable=False)
    time_limit_minutes = Column(Integer, nullable=True)
    pass_mark_percent = Column(Integer, nullable=False, default=60)
    randomize_questions = Column(Boolean, nullable=False, default=True)
    randomize_answers = Column(Boolean, nullable=False, default=True)
    enabled = Column(Boolean, nullable=False, default=True)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    creator = relationship("User", foreign_keys=[created_by])
