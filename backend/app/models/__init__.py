"""Database models."""

# Import all models here so Alembic can detect them
from app.models.exam_config import ExamConfig
from app.models.exam_session import ExamAnswer, ExamMode, ExamSession
from app.models.question import Difficulty, Question, QuestionStatus
from app.models.system_settings import SystemSettings
from app.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "Question",
    "QuestionStatus",
    "Difficulty",
    "ExamSession",
    "ExamAnswer",
    "ExamMode",
    "ExamConfig",
    "SystemSettings",
]
