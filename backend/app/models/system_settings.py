"""System settings model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from app.db.base import Base

SETTINGS_ROW_ID = 1
DEFAULT_SYSTEM_NAME = "PROVIQUIZ"
DEFAULT_PASSING_CRITERIA = 60


class SystemSettings(Base):
    """Platform-wide settings (singleton row, id=1)."""

    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID, server_default="1")
    system_name = Column(String(200), nullable=False, default=DEFAULT_SYSTEM_NAME)
    logo_url = Column(String(2048), nullable=True)
    exam_rules = Column(Text, nullable=True)
    passing_criteria = Column(Integer, nullable=False, default=DEFAULT_PASSING_CRITERIA)
    question_randomization = Column(Boolean, nullable=False, default=True)
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    maintenance_message = Column(Text, nullable=True)
    locked_increments = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by_user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    updated_by = relationship("User", foreign_keys=[updated_by_user_id])
