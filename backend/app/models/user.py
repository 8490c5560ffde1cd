"""Accounts: students taking exams and the admins who run the question bank."""

import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class UserRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)


class User(Base):
    """Account of a student or an administrator."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), unique=True, nullable=False, index=True)  # Stored lower-cased
    name = Column(String(255), nullable=True)
    password_hash = Column(String, nullable=True)  # Null for Google-only accounts
    google_id = Column(String(255), unique=True, nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value)
    is_active = Column(Boolean, default=True, nullable=False)
    banned = Column(Boolean, default=False, nullable=False)
    banned_reason = Column(String(500), nullable=True)
    banned_at = Column(DateTime(timezone=True), nullable=True)
    reset_token_hash = Column(String(64), nullable=True, index=True)
    reset_token_expires = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    exam_sessions = relationship("ExamSession", back_populates="user", passive_deletes=True)

    @property
    def has_google(self) -> bool:
        return bool(self.google_id)

    @property
    def is_admin(self) -> bool:
        return self.role in (r.value for r in ADMIN_ROLES)
