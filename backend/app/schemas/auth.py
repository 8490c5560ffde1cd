"""Request and response bodies of the /auth endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel, DisplayName, NormalizedEmail, Password


class RegisterRequest(BaseModel):
    email: NormalizedEmail
    password: Password
    name: DisplayName = None


class LoginRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: NormalizedEmail


class ResetPasswordRequest(CamelModel):
    token: str = Field(min_length=10)
    new_password: Password


class UserPublic(CamelModel):
    """The signed-in user's own view of their account."""

    id: UUID
    email: str
    name: str | None = None
    role: str
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


class ForgotPasswordResponse(CamelModel):
    """``resetToken`` is only filled outside production, for clients without a mailbox."""

    message: str
    reset_token: str | None = None
    expires_at: datetime | None = None
