"""Email/password accounts: register, log in, who-am-I and the password reset round trip."""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.app_exceptions import bad_request, conflict, forbidden, unauthorized
from app.core.config import settings
from app.core.dependencies import get_current_user
from app.core.security import (
    create_access_token,
    generate_password_reset_token,
    hash_password,
    hash_token,
    password_needs_rehash,
    verify_password,
)
from app.core.security_logging import log_security_event
from app.db.session import get_db
from app.models.user import User, UserRole
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserPublic,
)
from app.schemas.base import MessageResponse
from app.services.email.service import send_password_reset_email

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If that email exists, a reset link has been created."


def _user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email)).first()


def _signed_in(user: User) -> AuthResponse:
    return AuthResponse(token=create_access_token(str(user.id), user.role), user=UserPublic.model_validate(user))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Creates a student account and signs it in.",
)
async def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)) -> AuthResponse:
    if _user_by_email(db, payload.email):
        log_security_event(request, "auth_register", "deny", reason_code="CONFLICT")
        raise conflict("Email already registered")

    user = User(
        email=payload.email,
        name=(payload.name or "").strip() or None,
        password_hash=hash_password(payload.password),
        role=UserRole.STUDENT.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_security_event(request, "auth_register", "allow", user_id=str(user.id))
    return _signed_in(user)


@router.post("/login", response_model=AuthResponse, summary="Log in")
async def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)) -> AuthResponse:
    """Google-only accounts are pointed at Google Sign-In; banned and inactive accounts get 403."""
    user = _user_by_email(db, payload.email)
    if user is not None and not user.password_hash:
        raise bad_request("Use Google Sign-In for this account.")
    if user is None or not verify_password(payload.password, user.password_hash):
        log_security_event(request, "auth_login_failed", "deny", reason_code="UNAUTHORIZED")
        raise unauthorized("Invalid credentials")
    if user.banned or not user.is_active:
        log_security_event(request, "auth_login_failed", "deny", reason_code="FORBIDDEN", user_id=str(user.id))
        if user.banned:
            raise forbidden("Account is banned", {"reason": user.banned_reason})
        raise forbidden("Account is inactive")

    user.last_login_at = datetime.now(timezone.utc)
    if password_needs_rehash(user.password_hash):
        user.password_hash = hash_password(payload.password)
    db.commit()

    log_security_event(request, "auth_login_success", "allow", user_id=str(user.id))
    return _signed_in(user)


@router.get("/me", response_model=UserPublic, summary="Current user")
async def me(current_user: User = Depends(get_current_user)) -> UserPublic:
    return UserPublic.model_validate(current_user)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    response_model_exclude_none=True,
    summary="Request password reset",
    description="Answers the same way whether or not the email has an account.",
)
async def forgot_password(
    payload: ForgotPasswordRequest, request: Request, db: Session = Depends(get_db)
) -> ForgotPasswordResponse:
    user = _user_by_email(db, payload.email)
    if user is None:
        return ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE)

    token = generate_password_reset_token()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    user.reset_token_hash, user.reset_token_expires = hash_token(token), expires_at
    db.commit()

    log_security_event(request, "password_reset_requested", "allow", user_id=str(user.id))
    send_password_reset_email(user.email, token)

    if settings.RESET_TOKEN_IN_RESPONSE and not settings.is_prod:
        return ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE, reset_token=token, expires_at=expires_at)
    return ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse, summary="Reset password")
async def reset_password(
    payload: ResetPasswordRequest, request: Request, db: Session = Depends(get_db)
) -> MessageResponse:
    """Tokens are single use: a successful reset clears the stored digest."""
    # Expiry is compared in SQL so naive and aware timestamps never meet
    user = db.scalars(
        select(User).where(
            User.reset_token_hash == hash_token(payload.token),
            User.reset_token_expires > datetime.now(timezone.utc),
        )
    ).first()
    if user is None:
        log_security_event(request, "password_reset_failed", "deny", reason_code="BAD_REQUEST")
        raise bad_request("Invalid or expired token")

    user.password_hash = hash_password(payload.new_password)
    user.reset_token_hash = user.reset_token_expires = None
    db.commit()

    log_security_event(request, "password_reset_completed", "allow", user_id=str(user.id))
    return MessageResponse(message="Password updated successfully")
