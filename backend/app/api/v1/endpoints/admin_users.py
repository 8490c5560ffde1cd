"""Admin user management and exam history endpoints."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.common.pagination import LimitSkip, clamp_limit, limit_skip_params
from app.core.app_exceptions import bad_request, conflict, not_found
from app.core.dependencies import require_admin
from app.core.security import hash_password
from app.core.security_logging import log_security_event
from app.db.session import get_db
from app.models.exam_session import ExamSession
from app.models.user import User
from app.schemas.admin_users import (
    ActivateUpdate,
    AdminExamItem,
    AdminExamListResponse,
    AdminPasswordReset,
    AdminUserCreate,
    AdminUserItem,
    AdminUserListResponse,
    BanUpdate,
    RoleUpdate,
    UserProgressResponse,
)
from app.schemas.base import MessageResponse
from app.schemas.exam import ExamSummary
from app.services.analytics_service import get_user_progress
from app.services.exam_service import list_user_exams

router = APIRouter(prefix="/admin", tags=["Admin - Users"])

DEFAULT_BAN_REASON = "No reason provided"


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("User not found")
    return user


@router.get(
    "/users",
    response_model=AdminUserListResponse,
    summary="List users",
    description="Newest first; q matches email or name.",
)
async def list_users(
    page: LimitSkip = Depends(limit_skip_params(25, 200)),
    q: str | None = Query(None, description="Search by name or email"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminUserListResponse:
    query = db.query(User)
    if q and q.strip():
        term = f"%{q.strip()}%"
        query = query.filter(or_(User.email.ilike(term), User.name.ilike(term)))

    total = query.count()
    users = query.order_by(User.created_at.desc()).offset(page.skip).limit(page.limit).all()
    return AdminUserListResponse(items=[AdminUserItem.model_validate(u) for u in users], total=total)


@router.post(
    "/users",
    response_model=AdminUserItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    payload: AdminUserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminUserItem:
    if db.query(User.id).filter(User.email == payload.email).first():
        raise conflict("Email already registered")

    user = User(
        email=payload.email,
        name=(payload.name or "").strip() or None,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_security_event(
        request,
        event_type="admin_user_created",
        outcome="allow",
        user_id=str(current_user.id),
        target_user_id=str(user.id),
        role=user.role,
    )
    return AdminUserItem.model_validate(user)


@router.patch(
    "/users/{user_id}/role",
    response_model=AdminUserItem,
    summary="Change role",
)
async def update_role(
    user_id: UUID,
    payload: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminUserItem:
    user = _get_user_or_404(db, user_id)
    user.role = payload.role
    db.commit()
    db.refresh(user)

    log_security_event(
        request,
        event_type="admin_role_changed",
        outcome="allow",
        user_id=str(current_user.id),
        target_user_id=str(user.id),
        role=user.role,
    )
    return AdminUserItem.model_validate(user)


@router.patch(
    "/users/{user_id}/activate",
    response_model=AdminUserItem,
    summary="Activate or deactivate",
)
async def set_active(
    user_id: UUID,
    payload: ActivateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminUserItem:
    user = _get_user_or_404(db, user_id)
    user.is_active = payload.active
    db.commit()
    db.refresh(user)
    return AdminUserItem.model_validate(user)


@router.patch(
    "/users/{user_id}/ban",
    response_model=AdminUserItem,
    summary="Ban or unban",
    description="Banning records the time and reason; unbanning clears both.",
)
async def set_banned(
    user_id: UUID,
    payload: BanUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminUserItem:
    user = _get_user_or_404(db, user_id)
    user.banned = payload.banned
    if payload.banned:
        user.banned_at = datetime.now(timezone.utc)
        user.banned_reason = payload.reason or DEFAULT_BAN_REASON
    else:
        user.banned_at = None
        user.banned_reason = None
    db.commit()
    db.refresh(user)

    log_security_event(
        request,
        event_type="admin_user_banned" if payload.banned else "admin_user_unbanned",
        outcome="allow",
        user_id=str(current_user.id),
        target_user_id=str(user.id),
    )
    return AdminUserItem.model_validate(user)


@router.post(
    "/users/{user_id}/reset-password",
    response_model=MessageResponse,
    summary="Set a user's password",
)
async def reset_user_password(
    user_id: UUID,
    payload: AdminPasswordReset,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    user = _get_user_or_404(db, user_id)
    if user.has_google and not user.password_hash:
        raise bad_request("User uses Google Sign-In. Cannot reset password.")

    user.password_hash = hash_password(payload.new_password)
    user.reset_token_hash = None
    user.reset_token_expires = None
    db.commit()

    log_security_event(
        request,
        event_type="admin_password_reset",
        outcome="allow",
        user_id=str(current_user.id),
        target_user_id=str(user.id),
    )
    return MessageResponse(message="Password reset successfully")


@router.get(
    "/users/{user_id}/progress",
    response_model=UserProgressResponse,
    summary="User progress",
    description="Totals over the user's last 100 exams plus the 10 most recent.",
)
async def user_progress(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UserProgressResponse:
    _get_user_or_404(db, user_id)
    progress = get_user_progress(db, user_id)
    progress["recent_exams"] = [ExamSummary.model_validate(e) for e in progress["recent_exams"]]
    return UserProgressResponse(**progress)


@router.get(
    "/users/{user_id}/exams",
    response_model=list[ExamSummary],
    summary="User exam history",
)
async def user_exams(
    user_id: UUID,
    limit: int | None = Query(None, description="Default 50, max 200"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[ExamSummary]:
    _get_user_or_404(db, user_id)
    exams = list_user_exams(db, user_id, limit=clamp_limit(limit, 50, 200))
    return [ExamSummary.model_validate(e) for e in exams]


@router.get(
    "/exams",
    response_model=AdminExamListResponse,
    summary="All exams",
    description="Newest first, each with a summary of the user who took it.",
)
async def list_exams(
    page: LimitSkip = Depends(limit_skip_params(25, 200)),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminExamListResponse:
    total = db.query(func.count(ExamSession.id)).scalar() or 0
    exams = (
        db.query(ExamSession)
        .options(joinedload(ExamSession.user))
        .order_by(ExamSession.created_at.desc(), ExamSession.completed_at.desc())
        .offset(page.skip)
        .limit(page.limit)
        .all()
    )
    return AdminExamListResponse(items=[AdminExamItem.model_validate(e) for e in exams], total=total)
