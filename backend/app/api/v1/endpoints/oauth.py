"""Google sign-in endpoints."""

from urllib.parse import urlencode

import httpx
import jwt
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.core.app_exceptions import raise_app_error
from app.core.config import settings
from app.core.logging import get_logger
from app.core.oauth import GoogleOAuthAdapter, get_google_adapter
from app.core.security import create_access_token, create_oauth_state, verify_oauth_state
from app.core.security_logging import log_security_event
from app.db.session import get_db
from app.models.user import User, UserRole

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_REDIRECT = "/exam"


def _safe_redirect(value: str | None) -> str:
    """Only same-site paths are accepted as post-login redirects."""
    if not value or not value.startswith("/") or value.startswith("//"):
        return DEFAULT_REDIRECT
    return value


def _frontend_redirect(params: dict[str, str]) -> RedirectResponse:
    base = settings.FRONTEND_URL.rstrip("/")
    return RedirectResponse(
        url=f"{base}/oauth/callback?{urlencode(params)}",
        status_code=status.HTTP_302_FOUND,
    )


def find_or_create_google_user(db: Session, email: str, google_id: str, name: str | None) -> User:
    """Match by email; link the Google id to an existing account or create a new one."""
    email = email.lower().strip()
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=name, google_id=google_id, role=UserRole.STUDENT.value)
        db.add(user)
    elif not user.google_id:
        user.google_id = google_id
        if not user.name and name:
            user.name = name
    db.commit()
    db.refresh(user)
    return user


@router.get(
    "/google",
    summary="Start Google sign-in",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def google_login(
    redirect: str | None = Query(None, description="Client path to return to after sign-in"),
    adapter: GoogleOAuthAdapter = Depends(get_google_adapter),
) -> RedirectResponse:
    if not adapter.configured:
        raise_app_error(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            code="OAUTH_NOT_CONFIGURED",
            message="Google Sign-In is not configured",
        )
    state = create_oauth_state(_safe_redirect(redirect))
    return RedirectResponse(url=adapter.get_authorize_url(state), status_code=status.HTTP_302_FOUND)


@router.get(
    "/google/callback",
    summary="Google sign-in callback",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
)
async def google_callback(
    request: Request,
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
    db: Session = Depends(get_db),
    adapter: GoogleOAuthAdapter = Depends(get_google_adapter),
) -> RedirectResponse:
    if error or not code or not state:
        log_security_event(request, event_type="oauth_callback", outcome="deny", reason_code=error or "MISSING_CODE")
        return _frontend_redirect({"error": error or "missing_code"})

    try:
        redirect = _safe_redirect(verify_oauth_state(state).get("redirect"))
    except jwt.InvalidTokenError:
        log_security_event(request, event_type="oauth_callback", outcome="deny", reason_code="INVALID_STATE")
        return _frontend_redirect({"error": "invalid_state"})

    try:
        tokens = await adapter.exchange_code_for_tokens(code)
        claims = await adapter.validate_id_token(tokens["id_token"])
    except (httpx.HTTPError, KeyError, ValueError) as e:
        logger.warning(f"Google sign-in failed: {e}")
        log_security_event(request, event_type="oauth_callback", outcome="deny", reason_code="TOKEN_EXCHANGE")
        return _frontend_redirect({"error": "google_auth_failed"})

    user = find_or_create_google_user(db, claims["email"], str(claims["sub"]), claims.get("name"))
    if user.banned or not user.is_active:
        log_security_event(
            request, event_type="oauth_callback", outcome="deny", reason_code="FORBIDDEN", user_id=str(user.id)
        )
        return _frontend_redirect({"error": "account_disabled"})

    log_security_event(request, event_type="oauth_callback", outcome="allow", user_id=str(user.id))
    token = create_access_token(str(user.id), user.role)
    return _frontend_redirect({"token": token, "redirect": redirect})
