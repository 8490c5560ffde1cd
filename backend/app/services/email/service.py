"""The mail the application sends, and which backend sends it."""

from app.core.config import settings
from app.core.logging import get_logger
from app.services.email.base import EmailProvider, OutgoingEmail
from app.services.email.console import ConsoleEmailProvider
from app.services.email.smtp import SMTPEmailProvider

logger = get_logger(__name__)

RESET_SUBJECT = "Reset your PROVIQUIZ password"

_provider: EmailProvider | None = None


def _provider_from_settings() -> EmailProvider:
    if settings.EMAIL_BACKEND == "smtp":
        return SMTPEmailProvider(
            host=settings.EMAIL_HOST,
            port=settings.EMAIL_PORT,
            from_email=settings.EMAIL_FROM,
            use_tls=settings.EMAIL_USE_TLS,
            use_ssl=settings.EMAIL_USE_SSL,
        )
    return ConsoleEmailProvider()


def get_email_service() -> EmailProvider:
    global _provider
    if _provider is None:
        _provider = _provider_from_settings()
        logger.info("Email backend ready", extra={"backend": settings.EMAIL_BACKEND})
    return _provider


def set_email_service(provider: EmailProvider | None) -> None:
    """Swap the backend; ``None`` makes the next send rebuild it from settings."""
    global _provider
    _provider = provider


def password_reset_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}{settings.RESET_PASSWORD_PATH}?token={token}"


def send_password_reset_email(to: str, token: str) -> bool:
    """Mail the reset link. A delivery failure is logged and returns False; the request still succeeds."""
    body = (
        "We received a request to reset your PROVIQUIZ password.\n\n"
        f"Open this link within {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes to choose a new one:\n"
        f"{password_reset_link(token)}\n\n"
        "If you did not ask for this, you can ignore this email."
    )
    try:
        get_email_service().send(OutgoingEmail(to=to, subject=RESET_SUBJECT, body_text=body))
    except OSError as e:  # smtplib errors included
        logger.error("Password reset email failed", extra={"email_to": to, "error": str(e)})
        return False
    return True
