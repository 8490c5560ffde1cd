"""Browser hardening headers added to every response."""

from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.core.config import settings

STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}
HSTS = "max-age=31536000; includeSubDomains"


def no_store_prefixes() -> tuple[str, ...]:
    """Paths whose responses carry tokens or personal data."""
    return (f"{settings.API_PREFIX}/auth", f"{settings.API_PREFIX}/admin", f"{settings.API_PREFIX}/users")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in STATIC_HEADERS.items():
            response.headers.setdefault(name, value)
        if request.url.path.startswith(no_store_prefixes()):
            response.headers["Cache-Control"] = "no-store"
        if settings.is_prod and request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS
        return response
