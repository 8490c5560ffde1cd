"""Exception handlers rendering every failure as the API error envelope."""

import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.app_exceptions import AppError, ErrorDetails, code_for_status
from app.core.config import settings
from app.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

VALIDATION_MESSAGE = "Invalid data"
INTERNAL_MESSAGE = "Internal server error"

# Leading ``loc`` entries naming where a parameter came from, not which field it is
_PARAM_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})


class ErrorEnvelope(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str | None = None


def get_request_id(request: Request) -> str:
    """Id assigned by RequestIDMiddleware; a fresh one when the middleware did not run."""
    return getattr(request.state, "request_id", None) or request_id_ctx.get() or str(uuid.uuid4())


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: ErrorDetails = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(
        error_code=code, message=message, details=details, request_id=get_request_id(request)
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump(), headers=headers)


def validation_issues(errors: Iterable[dict[str, Any]], prefix: Sequence[Any] = ()) -> list[dict[str, Any]]:
    """Flatten pydantic errors to ``{field, issue, type}`` with a dotted ``field`` path."""
    issues = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _PARAM_SOURCES:
            loc = loc[1:]
        issues.append(
            {
                "field": ".".join([*(str(p) for p in prefix), *loc]),
                "issue": error.get("msg", "Validation error"),
                "type": error.get("type", "validation_error"),
            }
        )
    return issues


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        VALIDATION_MESSAGE,
        validation_issues(exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        return error_response(request, exc.status_code, exc.code, exc.message, exc.details, exc.headers)
    # Routing 404/405 and bare HTTPExceptions carry a plain message in ``detail``
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(
        request, exc.status_code, code_for_status(exc.status_code), message, headers=exc.headers
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        extra={"method": request.method, "path": request.url.path, "error_type": type(exc).__name__},
        exc_info=exc,
    )
    if settings.is_prod:
        message, details = INTERNAL_MESSAGE, None
    else:
        message, details = str(exc) or INTERNAL_MESSAGE, {"type": type(exc).__name__}
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message, details
    )
