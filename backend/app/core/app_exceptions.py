"""Errors raised by endpoints and dependencies.

Every handled failure leaves the API as one JSON envelope::

    {"error_code": "...", "message": "...", "details": ..., "request_id": "..."}

``error_code`` is stable and meant for clients to branch on; ``message`` can
be shown to the user as-is.
"""

from typing import Any, NoReturn

from fastapi import HTTPException, status

ErrorDetails = dict[str, Any] | list[Any] | None

STATUS_ERROR_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_503_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}


def code_for_status(status_code: int) -> str:
    return STATUS_ERROR_CODES.get(status_code, "HTTP_ERROR")


class AppError(HTTPException):
    """HTTPException with an explicit error code; ``code=None`` derives it from the status."""

    def __init__(
        self,
        status_code: int,
        code: str | None,
        message: str,
        details: ErrorDetails = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code = code or code_for_status(status_code)
        self.message = message
        self.details = details


def raise_app_error(status_code: int, code: str, message: str, details: ErrorDetails = None) -> NoReturn:
    raise AppError(status_code, code, message, details)


def bad_request(message: str, details: ErrorDetails = None) -> AppError:
    return AppError(status.HTTP_400_BAD_REQUEST, None, message, details)


def unauthorized(message: str) -> AppError:
    return AppError(status.HTTP_401_UNAUTHORIZED, None, message, headers={"WWW-Authenticate": "Bearer"})


def forbidden(message: str, details: ErrorDetails = None) -> AppError:
    return AppError(status.HTTP_403_FORBIDDEN, None, message, details)


def not_found(message: str) -> AppError:
    return AppError(status.HTTP_404_NOT_FOUND, None, message)


def conflict(message: str) -> AppError:
    return AppError(status.HTTP_409_CONFLICT, None, message)
