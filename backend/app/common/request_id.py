"""Request correlation: one id per request, echoed in the response and stamped on log lines."""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_CALLER_ID_LENGTH = 128
PROBE_PATHS = frozenset({"/health", "/ready", "/api/health", "/api/ready"})


def _request_id_for(request: Request) -> str:
    """The caller's id when it looks sane, otherwise a new one."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if supplied and len(supplied) <= MAX_CALLER_ID_LENGTH:
        return supplied
    return str(uuid.uuid4())


def _log_level(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if path in PROBE_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one line with its status and latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id_for(request)
        request.state.request_id = request_id
        ctx_token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            logger.log(
                _log_level(request.url.path, status_code),
                "Request handled",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            )
            request_id_ctx.reset(ctx_token)
