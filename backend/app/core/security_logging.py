"""Audit trail for sign-ins, password resets and admin actions on accounts.

Events are ordinary log records on the ``proviquiz.audit`` logger so they can
be routed separately. Denials are logged at WARNING, everything else at INFO.
Never pass secrets (passwords, tokens) as extra fields.
"""

import logging
from typing import Any, Literal

from fastapi import Request

from app.core.errors import get_request_id

audit_logger = logging.getLogger("proviquiz.audit")

Outcome = Literal["allow", "deny"]


def get_client_ip(request: Request) -> str:
    # First X-Forwarded-For hop is the client when running behind the proxy
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",", 1)[0].strip()
    if first_hop:
        return first_hop
    return request.client.host if request.client else "unknown"


def log_security_event(
    request: Request,
    event_type: str,
    outcome: Outcome,
    reason_code: str | None = None,
    user_id: str | None = None,
    **fields: Any,
) -> None:
    record: dict[str, Any] = {
        "event_type": event_type,
        "outcome": outcome,
        "request_id": get_request_id(request),
        "ip_address": get_client_ip(request),
        "user_agent": request.headers.get("User-Agent"),
        **{k: v for k, v in (("user_id", user_id), ("reason_code", reason_code)) if v},
        **fields,
    }
    level = logging.WARNING if outcome == "deny" else logging.INFO
    audit_logger.log(level, "audit: %s", event_type, extra=record)
