"""Liveness and readiness probes, mounted both at the root and under the API prefix."""

from typing import Literal

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import get_request_id
from app.core.logging import get_logger
from app.db.session import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])

ProbeState = Literal["ok", "down"]


class HealthResponse(BaseModel):
    ok: bool = True


class ReadinessResponse(BaseModel):
    status: ProbeState
    db: ProbeState
    request_id: str


def probe_database(db: Session) -> ProbeState:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database probe failed", extra={"error": str(e)})
        return "down"
    return "ok"


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health() -> HealthResponse:
    """Answers as long as the process serves requests; touches nothing else."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness probe")
async def ready(request: Request, db: Session = Depends(get_db)) -> ReadinessResponse:
    state = probe_database(db)
    return ReadinessResponse(status=state, db=state, request_id=get_request_id(request))
