"""Exam delivery and submission endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.exam import (
    ExamStartResponse,
    ExamStatsResponse,
    ExamSubmitRequest,
    ExamSubmitResponse,
    ExamSummary,
    GradedAnswerOut,
    ImageFilter,
)
from app.schemas.question import QuestionOut
from app.services.exam_service import list_user_exams, submit_exam, user_exam_stats
from app.services.question_bank import select_exam_questions

router = APIRouter()

MAX_EXAM_QUESTIONS = 200


@router.api_route(
    "/start",
    methods=["GET", "POST"],
    response_model=ExamStartResponse,
    summary="Start an exam",
    description=(
        "Random batch of questions. Optional inclusive id range and image filter; "
        "totalAvailable is the size of the filtered pool before the batch is cut."
    ),
)
async def start_exam(
    limit: int | None = Query(None, ge=1, le=MAX_EXAM_QUESTIONS),
    range_start: int | None = Query(None, alias="rangeStart", ge=1),
    range_end: int | None = Query(None, alias="rangeEnd", ge=1),
    image_filter: ImageFilter = Query("all", alias="imageFilter"),
    db: Session = Depends(get_db),
) -> ExamStartResponse:
    limit = limit or settings.EXAM_DEFAULT_LIMIT
    questions, total_available = select_exam_questions(
        db,
        limit=limit,
        range_start=range_start,
        range_end=range_end,
        image_filter=image_filter,
    )
    return ExamStartResponse(
        questions=[QuestionOut.model_validate(q) for q in questions],
        limit=limit,
        total_available=total_available,
    )


@router.post(
    "/submit",
    response_model=ExamSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an exam",
    description=(
        "Grades the answers against the question bank and stores the exam. "
        "Resubmitting the same clientSessionId returns the stored exam with 200."
    ),
)
async def submit(
    payload: ExamSubmitRequest,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExamSubmitResponse:
    exam, created = submit_exam(db, current_user.id, payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return ExamSubmitResponse(
        exam_id=exam.id,
        score=exam.score,
        total_questions=exam.total_questions,
        duration_seconds=exam.duration_seconds,
        answers=[GradedAnswerOut.model_validate(a) for a in exam.answers],
    )


@router.get(
    "/mine",
    response_model=list[ExamSummary],
    summary="My recent exams",
)
async def my_exams(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ExamSummary]:
    return [ExamSummary.model_validate(e) for e in list_user_exams(db, current_user.id)]


@router.get(
    "/stats",
    response_model=ExamStatsResponse,
    summary="My exam statistics",
)
async def my_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExamStatsResponse:
    return ExamStatsResponse(**user_exam_stats(db, current_user.id))
