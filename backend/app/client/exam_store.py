"""In-memory exam session state for a client taking an exam.

The store moves through three statuses:

    idle --start_exam--> in_progress --submit_exam--> completed --reset_exam--> idle

A completed exam cannot return to ``in_progress`` without ``reset_exam``.
Remaining time is always recomputed from the wall-clock anchor
(``started_at``), never decremented, so a late or irregular ``tick`` cannot
make the timer drift.

Grading uses :func:`app.services.grading.grade_answers`, the same function
the server uses. The result here is only for immediate feedback; the server
regrades the submission from its own answer key.
"""

import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from app.services.grading import DEFAULT_PASS_MARK_PERCENT, GradeResult, grade_answers


class ExamStatus(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ExamResult:
    grade: GradeResult
    started_at: datetime
    finished_at: datetime
    pass_mark_percent: int = DEFAULT_PASS_MARK_PERCENT

    @property
    def total_questions(self) -> int:
        return self.grade.total

    @property
    def correct_count(self) -> int:
        return self.grade.correct_count

    @property
    def incorrect_count(self) -> int:
        return self.grade.incorrect_count

    @property
    def score_percent(self) -> float:
        return self.grade.score_percent

    @property
    def passed(self) -> bool:
        return self.grade.passed(self.pass_mark_percent)

    @property
    def elapsed_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExamStore:
    """State container for one exam attempt at a time."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _utcnow,
        pass_mark_percent: int = DEFAULT_PASS_MARK_PERCENT,
    ):
        self._clock = clock
        self.pass_mark_percent = pass_mark_percent
        self._clear()

    def _clear(self) -> None:
        self.questions: list[Mapping[str, Any]] = []
        self.status = ExamStatus.IDLE
        self.started_at: datetime | None = None
        self.duration_seconds = 0
        self.current_index = 0
        self.selected_answers: dict[int, str] = {}
        self.result: ExamResult | None = None
        self.client_session_id: str | None = None

    def start_exam(self, questions: Sequence[Mapping[str, Any]], duration_seconds: int) -> None:
        """Load questions and start the clock, discarding any previous attempt."""
        self._clear()
        self.questions = list(questions)
        self.duration_seconds = duration_seconds
        self.status = ExamStatus.IN_PROGRESS
        self.started_at = self._clock()
        self.client_session_id = str(uuid.uuid4())

    def select_answer(self, question_id: int, option_id: str) -> None:
        """Record or replace the answer to a question.

        The question id is not checked against the loaded set; unknown ids are
        simply never graded.
        """
        if self.status == ExamStatus.COMPLETED:
            return
        self.selected_answers[question_id] = option_id

    def go_to_question(self, index: int) -> None:
        self.current_index = max(0, min(index, len(self.questions) - 1))

    @property
    def current_question(self) -> Mapping[str, Any] | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def deadline(self) -> datetime | None:
        if self.started_at is None:
            return None
        return self.started_at + timedelta(seconds=self.duration_seconds)

    def remaining_seconds(self) -> int:
        """Whole seconds left, recomputed from the start anchor on every call."""
        if self.status != ExamStatus.IN_PROGRESS or self.deadline is None:
            return 0
        left = (self.deadline - self._clock()).total_seconds()
        return max(0, int(left))

    def is_expired(self) -> bool:
        return self.status == ExamStatus.IN_PROGRESS and self._clock() >= self.deadline

    def tick(self) -> bool:
        """Poll the timer; force-submits once time is up. Returns True if it submitted."""
        if self.is_expired():
            self.submit_exam()
            return True
        return False

    def submit_exam(self) -> ExamResult | None:
        """
        Grade the loaded questions and complete the exam.

        Does nothing when the exam was never started or has no questions. The
        recorded finish time never exceeds ``started_at + duration_seconds``,
        however late the call comes.
        """
        if self.started_at is None or not self.questions:
            return None
        if self.status == ExamStatus.COMPLETED:
            return self.result

        answer_key = {q["id"]: q["correct"] for q in self.questions}
        grade = grade_answers(
            ((q["id"], self.selected_answers.get(q["id"])) for q in self.questions),
            answer_key,
        )
        finished_at = min(self._clock(), self.deadline)

        self.result = ExamResult(
            grade=grade,
            started_at=self.started_at,
            finished_at=finished_at,
            pass_mark_percent=self.pass_mark_percent,
        )
        self.status = ExamStatus.COMPLETED
        return self.result

    def reset_exam(self) -> None:
        self._clear()

    def submission_payload(self, mode: str = "timed") -> dict[str, Any]:
        """Body for ``POST /exams/submit`` describing the completed attempt."""
        if self.result is None:
            raise RuntimeError("Exam has not been submitted")
        return {
            "mode": mode,
            "startedAt": self.result.started_at.isoformat(),
            "completedAt": self.result.finished_at.isoformat(),
            "answers": [
                {"questionId": a.question_id, "selected": a.selected} for a in self.result.grade.answers
            ],
            "clientSessionId": self.client_session_id,
        }
