"""Exam grading.

This is the only place correctness is decided. The server calls it with the
answer key read from the question bank when an exam is submitted; the client
exam store calls it with the answer key shipped alongside the questions to
show a result immediately. Only the server result is persisted.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

DEFAULT_PASS_MARK_PERCENT = 60

# Answer key used for a question that no longer exists in the bank
FALLBACK_CORRECT = "a"


@dataclass(frozen=True)
class GradedAnswer:
    question_id: int
    selected: str | None
    correct: str
    is_correct: bool


@dataclass(frozen=True)
class GradeResult:
    answers: list[GradedAnswer]

    @property
    def total(self) -> int:
        return len(self.answers)

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)

    @property
    def incorrect_count(self) -> int:
        # Unanswered questions count as incorrect
        return self.total - self.correct_count

    @property
    def score_percent(self) -> float:
        if not self.total:
            return 0.0
        return self.correct_count / self.total * 100

    def passed(self, pass_mark_percent: int = DEFAULT_PASS_MARK_PERCENT) -> bool:
        return is_passing(self.correct_count, self.total, pass_mark_percent)


def grade_answers(
    answers: Iterable[tuple[int, str | None]],
    answer_key: Mapping[int, str],
) -> GradeResult:
    """
    Grade ``(question_id, selected)`` pairs against an answer key.

    Args:
        answers: Selected option per question, ``None`` when unanswered
        answer_key: Correct option keyed by numeric question id

    Returns:
        GradeResult with one graded answer per input pair, in input order
    """
    graded = []
    for question_id, selected in answers:
        correct = answer_key.get(question_id, FALLBACK_CORRECT)
        graded.append(
            GradedAnswer(
                question_id=question_id,
                selected=selected,
                correct=correct,
                is_correct=selected is not None and selected == correct,
            )
        )
    return GradeResult(answers=graded)


def is_passing(score: int, total: int, pass_mark_percent: int = DEFAULT_PASS_MARK_PERCENT) -> bool:
    """An exam passes when ``score / total`` reaches the pass mark. Empty exams never pass."""
    if total <= 0:
        return False
    return score * 100 >= pass_mark_percent * total
