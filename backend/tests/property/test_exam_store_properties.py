"""Property-based tests for the exam timer."""

from datetime import datetime, timedelta, timezone

from hypothesis import given
from hypothesis import strategies as st

from app.client.exam_store import ExamStatus, ExamStore

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


class SteppingClock:
    def __init__(self):
        self.now = START

    def __call__(self) -> datetime:
        return self.now


@given(
    duration=st.integers(min_value=1, max_value=7200),
    steps=st.lists(st.floats(min_value=0, max_value=900, allow_nan=False), max_size=30),
)
def test_finish_never_exceeds_time_limit(duration, steps) -> None:
    clock = SteppingClock()
    store = ExamStore(clock=clock)
    store.start_exam([{"id": 1, "correct": "a"}], duration_seconds=duration)

    for step in steps:
        clock.now += timedelta(seconds=step)
        assert 0 <= store.remaining_seconds() <= duration
        store.tick()

    store.submit_exam()
    assert store.status == ExamStatus.COMPLETED
    assert 0 <= store.result.elapsed_seconds <= duration


@given(
    duration=st.integers(min_value=1, max_value=3600),
    elapsed=st.floats(min_value=0, max_value=10_000, allow_nan=False),
)
def test_remaining_matches_wall_clock(duration, elapsed) -> None:
    clock = SteppingClock()
    store = ExamStore(clock=clock)
    store.start_exam([{"id": 1, "correct": "a"}], duration_seconds=duration)

    clock.now = START + timedelta(seconds=elapsed)

    expected = max(0, int(duration - (clock.now - START).total_seconds()))
    assert store.remaining_seconds() == expected


@given(
    correct=st.lists(st.sampled_from("abcd"), min_size=1, max_size=40),
    data=st.data(),
)
def test_result_counts_add_up(correct, data) -> None:
    clock = SteppingClock()
    store = ExamStore(clock=clock)
    questions = [{"id": i, "correct": c} for i, c in enumerate(correct, start=1)]
    store.start_exam(questions, duration_seconds=600)

    for q in questions:
        choice = data.draw(st.none() | st.sampled_from("abcd"))
        if choice is not None:
            store.select_answer(q["id"], choice)

    result = store.submit_exam()
    assert result.correct_count + result.incorrect_count == len(questions)
