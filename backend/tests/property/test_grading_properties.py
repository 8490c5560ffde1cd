"""Property-based tests for exam grading."""

from hypothesis import given
from hypothesis import strategies as st

from app.services.grading import FALLBACK_CORRECT, grade_answers, is_passing

options = st.sampled_from(["a", "b", "c", "d"])
question_ids = st.integers(min_value=1, max_value=500)


@given(
    answers=st.lists(st.tuples(question_ids, st.none() | options), max_size=60),
    answer_key=st.dictionaries(question_ids, options, max_size=60),
)
def test_counts_add_up(answers, answer_key) -> None:
    result = grade_answers(answers, answer_key)

    assert result.total == len(answers)
    assert result.correct_count + result.incorrect_count == result.total
    assert 0.0 <= result.score_percent <= 100.0
    assert [a.question_id for a in result.answers] == [qid for qid, _ in answers]


@given(answers=st.lists(st.tuples(question_ids, st.none() | options), max_size=30))
def test_missing_questions_use_fallback_key(answers) -> None:
    result = grade_answers(answers, {})
    for graded in result.answers:
        assert graded.correct == FALLBACK_CORRECT
        assert graded.is_correct == (graded.selected == FALLBACK_CORRECT)


@given(question_id=question_ids, correct=options)
def test_unanswered_is_never_correct(question_id, correct) -> None:
    result = grade_answers([(question_id, None)], {question_id: correct})
    assert result.correct_count == 0


@given(
    total=st.integers(min_value=1, max_value=200),
    data=st.data(),
    pass_mark=st.integers(min_value=0, max_value=100),
)
def test_passing_is_monotonic_in_score(total, data, pass_mark) -> None:
    score = data.draw(st.integers(min_value=0, max_value=total - 1))
    if is_passing(score, total, pass_mark):
        assert is_passing(score + 1, total, pass_mark)


@given(score=st.integers(min_value=0, max_value=10), pass_mark=st.integers(min_value=0, max_value=100))
def test_empty_exam_never_passes(score, pass_mark) -> None:
    assert is_passing(score, 0, pass_mark) is False
