"""
Test Exam Session
Tests the answer sheet lifecycle: answer, submit (lock), reset.
"""
import pytest
from mathquiz.schemas import Rank
from mathquiz.services.session import ExamSession, SessionLockedError


def test_new_session_is_empty(sample_test):
    session = ExamSession(test=sample_test)
    assert session.answers == {}
    assert session.result is None
    assert session.is_graded is False


def test_answer_overwrites(sample_test):
    session = ExamSession(test=sample_test)
    session.answer("q1", "B")
    session.answer("q1", "A")
    assert session.answers == {"q1": "A"}


def test_answer_unknown_question(sample_test):
    session = ExamSession(test=sample_test)
    with pytest.raises(KeyError):
        session.answer("q99", "A")


def test_submit_grades_and_locks(sample_test, all_correct_answers, pick_first):
    session = ExamSession(test=sample_test)
    for question_id, value in all_correct_answers.items():
        session.answer(question_id, value)

    result = session.submit(chooser=pick_first)

    assert session.is_graded
    assert result.score == 10
    assert result.rank == Rank.OUTSTANDING
    with pytest.raises(SessionLockedError):
        session.answer("q1", "B")
    with pytest.raises(SessionLockedError):
        session.submit()
    assert session.answers["q1"] == "A"


def test_reset_allows_retry(sample_test, pick_first):
    session = ExamSession(test=sample_test)
    session.answer("q4", "20")
    first = session.submit(chooser=pick_first)
    assert first.correct_count == 1

    session.reset()

    assert session.is_graded is False
    assert session.answers == {}
    session.answer("q4", "21")
    second = session.submit(chooser=pick_first)
    assert second.correct_count == 0
    assert first.correct_count == 1
