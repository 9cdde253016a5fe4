# tests/test_session.py
import threading
import time

import pytest

from archimedes_prep.core.exceptions import (
    InvalidAnswerError, NoActiveSessionError, PersistenceError, SessionFinishedError
)
from archimedes_prep.core.utils import ScoringUtils
from archimedes_prep.models import schemas
from archimedes_prep.services.session_service import AssessmentSession, SessionManager
from tests.conftest import make_questions


class RecordingWriter:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail
        self._lock = threading.Lock()

    def __call__(self, user_id, test_id, score, total_questions, answers):
        with self._lock:
            self.calls.append((user_id, test_id, score, total_questions, answers))
            if self.fail:
                raise PersistenceError("disk full")
            return len(self.calls)


def _session(count=5, writer=None, duration=3600):
    test = schemas.TestDefinition(id=1, day_number=1, title="Practice", questions=make_questions(count))
    return AssessmentSession(test, user_id=1, result_writer=writer or RecordingWriter(), duration=duration)


def _answer(session, index, option):
    session.jump_to(index)
    session.record_answer(option)


@pytest.mark.parametrize("correct,total,expected", [
    (3, 5, 60),
    (2, 3, 67),
    (1, 3, 33),
    (1, 8, 13),
    (0, 25, 0),
    (25, 25, 100),
    (0, 0, 0),
])
def test_percentage_rounds_half_up(correct, total, expected):
    assert ScoringUtils.percentage(correct, total) == expected


def test_three_of_five_scores_sixty():
    writer = RecordingWriter()
    session = _session(writer=writer)
    _answer(session, 0, "A")
    _answer(session, 1, "A")
    _answer(session, 2, "A")
    _answer(session, 3, "B")

    outcome = session.submit()

    assert outcome.score == 60
    assert outcome.correct_count == 3
    assert outcome.answered_count == 4
    assert outcome.result_saved is True
    assert writer.calls == [(1, 1, 60, 5, {"1": "A", "2": "A", "3": "A", "4": "B"})]


def test_answers_are_overwritten_and_case_sensitive():
    session = _session(count=2)
    session.record_answer("B")
    session.record_answer("A")
    assert session.answers == {"1": "A"}

    with pytest.raises(InvalidAnswerError):
        session.record_answer("a")


def test_navigation_bounds():
    session = _session(count=3)
    session.previous()
    assert session.current_question_index == 0

    session.next()
    session.next()
    assert session.current_question_index == 2

    with pytest.raises(InvalidAnswerError):
        session.jump_to(3)
    with pytest.raises(InvalidAnswerError):
        session.jump_to(-1)


def test_next_on_last_question_submits():
    writer = RecordingWriter()
    session = _session(count=2, writer=writer)
    session.record_answer("A")
    assert session.next() is None

    outcome = session.next()
    assert session.finished is True
    assert outcome.score == 50
    assert len(writer.calls) == 1


def test_second_submit_changes_nothing():
    writer = RecordingWriter()
    session = _session(writer=writer)
    session.record_answer("A")

    first = session.submit()
    second = session.submit()

    assert first == second
    assert len(writer.calls) == 1


def test_finished_session_is_read_only():
    session = _session()
    session.submit()

    with pytest.raises(SessionFinishedError):
        session.record_answer("A")
    with pytest.raises(SessionFinishedError):
        session.jump_to(1)
    with pytest.raises(SessionFinishedError):
        session.next()
    with pytest.raises(SessionFinishedError):
        session.previous()


def test_concurrent_submits_write_once():
    writer = RecordingWriter()
    session = _session(writer=writer)
    session.record_answer("A")
    barrier = threading.Barrier(8)
    outcomes = []

    def submit():
        barrier.wait()
        outcomes.append(session.submit())

    threads = [threading.Thread(target=submit) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(writer.calls) == 1
    assert {o.score for o in outcomes} == {20}


def test_tick_to_zero_submits_with_current_answers():
    writer = RecordingWriter()
    session = _session(writer=writer, duration=3)
    session.record_answer("A")

    assert session.tick() is None
    assert session.tick() is None
    outcome = session.tick()

    assert session.finished is True
    assert session.time_left == 0
    assert outcome.score == 20
    assert writer.calls[0][4] == {"1": "A"}

    # further ticks after finishing are ignored
    assert session.tick() is None
    assert len(writer.calls) == 1


def test_countdown_thread_expires_session():
    writer = RecordingWriter()
    session = _session(writer=writer, duration=1)
    session.start_timer()

    deadline = time.time() + 5
    while not session.finished and time.time() < deadline:
        time.sleep(0.05)

    assert session.finished is True
    assert len(writer.calls) == 1


def test_manual_submit_stops_countdown():
    session = _session(duration=100)
    session.start_timer()
    session.submit()
    time.sleep(1.2)
    assert session.time_left >= 99
    assert session.timer_running is False


def test_persistence_failure_is_reported_not_rolled_back():
    writer = RecordingWriter(fail=True)
    session = _session(writer=writer)
    session.record_answer("A")

    outcome = session.submit()

    assert session.finished is True
    assert outcome.score == 20
    assert outcome.result_saved is False
    assert outcome.error == "disk full"
    assert session.review().error == "disk full"


def test_review_lists_every_question():
    session = _session(count=3)
    session.record_answer("A")
    session.jump_to(1)
    session.record_answer("C")

    with pytest.raises(InvalidAnswerError):
        session.review()

    session.submit()
    review = session.review()

    assert [item.your_answer for item in review.items] == ["A", "C", None]
    assert [item.is_correct for item in review.items] == [True, False, False]
    assert review.items[0].explanation == "Because A"
    assert review.answered_count == 2
    assert review.score == 33


def test_state_snapshot():
    session = _session(count=4, duration=125)
    session.jump_to(2)
    state = session.state()
    assert state.current_question_index == 2
    assert state.question.id == 3
    assert state.time_left_display == "2:05"
    assert state.finished is False


def test_manager_persists_submitted_attempt(db, seeded_catalog):
    manager = SessionManager(db, seeded_catalog)
    with pytest.raises(NoActiveSessionError):
        manager.current()

    test_id = seeded_catalog.list_tests()[0].id
    session = manager.start_session(test_id, start_timer=False)
    for index, option in enumerate(["0", "180", "4", "1,234,567,890"]):
        session.jump_to(index)
        session.record_answer(option)

    outcome = manager.current().submit()

    assert outcome.score == 60
    results = db.list_results_with_tests()
    assert len(results) == 1
    assert results[0]["score"] == 60
    assert results[0]["total_questions"] == 5
    assert results[0]["id"] == outcome.result_id


def test_manager_replaces_previous_session(db, seeded_catalog):
    manager = SessionManager(db, seeded_catalog)
    test_id = seeded_catalog.list_tests()[0].id

    first = manager.start_session(test_id)
    second = manager.start_session(test_id, start_timer=False)

    assert manager.current() is second
    assert first.timer_running is False
    assert first.finished is False
    manager.close()
    assert db.list_results_with_tests() == []
