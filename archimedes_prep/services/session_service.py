# archimedes_prep/services/session_service.py
"""
Assessment sessions: one attempt at one mock test, from the first
question through scoring and result persistence.

A session is In-progress until ``submit()`` runs, either because the user
asked for it (directly or via ``next()`` on the last question) or because
the countdown reached zero. Finished sessions are read-only.
"""
import logging
import threading
import time
from typing import Callable, Dict, List, Optional
from ..core.config import config
from ..core.database import DatabaseManager, get_db_manager
from ..core.exceptions import (
    ArchimedesError, InvalidAnswerError, NoActiveSessionError,
    SessionFinishedError, UserNotFoundError
)
from ..core.utils import DateTimeUtils, ScoringUtils
from ..models.schemas import (
    Question, ReviewItem, SessionReview, SessionState, SubmitResponse, TestDefinition
)
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)

# (user_id, test_id, score, total_questions, answers) -> result id
ResultWriter = Callable[[int, int, int, int, Dict[str, str]], int]


class AssessmentSession:
    """State machine for a single timed attempt"""

    def __init__(self, test: TestDefinition, user_id: int, result_writer: ResultWriter,
                 duration: int = None):
        if not test.questions:
            raise ValueError("Cannot start a session on a test without questions")

        self.test = test
        self.user_id = user_id
        self._result_writer = result_writer

        self.current_question_index = 0
        self.answers: Dict[str, str] = {}
        self.time_left = config.TEST_DURATION_SECONDS if duration is None else duration

        self.finished = False
        self.score: Optional[int] = None
        self.correct_count = 0
        self.result_id: Optional[int] = None
        self.persistence_error: Optional[str] = None

        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._timer_thread: Optional[threading.Thread] = None

    # ==================== Timer ====================

    def start_timer(self):
        """Start the one-second countdown in a background thread"""
        if self._timer_thread and self._timer_thread.is_alive():
            return

        self._timer_thread = threading.Thread(
            target=self._run_countdown,
            name=f"countdown-test-{self.test.id}",
            daemon=True
        )
        self._timer_thread.start()
        logger.info(f"⏱️ Countdown started: {self.time_left}s for test {self.test.id}")

    def _run_countdown(self):
        while not self._stop_event.wait(1):
            self.tick()

    def stop_timer(self):
        """Cancel the countdown; safe to call from any path, repeatedly"""
        self._stop_event.set()

    @property
    def timer_running(self) -> bool:
        return bool(self._timer_thread and self._timer_thread.is_alive() and not self._stop_event.is_set())

    def tick(self, seconds: int = 1) -> Optional[SubmitResponse]:
        """Advance the countdown; submits automatically when it reaches zero"""
        with self._lock:
            if self.finished:
                return None

            self.time_left = max(self.time_left - seconds, 0)
            if self.time_left == 0:
                logger.info(f"⏰ Time expired for test {self.test.id}, submitting")
                return self.submit()
            return None

    # ==================== Navigation & answers ====================

    @property
    def questions(self) -> List[Question]:
        return self.test.questions

    @property
    def total_questions(self) -> int:
        return len(self.test.questions)

    @property
    def current_question(self) -> Question:
        return self.test.questions[self.current_question_index]

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    def _ensure_in_progress(self):
        if self.finished:
            raise SessionFinishedError()

    def record_answer(self, option: str):
        """Select an option for the current question, replacing any earlier choice"""
        with self._lock:
            self._ensure_in_progress()
            question = self.current_question
            if option not in question.options:
                raise InvalidAnswerError(f"'{option}' is not an option for question {question.id}")
            self.answers[str(question.id)] = option

    def jump_to(self, index: int):
        """Go to any question, answered or not"""
        with self._lock:
            self._ensure_in_progress()
            if not 0 <= index < self.total_questions:
                raise InvalidAnswerError(
                    f"Question index {index} out of range 0..{self.total_questions - 1}"
                )
            self.current_question_index = index

    def next(self) -> Optional[SubmitResponse]:
        """Advance one question; on the last question this submits"""
        with self._lock:
            self._ensure_in_progress()
            if self.current_question_index >= self.total_questions - 1:
                return self.submit()
            self.current_question_index += 1
            return None

    def previous(self):
        with self._lock:
            self._ensure_in_progress()
            if self.current_question_index > 0:
                self.current_question_index -= 1

    # ==================== Submission ====================

    def submit(self) -> SubmitResponse:
        """Score the attempt, finish it and persist one result.

        A second call returns the first outcome without writing anything.
        A failed write is kept in ``persistence_error``; the score stands.
        """
        with self._lock:
            if self.finished:
                return self.outcome()

            self.correct_count, self.score = ScoringUtils.score(self.questions, self.answers)
            self.finished = True
            self.stop_timer()
            logger.info(
                f"🏁 Test {self.test.id} finished: {self.correct_count}/{self.total_questions} "
                f"correct, score {self.score}"
            )

            try:
                self.result_id = self._result_writer(
                    self.user_id, self.test.id, self.score, self.total_questions, dict(self.answers)
                )
            except ArchimedesError as e:
                self.persistence_error = e.message
                logger.error(f"❌ Result for test {self.test.id} not saved: {e.message}")

            return self.outcome()

    def outcome(self) -> SubmitResponse:
        if not self.finished:
            raise InvalidAnswerError("Session has not been submitted yet")
        return SubmitResponse(
            score=self.score,
            correct_count=self.correct_count,
            total_questions=self.total_questions,
            answered_count=self.answered_count,
            result_id=self.result_id,
            result_saved=self.result_id is not None,
            error=self.persistence_error
        )

    # ==================== Views ====================

    def state(self) -> SessionState:
        with self._lock:
            return SessionState(
                test_id=self.test.id,
                title=self.test.title,
                current_question_index=self.current_question_index,
                total_questions=self.total_questions,
                question=self.current_question,
                answers=dict(self.answers),
                answered_count=self.answered_count,
                time_left=self.time_left,
                time_left_display=DateTimeUtils.format_countdown(self.time_left),
                finished=self.finished,
                score=self.score
            )

    def review(self) -> SessionReview:
        """Per-question feedback, available once finished"""
        with self._lock:
            if not self.finished:
                raise InvalidAnswerError("Review is available after the test is submitted")

            items = []
            for question in self.questions:
                answer = self.answers.get(str(question.id))
                items.append(ReviewItem(
                    question=question,
                    your_answer=answer,
                    is_correct=ScoringUtils.is_correct(question, answer),
                    explanation=question.explanation
                ))

            return SessionReview(
                test_id=self.test.id,
                title=self.test.title,
                score=self.score,
                answered_count=self.answered_count,
                total_questions=self.total_questions,
                items=items,
                result_saved=self.result_id is not None,
                error=self.persistence_error
            )


class SessionManager:
    """Holds the single active assessment session"""

    def __init__(self, db_manager: DatabaseManager = None, catalog: CatalogService = None):
        self.db_manager = db_manager or get_db_manager()
        self.catalog = catalog or CatalogService(self.db_manager)
        self._session: Optional[AssessmentSession] = None
        self._lock = threading.Lock()

    def start_session(self, test_id: int, start_timer: bool = True) -> AssessmentSession:
        """Begin an attempt; any unfinished previous attempt is discarded"""
        test = self.catalog.get_test(test_id)
        user = self.db_manager.get_user()
        if not user:
            raise UserNotFoundError()

        session = AssessmentSession(test, user["id"], self.db_manager.insert_result)

        with self._lock:
            if self._session and not self._session.finished:
                logger.info(f"Discarding unfinished attempt at test {self._session.test.id}")
            if self._session:
                self._session.stop_timer()
            self._session = session

        if start_timer:
            session.start_timer()

        logger.info(f"✅ Session started for test {test_id} ({session.total_questions} questions)")
        return session

    def current(self) -> AssessmentSession:
        with self._lock:
            if self._session is None:
                raise NoActiveSessionError()
            return self._session

    def close(self):
        """Stop the countdown of whatever session is active"""
        with self._lock:
            if self._session:
                self._session.stop_timer()
            self._session = None

    def health_check(self) -> Dict[str, object]:
        with self._lock:
            session = self._session
        return {
            "status": "healthy",
            "active_session": bool(session and not session.finished),
            "timer_running": bool(session and session.timer_running),
            "timestamp": time.time()
        }

# Singleton pattern for session manager
_session_manager = None

def get_session_manager() -> SessionManager:
    """Get session manager instance (singleton)"""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager()
    return _session_manager

def close_session_manager():
    """Stop the active session and drop the manager"""
    global _session_manager
    if _session_manager:
        _session_manager.close()
        _session_manager = None
