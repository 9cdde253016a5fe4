# archimedes_prep/services/progress_service.py
import logging
from typing import Dict, List
from ..core.database import DatabaseManager, get_db_manager
from ..core.exceptions import TestNotFoundError, UserNotFoundError
from ..core.utils import ScoringUtils
from ..models.schemas import (
    ProgressEntry, ProgressSummary, Question, SaveResultRequest, TopicAccuracy
)

logger = logging.getLogger(__name__)

UNTAGGED_TOPIC = "General"

class ProgressService:
    """Test results: recording them and reporting on them"""

    def __init__(self, db_manager: DatabaseManager = None):
        self.db_manager = db_manager or get_db_manager()

    def save_result(self, request: SaveResultRequest) -> int:
        """Store a finished attempt submitted by a client.

        Score and question count are recomputed from the stored test so every
        stored row agrees with its answers.
        """
        if not self.db_manager.get_user_by_id(request.user_id):
            raise UserNotFoundError()

        test = self.db_manager.get_test(request.test_id)
        if not test:
            raise TestNotFoundError()

        questions = [Question.model_validate(q) for q in test["questions"]]
        correct, score = ScoringUtils.score(questions, request.answers)
        total = len(questions)

        if score != request.score or total != request.total_questions:
            logger.warning(
                f"Client result for test {request.test_id} disagrees with server: "
                f"client {request.score}/{request.total_questions}, server {score}/{total}"
            )

        return self.db_manager.insert_result(
            request.user_id, request.test_id, score, total, request.answers
        )

    def list_progress(self) -> List[ProgressEntry]:
        """Every result with its test's day number and title, oldest first"""
        return [ProgressEntry.model_validate(row) for row in self.db_manager.list_results_with_tests()]

    def get_summary(self, recent: int = 3) -> ProgressSummary:
        entries = self.list_progress()
        scores = [entry.score for entry in entries]

        return ProgressSummary(
            tests_completed=len(entries),
            average_score=ScoringUtils.average(scores),
            best_score=max(scores) if scores else None,
            recent_results=list(reversed(entries[-recent:])) if recent > 0 else []
        )

    def get_topic_breakdown(self) -> List[TopicAccuracy]:
        """Accuracy per question topic across all stored results"""
        questions_by_test: Dict[int, List[Question]] = {}
        seen: Dict[str, int] = {}
        correct: Dict[str, int] = {}

        for entry in self.list_progress():
            if entry.test_id not in questions_by_test:
                test = self.db_manager.get_test(entry.test_id)
                questions_by_test[entry.test_id] = [
                    Question.model_validate(q) for q in (test["questions"] if test else [])
                ]

            for question in questions_by_test[entry.test_id]:
                topic = question.topic or UNTAGGED_TOPIC
                seen[topic] = seen.get(topic, 0) + 1
                if ScoringUtils.is_correct(question, entry.answers.get(str(question.id))):
                    correct[topic] = correct.get(topic, 0) + 1

        return [
            TopicAccuracy(
                topic=topic,
                questions_seen=seen[topic],
                correct=correct.get(topic, 0),
                accuracy=ScoringUtils.percentage(correct.get(topic, 0), seen[topic])
            )
            for topic in sorted(seen)
        ]

def get_progress_service() -> ProgressService:
    return ProgressService()
