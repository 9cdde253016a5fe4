# archimedes_prep/services/catalog_service.py
import logging
from typing import List, Optional
from ..core.ai_services import AIService, get_ai_service
from ..core.database import DatabaseManager, get_db_manager
from ..core.dummy_data import DIAGNOSTIC_QUESTIONS, DIAGNOSTIC_TEST_DAY, DIAGNOSTIC_TEST_TITLE
from ..core.exceptions import TestNotFoundError
from ..models.schemas import CreateTestRequest, Question, TestDefinition, TestSummary

logger = logging.getLogger(__name__)

class CatalogService:
    """Mock test catalog: listing, lookup, creation and generation"""

    def __init__(self, db_manager: DatabaseManager = None, ai_service: AIService = None):
        self.db_manager = db_manager or get_db_manager()
        self._ai_service = ai_service

    @property
    def ai_service(self) -> AIService:
        # resolved lazily so catalog reads never need a configured provider
        if self._ai_service is None:
            self._ai_service = get_ai_service()
        return self._ai_service

    def list_tests(self) -> List[TestSummary]:
        """All tests ordered by day number"""
        return [TestSummary.model_validate(row) for row in self.db_manager.list_tests()]

    def get_test(self, test_id: int) -> TestDefinition:
        """Full test definition including questions"""
        test = self.db_manager.get_test(test_id)
        if not test:
            logger.warning(f"Test not found: {test_id}")
            raise TestNotFoundError()
        return TestDefinition.model_validate(test)

    def create_test(self, day_number: int, title: str, questions: List[Question]) -> int:
        """Store a new test; DuplicateDayError if the day is already used"""
        request = CreateTestRequest(day_number=day_number, title=title, questions=questions)
        payload = [q.model_dump(by_alias=True) for q in request.questions]
        return self.db_manager.insert_test(request.day_number, request.title, payload)

    def next_day_number(self) -> int:
        return self.db_manager.max_day_number() + 1

    def generate_next(self, day_number: Optional[int] = None,
                      topic_focus: Optional[str] = None) -> TestSummary:
        """Ask the content provider for a question set and store it as a new test.

        Nothing is written unless the provider returns a usable question set.
        """
        if day_number is None:
            day_number = self.next_day_number()

        logger.info(f"🚀 Generating mock test for day {day_number}")
        questions = self.ai_service.generate_questions(day_number, topic_focus)

        title = f"Mock Test #{day_number}"
        test_id = self.create_test(day_number, title, questions)
        return TestSummary(id=test_id, day_number=day_number, title=title)

    def seed_if_empty(self) -> bool:
        """Insert the diagnostic test on first start only"""
        if self.db_manager.count_tests() > 0:
            return False

        questions = [Question.model_validate(q) for q in DIAGNOSTIC_QUESTIONS]
        self.create_test(DIAGNOSTIC_TEST_DAY, DIAGNOSTIC_TEST_TITLE, questions)
        logger.info("✅ Seeded diagnostic assessment")
        return True

def get_catalog_service() -> CatalogService:
    """Catalog service bound to the shared database manager"""
    return CatalogService()
