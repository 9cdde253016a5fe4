# tests/conftest.py
"""Shared fixtures: a throwaway SQLite file per test and canned content"""
import pytest

from archimedes_prep.core.ai_services import AIService, close_ai_service
from archimedes_prep.core.config import config
from archimedes_prep.core.database import DatabaseManager, close_db_manager
from archimedes_prep.core.exceptions import ContentGenerationError
from archimedes_prep.models.schemas import Question
from archimedes_prep.services.catalog_service import CatalogService
from archimedes_prep.services.learning_service import close_learning_service
from archimedes_prep.services.session_service import close_session_manager

OPTIONS = ["A", "B", "C", "D", "E"]
TOPICS = ["Arithmetic", "Geometry"]


def make_questions(count, correct="A"):
    return [
        Question(
            id=i,
            text=f"Question {i}",
            options=list(OPTIONS),
            correct_answer=correct,
            explanation=f"Because {correct}",
            topic=TOPICS[i % len(TOPICS)]
        )
        for i in range(1, count + 1)
    ]


def reset_singletons():
    close_session_manager()
    close_learning_service()
    close_ai_service()
    close_db_manager()


class FailingAIService:
    """Content provider that always fails"""

    def __init__(self):
        self.calls = 0

    def generate_questions(self, day_number, topic_focus=None, question_count=None):
        self.calls += 1
        raise ContentGenerationError("provider unavailable")

    def explain_topic(self, topic):
        self.calls += 1
        raise ContentGenerationError("provider unavailable")


class CountingAIService(AIService):
    """Dummy-mode provider that records how often it was asked"""

    def __init__(self):
        super().__init__(use_dummy=True)
        self.explain_calls = 0

    def explain_topic(self, topic):
        self.explain_calls += 1
        return super().explain_topic(topic)


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "archimedes-test.db")
    monkeypatch.setattr(config, "DB_PATH", path)
    monkeypatch.setattr(config, "USE_DUMMY_DATA", True)
    reset_singletons()
    yield path
    reset_singletons()


@pytest.fixture
def db(db_path):
    manager = DatabaseManager(db_path)
    manager.ensure_default_user()
    return manager


@pytest.fixture
def catalog(db):
    return CatalogService(db, ai_service=AIService(use_dummy=True))


@pytest.fixture
def seeded_catalog(catalog):
    catalog.seed_if_empty()
    return catalog
