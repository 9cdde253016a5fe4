# archimedes_prep/services/learning_service.py
import logging
import markdown
from typing import List
from ..core.ai_services import AIService, get_ai_service
from ..core.config import config
from ..core.utils import CacheManager, DateTimeUtils
from ..models.schemas import LearningTopic, TopicExplanation

logger = logging.getLogger(__name__)

TOPICS = [
    LearningTopic(id="number-sense", title="Number Sense & Systems"),
    LearningTopic(id="arithmetic", title="Arithmetic Operations"),
    LearningTopic(id="rates", title="Rates, Ratios & Proportions"),
    LearningTopic(id="data", title="Data, Stats & Probability"),
    LearningTopic(id="logic", title="Logic & Combinatorics"),
    LearningTopic(id="geometry", title="Geometry & Spatial Reasoning"),
]

class LearningService:
    """Learning center: syllabus topics and on-demand explanations"""

    def __init__(self, ai_service: AIService = None, cache_ttl: int = None):
        self._ai_service = ai_service
        self.cache = CacheManager(config.EXPLANATION_CACHE_SECONDS if cache_ttl is None else cache_ttl)

    @property
    def ai_service(self) -> AIService:
        if self._ai_service is None:
            self._ai_service = get_ai_service()
        return self._ai_service

    def list_topics(self) -> List[LearningTopic]:
        return list(TOPICS)

    @staticmethod
    def resolve_topic(topic: str) -> str:
        """Map a topic id to its title; free text passes through trimmed"""
        topic = topic.strip()
        if not topic:
            raise ValueError("Topic must not be empty")
        for known in TOPICS:
            if known.id == topic.lower():
                return known.title
        return topic

    def explain(self, topic: str) -> TopicExplanation:
        title = self.resolve_topic(topic)
        cache_key = title.lower()

        self.cache.clear_expired()
        cached = self.cache.get(cache_key)
        if cached:
            logger.info(f"✅ Using cached explanation for '{title}'")
            return cached

        content = self.ai_service.explain_topic(title)
        explanation = TopicExplanation(
            topic=title,
            markdown=content,
            html=markdown.markdown(content),
            generated_at=DateTimeUtils.utcnow()
        )

        self.cache.set(cache_key, explanation)
        logger.info(f"✅ Explanation ready for '{title}' ({len(content)} chars)")
        return explanation

# Singleton pattern for learning service
_learning_service = None

def get_learning_service() -> LearningService:
    """Get learning service instance (singleton)"""
    global _learning_service
    if _learning_service is None:
        _learning_service = LearningService()
    return _learning_service

def close_learning_service():
    """Drop cached explanations"""
    global _learning_service
    _learning_service = None
