# tests/test_learning.py
import pytest

from archimedes_prep.core.exceptions import ContentGenerationError
from archimedes_prep.services.learning_service import LearningService
from tests.conftest import CountingAIService, FailingAIService


def test_six_syllabus_topics():
    topics = LearningService(ai_service=CountingAIService()).list_topics()
    assert [t.id for t in topics] == ["number-sense", "arithmetic", "rates", "data", "logic", "geometry"]


def test_explain_resolves_topic_id_and_renders_html():
    service = LearningService(ai_service=CountingAIService())
    explanation = service.explain("geometry")

    assert explanation.topic == "Geometry & Spatial Reasoning"
    assert explanation.markdown.startswith("## Geometry & Spatial Reasoning")
    assert "<h2>Geometry &amp; Spatial Reasoning</h2>" in explanation.html
    assert "<strong>" in explanation.html


def test_free_text_topic_passes_through():
    service = LearningService(ai_service=CountingAIService())
    assert service.explain("  Modular arithmetic ").topic == "Modular arithmetic"


def test_blank_topic_rejected():
    with pytest.raises(ValueError):
        LearningService(ai_service=CountingAIService()).explain("   ")


def test_explanations_are_cached():
    provider = CountingAIService()
    service = LearningService(ai_service=provider)

    first = service.explain("logic")
    second = service.explain("Logic & Combinatorics")

    assert first == second
    assert provider.explain_calls == 1


def test_expired_cache_asks_again():
    provider = CountingAIService()
    service = LearningService(ai_service=provider, cache_ttl=-1)

    service.explain("data")
    service.explain("data")

    assert provider.explain_calls == 2


def test_provider_failure_propagates_and_is_not_cached():
    provider = FailingAIService()
    service = LearningService(ai_service=provider)

    with pytest.raises(ContentGenerationError):
        service.explain("rates")

    assert len(service.cache) == 0
