# archimedes_prep/models/__init__.py
"""
Pydantic models and schemas for request/response validation
"""

from .schemas import (
    Question,
    TestSummary,
    TestDefinition,
    User,
    ProgressEntry,
    ProgressSummary,
    TopicAccuracy,
    SessionState,
    SubmitResponse,
    SessionReview
)

__all__ = [
    "Question",
    "TestSummary",
    "TestDefinition",
    "User",
    "ProgressEntry",
    "ProgressSummary",
    "TopicAccuracy",
    "SessionState",
    "SubmitResponse",
    "SessionReview"
]
