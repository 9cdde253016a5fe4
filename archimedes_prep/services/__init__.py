# archimedes_prep/services/__init__.py
"""
Business logic services for the catalog, assessment sessions, progress and learning
"""

from .catalog_service import get_catalog_service
from .learning_service import get_learning_service
from .progress_service import get_progress_service
from .session_service import get_session_manager
from .user_service import get_user_service

__all__ = [
    "get_catalog_service",
    "get_learning_service",
    "get_progress_service",
    "get_session_manager",
    "get_user_service"
]
