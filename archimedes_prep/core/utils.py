# archimedes_prep/core/utils.py
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Tuple

logger = logging.getLogger(__name__)

class CacheManager:
    """Simple TTL cache for generated content"""

    def __init__(self, default_ttl: int = 3600):
        self.default_ttl = default_ttl
        self._cache = {}
        self._timestamps = {}
        self._lock = threading.Lock()

    def get(self, key: str, ttl: int = None) -> Any:
        """Get cached value if not expired"""
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            if key not in self._cache:
                return None

            if time.time() - self._timestamps.get(key, 0) > ttl:
                self._cache.pop(key, None)
                self._timestamps.pop(key, None)
                return None

            return self._cache[key]

    def set(self, key: str, value: Any):
        """Set cached value"""
        with self._lock:
            self._cache[key] = value
            self._timestamps[key] = time.time()

    def clear_expired(self, ttl: int = None):
        """Clear all expired cache entries"""
        ttl = self.default_ttl if ttl is None else ttl
        current_time = time.time()
        with self._lock:
            expired_keys = [key for key, ts in self._timestamps.items() if current_time - ts > ttl]
            for key in expired_keys:
                self._cache.pop(key, None)
                self._timestamps.pop(key, None)

        if expired_keys:
            logger.info(f"🧹 Cache cleanup: removed {len(expired_keys)} entries")

    def __len__(self) -> int:
        return len(self._cache)

class ScoringUtils:
    """Scoring rules shared by live sessions and submitted results"""

    @staticmethod
    def percentage(correct: int, total: int) -> int:
        """correct/total as a whole percentage, halves rounded up"""
        if total <= 0:
            return 0
        return (correct * 200 + total) // (2 * total)

    @staticmethod
    def average(values: List[int]) -> Optional[int]:
        """Mean of whole numbers, halves rounded up; None when empty"""
        if not values:
            return None
        count = len(values)
        return (sum(values) * 2 + count) // (2 * count)

    @staticmethod
    def is_correct(question: Any, answer: Optional[str]) -> bool:
        """Exact, case-sensitive match; no answer is wrong"""
        return answer is not None and answer == question.correct_answer

    @staticmethod
    def count_correct(questions: List[Any], answers: Dict[str, str]) -> int:
        return sum(
            1 for q in questions
            if ScoringUtils.is_correct(q, answers.get(str(q.id)))
        )

    @staticmethod
    def score(questions: List[Any], answers: Dict[str, str]) -> Tuple[int, int]:
        """Return (correct_count, percentage score)"""
        correct = ScoringUtils.count_correct(questions, answers)
        return correct, ScoringUtils.percentage(correct, len(questions))

class DateTimeUtils:
    """Utility functions for date/time operations"""

    @staticmethod
    def get_current_timestamp() -> float:
        """Get current timestamp"""
        return time.time()

    @staticmethod
    def utcnow() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def format_countdown(seconds: int) -> str:
        """Render seconds as m:ss"""
        minutes, secs = divmod(max(seconds, 0), 60)
        return f"{minutes}:{secs:02d}"
