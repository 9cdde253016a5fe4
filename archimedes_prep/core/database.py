# archimedes_prep/core/database.py
import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Dict, Any, Optional
from .config import config
from .exceptions import DuplicateDayError, PersistenceError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT DEFAULT 'Student',
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS mock_tests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    day_number INTEGER UNIQUE,
    title TEXT,
    questions_json TEXT
);

CREATE TABLE IF NOT EXISTS test_results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER,
    test_id INTEGER,
    score INTEGER,
    total_questions INTEGER,
    answers_json TEXT,
    completed_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY(user_id) REFERENCES users(id),
    FOREIGN KEY(test_id) REFERENCES mock_tests(id)
);

CREATE TABLE IF NOT EXISTS topic_mastery (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER,
    topic TEXT,
    mastery_level INTEGER DEFAULT 0,
    FOREIGN KEY(user_id) REFERENCES users(id)
);
"""


class DatabaseManager:
    """SQLite-backed store for users, mock tests and test results.

    Question sets and answer maps live in JSON text columns; they are
    encoded and decoded here and nowhere else.
    """

    def __init__(self, db_path: str = None):
        self.db_path = db_path or config.DB_PATH
        logger.info(f"🔄 Initializing Database Manager ({self.db_path})")
        self.init_schema()

    @contextmanager
    def connection(self):
        """Open a connection, commit on success and always close it"""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            logger.error(f"❌ Could not open database {self.db_path}: {e}")
            raise PersistenceError(f"Database unavailable: {e}") from e

        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"❌ Database operation failed: {e}")
            raise PersistenceError(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    def init_schema(self):
        """Create all tables if they don't exist"""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            conn.executescript(SCHEMA)
        logger.info("✅ Database schema ready")

    # ==================== Users ====================

    def ensure_default_user(self, name: str = None) -> Dict[str, Any]:
        """Create the single user on first start, return the existing one otherwise"""
        user = self.get_user()
        if user:
            return user

        name = name or config.DEFAULT_USER_NAME
        with self.connection() as conn:
            conn.execute("INSERT INTO users (name) VALUES (?)", (name,))
        logger.info(f"✅ Created default user '{name}'")
        return self.get_user()

    def get_user(self) -> Optional[Dict[str, Any]]:
        with self.connection() as conn:
            row = conn.execute("SELECT * FROM users ORDER BY id LIMIT 1").fetchone()
        return dict(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self.connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None

    def update_user_name(self, user_id: int, name: str) -> bool:
        with self.connection() as conn:
            cursor = conn.execute("UPDATE users SET name = ? WHERE id = ?", (name, user_id))
        return cursor.rowcount > 0

    # ==================== Mock tests ====================

    def count_tests(self) -> int:
        with self.connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS count FROM mock_tests").fetchone()
        return row["count"]

    def max_day_number(self) -> int:
        with self.connection() as conn:
            row = conn.execute("SELECT MAX(day_number) AS day FROM mock_tests").fetchone()
        return row["day"] or 0

    def list_tests(self) -> List[Dict[str, Any]]:
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT id, day_number, title FROM mock_tests ORDER BY day_number"
            ).fetchall()
        return [dict(row) for row in rows]

    def get_test(self, test_id: int) -> Optional[Dict[str, Any]]:
        """Fetch a full test with its questions expanded from JSON"""
        with self.connection() as conn:
            row = conn.execute("SELECT * FROM mock_tests WHERE id = ?", (test_id,)).fetchone()

        if not row:
            return None

        test = dict(row)
        test["questions"] = json.loads(test.pop("questions_json") or "[]")
        return test

    def insert_test(self, day_number: int, title: str, questions: List[Dict[str, Any]]) -> int:
        """Insert a mock test; raises DuplicateDayError if the day is taken"""
        try:
            with self.connection() as conn:
                cursor = conn.execute(
                    "INSERT INTO mock_tests (day_number, title, questions_json) VALUES (?, ?, ?)",
                    (day_number, title, json.dumps(questions))
                )
        except sqlite3.IntegrityError as e:
            logger.warning(f"Duplicate day_number {day_number}: {e}")
            raise DuplicateDayError() from e

        logger.info(f"✅ Stored mock test '{title}' for day {day_number} (id {cursor.lastrowid})")
        return cursor.lastrowid

    # ==================== Results ====================

    def insert_result(self, user_id: int, test_id: int, score: int,
                      total_questions: int, answers: Dict[str, str]) -> int:
        """Insert one test result and return its id"""
        try:
            with self.connection() as conn:
                cursor = conn.execute(
                    """INSERT INTO test_results (user_id, test_id, score, total_questions, answers_json)
                    VALUES (?, ?, ?, ?, ?)""",
                    (user_id, test_id, score, total_questions, json.dumps(answers))
                )
        except sqlite3.IntegrityError as e:
            logger.error(f"❌ Result rejected by storage: {e}")
            raise PersistenceError(f"Result rejected by storage: {e}") from e

        logger.info(f"✅ Saved result {cursor.lastrowid}: test {test_id}, score {score}")
        return cursor.lastrowid

    def list_results_with_tests(self) -> List[Dict[str, Any]]:
        """All results joined with their test's day number and title, oldest first"""
        with self.connection() as conn:
            rows = conn.execute(
                """SELECT tr.*, mt.day_number, mt.title
                FROM test_results tr
                JOIN mock_tests mt ON tr.test_id = mt.id
                ORDER BY tr.completed_at ASC, tr.id ASC"""
            ).fetchall()

        results = []
        for row in rows:
            result = dict(row)
            result["answers"] = json.loads(result.pop("answers_json") or "{}")
            results.append(result)
        return results

    # ==================== Health ====================

    def validate_connection(self) -> Dict[str, Any]:
        """Validate database access"""
        status = {"sqlite": False, "tables": [], "overall": False}
        try:
            with self.connection() as conn:
                rows = conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
                ).fetchall()
            status["tables"] = [row["name"] for row in rows]
            status["sqlite"] = True
            status["overall"] = {"users", "mock_tests", "test_results", "topic_mastery"}.issubset(
                status["tables"]
            )
        except PersistenceError as e:
            logger.error(f"❌ Database validation failed: {e}")
        return status

    def close(self):
        """Connections are per operation; nothing stays open"""
        logger.info("✅ Database manager closed")

# Singleton pattern for database manager
_db_manager = None

def get_db_manager() -> DatabaseManager:
    """Get database manager instance (singleton)"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager

def close_db_manager():
    """Close database manager instance"""
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None
