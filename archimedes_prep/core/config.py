# archimedes_prep/core/config.py
import os
from pathlib import Path
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

class Config:
    """Centralized configuration management"""

    # ==================== API Configuration ====================
    API_TITLE = "Archimedes Prep API"
    API_DESCRIPTION = "Exam preparation backend: mock tests, learning center and progress reports"
    API_VERSION = "1.0.0"

    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

    # ==================== Database Configuration ====================
    DB_PATH = os.getenv("DB_PATH", "archimedes.db")
    DEFAULT_USER_NAME = os.getenv("DEFAULT_USER_NAME", "Archimedes Scholar")

    # ==================== Development Settings ====================
    USE_DUMMY_DATA = os.getenv("USE_DUMMY_DATA", "true").lower() == "true"

    # ==================== Mock Test Configuration ====================
    QUESTIONS_PER_TEST = int(os.getenv("QUESTIONS_PER_TEST", "25"))
    OPTIONS_PER_QUESTION = int(os.getenv("OPTIONS_PER_QUESTION", "5"))
    PROGRAM_DAYS = int(os.getenv("PROGRAM_DAYS", "25"))

    # Countdown for a single attempt (seconds)
    TEST_DURATION_SECONDS = int(os.getenv("TEST_DURATION_SECONDS", "3600"))  # 1 hour

    # Syllabus topics the generator spreads questions across
    SYLLABUS_TOPICS = [
        "Number Sense",
        "Arithmetic",
        "Rates & Ratios",
        "Data & Probability",
        "Logic & Combinatorics",
        "Geometry",
    ]

    # ==================== AI Service Configuration ====================
    # Groq settings
    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    GROQ_TIMEOUT = int(os.getenv("GROQ_TIMEOUT", "120"))
    GROQ_TEMPERATURE = float(os.getenv("GROQ_TEMPERATURE", "0.7"))
    GROQ_MAX_TOKENS = int(os.getenv("GROQ_MAX_TOKENS", "8000"))
    GROQ_TOP_P = float(os.getenv("GROQ_TOP_P", "0.9"))

    # Explanations
    EXPLANATION_TEMPERATURE = float(os.getenv("EXPLANATION_TEMPERATURE", "0.5"))
    EXPLANATION_MAX_TOKENS = int(os.getenv("EXPLANATION_MAX_TOKENS", "2000"))
    EXPLANATION_CACHE_SECONDS = int(os.getenv("EXPLANATION_CACHE_SECONDS", "86400"))  # 24 hours

    # ==================== Environment Overrides ====================
    @classmethod
    def from_env(cls) -> 'Config':
        """Create config with environment variable overrides"""
        return cls()

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==================== Validation ====================
    def validate(self) -> Dict[str, Any]:
        """Validate configuration and return status"""
        issues = []

        if self.QUESTIONS_PER_TEST < 1:
            issues.append("QUESTIONS_PER_TEST must be at least 1")

        if self.OPTIONS_PER_QUESTION < 2:
            issues.append("OPTIONS_PER_QUESTION must be at least 2")

        if self.TEST_DURATION_SECONDS < 1:
            issues.append("TEST_DURATION_SECONDS must be at least 1")

        if not self.DB_PATH:
            issues.append("DB_PATH must not be empty")

        if not self.USE_DUMMY_DATA and not self.GROQ_API_KEY:
            issues.append("GROQ_API_KEY is required when not using dummy data")

        return {
            "valid": len(issues) == 0,
            "issues": issues,
            "config_loaded": True,
            "using_dummy_data": self.USE_DUMMY_DATA
        }

# Global configuration instance
config = Config.from_env()

# Validate on import
validation_result = config.validate()
if not validation_result["valid"]:
    import logging
    logger = logging.getLogger(__name__)
    logger.warning(f"Configuration issues: {validation_result['issues']}")
