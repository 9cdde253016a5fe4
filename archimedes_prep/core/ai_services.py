# archimedes_prep/core/ai_services.py
import json
import logging
import time
from typing import List, Dict, Any, Optional
from groq import Groq
from pydantic import ValidationError
from .config import config
from .dummy_data import DUMMY_QUESTION_TEMPLATES, DUMMY_EXPLANATION
from .exceptions import ContentGenerationError
from .prompts import PromptTemplates, PromptFormatter
from ..models.schemas import Question

logger = logging.getLogger(__name__)

QUESTION_FIELDS = ["id", "text", "options", "correctAnswer", "explanation", "topic"]

class AIService:
    """Content provider client: mock-test question sets and topic explanations.

    Calls are made once; failures surface as ContentGenerationError and the
    caller decides whether to try again.
    """

    def __init__(self, use_dummy: bool = None):
        """Initialize Groq client unless running on dummy data"""
        self.client = None
        self.use_dummy = config.USE_DUMMY_DATA if use_dummy is None else use_dummy

        if not self.use_dummy:
            self._init_groq_client()
        else:
            logger.info("🔧 AI Service in dummy mode - using canned content")

    def _init_groq_client(self):
        """Initialize Groq client"""
        if not config.GROQ_API_KEY:
            raise ContentGenerationError("GROQ_API_KEY not provided")

        self.client = Groq(api_key=config.GROQ_API_KEY, timeout=config.GROQ_TIMEOUT)
        logger.info(f"✅ Groq client initialized (model {config.GROQ_MODEL})")

    # ==================== Question generation ====================

    def generate_questions(self, day_number: int, topic_focus: Optional[str] = None,
                           question_count: int = None) -> List[Question]:
        """Generate a validated question set for a mock test day"""
        if question_count is None:
            question_count = config.QUESTIONS_PER_TEST

        logger.info(f"🤖 Generating {question_count} questions for day {day_number} (dummy: {self.use_dummy})")

        if self.use_dummy:
            return self._generate_dummy_questions(question_count)

        if not self.client:
            raise ContentGenerationError("AI service not available")

        prompt = PromptTemplates.create_mock_test_prompt(day_number, topic_focus, question_count)
        response = self._call_llm(
            prompt=prompt,
            max_tokens=config.GROQ_MAX_TOKENS,
            temperature=config.GROQ_TEMPERATURE,
            json_mode=True
        )

        questions = self.parse_questions(response)
        if len(questions) != question_count:
            logger.warning(f"Generated {len(questions)} usable questions, expected {question_count}")

        logger.info(f"✅ Generated {len(questions)} questions for day {day_number}")
        return questions

    def _generate_dummy_questions(self, question_count: int) -> List[Question]:
        """Cycle through canned questions when no live model is configured"""
        questions = []
        for i in range(question_count):
            template = DUMMY_QUESTION_TEMPLATES[i % len(DUMMY_QUESTION_TEMPLATES)]
            questions.append(Question.model_validate({**template, "id": i + 1}))
        return questions

    @staticmethod
    def parse_questions(response: str) -> List[Question]:
        """Decode and shape-check a question-set response.

        Accepts a bare JSON array or an object with a "questions" array.
        Malformed items are dropped; ids are renumbered 1..n so they stay
        unique within the test.
        """
        try:
            payload = json.loads(PromptFormatter.strip_code_fences(response))
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"❌ Generated content is not valid JSON: {e}")
            raise ContentGenerationError("Generated content is not valid JSON") from e

        if isinstance(payload, dict):
            payload = payload.get("questions")
        if not isinstance(payload, list):
            raise ContentGenerationError("Generated content is not a list of questions")

        questions = []
        for i, item in enumerate(payload, 1):
            if not isinstance(item, dict) or not PromptFormatter.validate_response_format(item, QUESTION_FIELDS):
                logger.warning(f"Discarding generated question {i}: missing fields")
                continue
            try:
                question = Question.model_validate(item)
            except ValidationError as e:
                logger.warning(f"Discarding generated question {i}: {e.errors()[0]['msg']}")
                continue
            questions.append(question.model_copy(update={"id": len(questions) + 1}))

        if not questions:
            raise ContentGenerationError("No valid questions generated")

        return questions

    # ==================== Explanations ====================

    def explain_topic(self, topic: str) -> str:
        """Markdown explanation of a syllabus topic"""
        logger.info(f"🤖 Explaining topic '{topic}' (dummy: {self.use_dummy})")

        if self.use_dummy:
            return DUMMY_EXPLANATION.format(topic=topic)

        if not self.client:
            raise ContentGenerationError("AI service not available")

        prompt = PromptTemplates.create_topic_explanation_prompt(topic)
        return self._call_llm(
            prompt=prompt,
            max_tokens=config.EXPLANATION_MAX_TOKENS,
            temperature=config.EXPLANATION_TEMPERATURE
        )

    # ==================== LLM access ====================

    def _call_llm(self, prompt: str, max_tokens: int = None,
                  temperature: float = None, json_mode: bool = False) -> str:
        """Single chat-completion call; any failure becomes ContentGenerationError"""
        if max_tokens is None:
            max_tokens = config.GROQ_MAX_TOKENS
        if temperature is None:
            temperature = config.GROQ_TEMPERATURE

        request: Dict[str, Any] = {
            "model": config.GROQ_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_completion_tokens": max_tokens,
            "top_p": config.GROQ_TOP_P
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            completion = self.client.chat.completions.create(**request)
        except Exception as e:
            logger.error(f"❌ LLM call failed: {e}")
            raise ContentGenerationError(f"LLM call failed: {e}") from e

        if not completion.choices or not completion.choices[0].message.content:
            raise ContentGenerationError("LLM returned no content")

        return completion.choices[0].message.content.strip()

    def health_check(self) -> Dict[str, Any]:
        """Check AI service health"""
        if self.use_dummy:
            return {
                "status": "healthy",
                "mode": "dummy",
                "client_ready": True,
                "message": "Running in dummy data mode"
            }

        try:
            if not self.client:
                return {"status": "error", "message": "Client not initialized"}

            start_time = time.time()
            test_response = self.client.chat.completions.create(
                model=config.GROQ_MODEL,
                messages=[{"role": "user", "content": "ping"}],
                max_completion_tokens=5
            )
            response_time = time.time() - start_time

            if test_response.choices:
                return {
                    "status": "healthy",
                    "mode": "live",
                    "model": config.GROQ_MODEL,
                    "response_time_ms": round(response_time * 1000, 2),
                    "client_ready": True
                }
            return {"status": "error", "message": "No response from LLM"}

        except Exception as e:
            return {"status": "error", "message": str(e)}

# Singleton pattern for AI service
_ai_service = None

def get_ai_service() -> AIService:
    """Get AI service instance (singleton)"""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service

def close_ai_service():
    """Close AI service instance"""
    global _ai_service
    if _ai_service and _ai_service.client:
        _ai_service.client.close()
    _ai_service = None
