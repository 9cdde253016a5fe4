# archimedes_prep/core/prompts.py
from typing import List, Optional
from .config import config

class PromptTemplates:
    """Centralized prompt template management"""

    @staticmethod
    def create_mock_test_prompt(day_number: int, topic_focus: Optional[str] = None,
                                question_count: int = None) -> str:
        """Create prompt for generating a full mock exam"""
        if question_count is None:
            question_count = config.QUESTIONS_PER_TEST

        topics = ", ".join(config.SYLLABUS_TOPICS)
        focus_line = f"Special focus on: {topic_focus}\n" if topic_focus else ""

        return f"""Generate a {question_count}-question multiple-choice mathematics mock exam for a Year 7 student preparing for the Archimedes Awards UK Final Stage. This is day {day_number} of a {config.PROGRAM_DAYS}-day programme.
The questions should range from foundational logic to high-complexity synthesis.
Focus on these topics: {topics}.
{focus_line}
REQUIREMENTS:
- Generate exactly {question_count} questions
- Each question has exactly {config.OPTIONS_PER_QUESTION} options and exactly one correct answer
- correctAnswer must be copied character for character from one of the options
- Explanations contrast the "Olympiad Strategy" with the "Standard Approach"

Return ONLY a JSON object of the form {{"questions": [...]}}. Each question must have:
- id (number, 1 to {question_count})
- text (string)
- options (array of {config.OPTIONS_PER_QUESTION} strings)
- correctAnswer (string, must be one of the options)
- explanation (string)
- topic (string, one of: {topics})"""

    @staticmethod
    def create_topic_explanation_prompt(topic: str) -> str:
        """Create prompt for a learning-center topic explanation"""
        return f"""Explain the mathematical topic "{topic}" for a Year 7 student preparing for the Archimedes Awards.
Include:
1. Core concepts and definitions.
2. Essential formulae.
3. A "Competitive Trick" or "Meta-solving Strategy" (like unit digit analysis or the Cat/Table/Tortoise principle).
4. One complex example problem with a step-by-step solution.

Format the response in Markdown."""

class PromptFormatter:
    """Utility class for formatting prompts and responses"""

    @staticmethod
    def strip_code_fences(response: str) -> str:
        """Remove a surrounding ```json ... ``` fence if the model added one"""
        cleaned = response.strip()
        if cleaned.startswith("```"):
            lines = cleaned.split("\n")
            lines = lines[1:]
            if lines and lines[-1].strip().startswith("```"):
                lines = lines[:-1]
            cleaned = "\n".join(lines).strip()
        return cleaned

    @staticmethod
    def validate_response_format(payload: dict, expected_keys: List[str]) -> bool:
        """Check a decoded question object carries every expected key"""
        return all(key in payload for key in expected_keys)
