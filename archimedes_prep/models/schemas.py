# archimedes_prep/models/schemas.py
from datetime import datetime
from typing import Annotated, Dict, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator


# ==================== Domain ====================

class Question(BaseModel):
    """A single multiple-choice question"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    text: str = Field(min_length=1)
    options: List[str] = Field(min_length=1)
    correct_answer: str = Field(alias="correctAnswer")
    explanation: str = ""
    topic: str = ""

    @model_validator(mode="after")
    def check_correct_answer(self) -> "Question":
        if self.correct_answer not in self.options:
            raise ValueError(f"correctAnswer '{self.correct_answer}' is not one of the options")
        return self


def _check_unique_ids(questions: List[Question]) -> List[Question]:
    ids = [q.id for q in questions]
    if len(ids) != len(set(ids)):
        raise ValueError("question ids must be unique within a test")
    return questions


QuestionList = Annotated[List[Question], AfterValidator(_check_unique_ids)]


class TestSummary(BaseModel):
    id: int
    day_number: int
    title: str


class TestDefinition(TestSummary):
    questions: QuestionList


class User(BaseModel):
    id: int
    name: str
    created_at: Optional[str] = None


class ProgressEntry(BaseModel):
    id: int
    user_id: int
    test_id: int
    score: int
    total_questions: int
    answers: Dict[str, str] = {}
    completed_at: str
    day_number: int
    title: str


class ProgressSummary(BaseModel):
    tests_completed: int
    average_score: Optional[int] = None
    best_score: Optional[int] = None
    recent_results: List[ProgressEntry] = []


class TopicAccuracy(BaseModel):
    topic: str
    questions_seen: int
    correct: int
    accuracy: int


class LearningTopic(BaseModel):
    id: str
    title: str


class TopicExplanation(BaseModel):
    topic: str
    markdown: str
    html: str
    generated_at: datetime


# ==================== Requests ====================

class CreateTestRequest(BaseModel):
    day_number: int = Field(ge=1)
    title: str = Field(min_length=1)
    questions: QuestionList = Field(min_length=1)


class GenerateTestRequest(BaseModel):
    day_number: Optional[int] = Field(default=None, ge=1)
    topic_focus: Optional[str] = None


class SaveResultRequest(BaseModel):
    user_id: int
    test_id: int
    score: int = Field(ge=0, le=100)
    total_questions: int = Field(ge=0)
    answers: Dict[str, str] = {}


class UpdateUserRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class StartSessionRequest(BaseModel):
    test_id: int


class AnswerRequest(BaseModel):
    option: str


class JumpRequest(BaseModel):
    index: int


# ==================== Responses ====================

class CreateTestResponse(BaseModel):
    success: bool = True


class SaveResultResponse(BaseModel):
    id: int


class SessionState(BaseModel):
    test_id: int
    title: str
    current_question_index: int
    total_questions: int
    question: Question
    answers: Dict[str, str]
    answered_count: int
    time_left: int
    time_left_display: str = ""
    finished: bool
    score: Optional[int] = None


class SubmitResponse(BaseModel):
    score: int
    correct_count: int
    total_questions: int
    answered_count: int
    result_id: Optional[int] = None
    result_saved: bool
    error: Optional[str] = None


class ReviewItem(BaseModel):
    question: Question
    your_answer: Optional[str] = None
    is_correct: bool
    explanation: str


class SessionReview(BaseModel):
    test_id: int
    title: str
    score: int
    answered_count: int
    total_questions: int
    items: List[ReviewItem]
    result_saved: bool
    error: Optional[str] = None
