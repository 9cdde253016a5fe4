# archimedes_prep/api/routes.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends

from ..models.schemas import (
    AnswerRequest, CreateTestRequest, CreateTestResponse, GenerateTestRequest,
    JumpRequest, LearningTopic, ProgressEntry, ProgressSummary, SaveResultRequest,
    SaveResultResponse, SessionReview, SessionState, StartSessionRequest,
    SubmitResponse, TestDefinition, TestSummary, TopicAccuracy, TopicExplanation,
    UpdateUserRequest, User
)
from ..services.catalog_service import CatalogService, get_catalog_service
from ..services.learning_service import LearningService, get_learning_service
from ..services.progress_service import ProgressService, get_progress_service
from ..services.session_service import SessionManager, get_session_manager
from ..services.user_service import UserService, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Handlers are plain functions: storage and LLM calls block, so FastAPI
# runs them in its threadpool.

# ==================== User ====================

@router.get("/user", response_model=User)
def get_user(users: UserService = Depends(get_user_service)):
    """The single student profile"""
    return users.get_user()

@router.put("/user", response_model=User)
def update_user(request: UpdateUserRequest, users: UserService = Depends(get_user_service)):
    return users.update_user(request.name)

# ==================== Tests ====================

@router.get("/tests", response_model=List[TestSummary])
def list_tests(catalog: CatalogService = Depends(get_catalog_service)):
    """All mock tests ordered by day number"""
    return catalog.list_tests()

@router.post("/tests", response_model=CreateTestResponse)
def create_test(request: CreateTestRequest, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.create_test(request.day_number, request.title, request.questions)
    return CreateTestResponse()

@router.post("/tests/generate", response_model=TestSummary)
def generate_test(request: Optional[GenerateTestRequest] = None,
                  catalog: CatalogService = Depends(get_catalog_service)):
    """Generate the next mock test through the content provider"""
    request = request or GenerateTestRequest()
    return catalog.generate_next(request.day_number, request.topic_focus)

@router.get("/tests/{test_id}", response_model=TestDefinition)
def get_test(test_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.get_test(test_id)

# ==================== Results & progress ====================

@router.post("/results", response_model=SaveResultResponse)
def save_result(request: SaveResultRequest, progress: ProgressService = Depends(get_progress_service)):
    """Record a finished attempt; the score is recomputed server side"""
    return SaveResultResponse(id=progress.save_result(request))

@router.get("/progress", response_model=List[ProgressEntry])
def list_progress(progress: ProgressService = Depends(get_progress_service)):
    return progress.list_progress()

@router.get("/progress/summary", response_model=ProgressSummary)
def progress_summary(progress: ProgressService = Depends(get_progress_service)):
    """Dashboard stats"""
    return progress.get_summary()

@router.get("/progress/topics", response_model=List[TopicAccuracy])
def progress_topics(progress: ProgressService = Depends(get_progress_service)):
    return progress.get_topic_breakdown()

# ==================== Learning center ====================

@router.get("/topics", response_model=List[LearningTopic])
def list_topics(learning: LearningService = Depends(get_learning_service)):
    return learning.list_topics()

@router.get("/topics/{topic}/explanation", response_model=TopicExplanation)
def explain_topic(topic: str, learning: LearningService = Depends(get_learning_service)):
    """Explanation of a topic id or free-text topic name"""
    return learning.explain(topic)

# ==================== Assessment session ====================

@router.post("/session/start", response_model=SessionState)
def start_session(request: StartSessionRequest, sessions: SessionManager = Depends(get_session_manager)):
    """Start an attempt; an unfinished previous attempt is discarded"""
    return sessions.start_session(request.test_id).state()

@router.get("/session", response_model=SessionState)
def get_session(sessions: SessionManager = Depends(get_session_manager)):
    return sessions.current().state()

@router.post("/session/answer", response_model=SessionState)
def answer_question(request: AnswerRequest, sessions: SessionManager = Depends(get_session_manager)):
    session = sessions.current()
    session.record_answer(request.option)
    return session.state()

@router.post("/session/jump", response_model=SessionState)
def jump_to_question(request: JumpRequest, sessions: SessionManager = Depends(get_session_manager)):
    session = sessions.current()
    session.jump_to(request.index)
    return session.state()

@router.post("/session/next", response_model=SessionState)
def next_question(sessions: SessionManager = Depends(get_session_manager)):
    """Advance; on the last question this submits the attempt"""
    session = sessions.current()
    session.next()
    return session.state()

@router.post("/session/previous", response_model=SessionState)
def previous_question(sessions: SessionManager = Depends(get_session_manager)):
    session = sessions.current()
    session.previous()
    return session.state()

@router.post("/session/submit", response_model=SubmitResponse)
def submit_session(sessions: SessionManager = Depends(get_session_manager)):
    return sessions.current().submit()

@router.get("/session/review", response_model=SessionReview)
def review_session(sessions: SessionManager = Depends(get_session_manager)):
    return sessions.current().review()
