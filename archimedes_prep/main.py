# archimedes_prep/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import config
from .core.database import get_db_manager, close_db_manager
from .core.ai_services import get_ai_service, close_ai_service
from .core.exceptions import ArchimedesError
from .core.utils import DateTimeUtils
from .services.catalog_service import CatalogService
from .services.learning_service import close_learning_service
from .services.session_service import get_session_manager, close_session_manager
from .api.routes import router

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info("🚀 Archimedes Prep API starting...")

    validation = config.validate()
    if not validation["valid"]:
        raise RuntimeError(f"Configuration invalid: {validation['issues']}")
    logger.info("✅ Configuration validated")

    logger.info("🔄 Initializing database...")
    db_manager = get_db_manager()
    db_health = db_manager.validate_connection()
    if not db_health["overall"]:
        raise RuntimeError(f"Database validation failed: {db_health}")

    user = db_manager.ensure_default_user()
    CatalogService(db_manager).seed_if_empty()
    logger.info(f"✅ Database ready for '{user['name']}'")

    # A provider outage only disables generation; everything else keeps working
    try:
        ai_health = get_ai_service().health_check()
        if ai_health["status"] != "healthy":
            logger.warning(f"AI service health warning: {ai_health}")
        else:
            logger.info("✅ AI service ready")
    except ArchimedesError as e:
        logger.warning(f"AI service unavailable: {e.message}")

    logger.info(f"📊 Configuration: {config.QUESTIONS_PER_TEST} questions per test, "
                f"{config.TEST_DURATION_SECONDS}s per attempt")

    yield

    # Cleanup on shutdown
    logger.info("👋 Shutting down...")
    close_session_manager()
    close_learning_service()
    close_ai_service()
    close_db_manager()
    logger.info("✅ Graceful shutdown completed")

# Create FastAPI application
app = FastAPI(
    title=config.API_TITLE,
    description=config.API_DESCRIPTION,
    version=config.API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)

# Exception handlers
@app.exception_handler(ArchimedesError)
async def archimedes_error_handler(request: Request, exc: ArchimedesError):
    """Map application errors to their HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {exc.message}")
    else:
        logger.warning(f"{exc.error}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error,
            "message": exc.message,
            "type": exc.error_type
        }
    )

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors"""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation Error",
            "message": str(exc),
            "type": "validation_error"
        }
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "type": "server_error"
        }
    )

# Health check endpoints
@app.get("/health")
def health_check():
    """Component health"""
    health_status = {
        "status": "healthy",
        "service": "archimedes_prep_api",
        "version": config.API_VERSION,
        "timestamp": DateTimeUtils.get_current_timestamp()
    }

    db_health = get_db_manager().validate_connection()
    health_status["database"] = "healthy" if db_health["overall"] else "degraded"

    try:
        health_status["ai_service"] = get_ai_service().health_check()["status"]
    except ArchimedesError as e:
        health_status["ai_service"] = "error"
        logger.warning(f"AI service health check failed: {e.message}")

    session_health = get_session_manager().health_check()
    health_status["active_session"] = session_health["active_session"]

    if health_status["database"] != "healthy":
        health_status["status"] = "degraded"
        return JSONResponse(status_code=503, content=health_status)

    return health_status

@app.get("/info")
def api_info():
    """API information and capabilities"""
    return {
        "name": config.API_TITLE,
        "version": config.API_VERSION,
        "description": config.API_DESCRIPTION,
        "features": {
            "ai_question_generation": not config.USE_DUMMY_DATA,
            "dummy_data": config.USE_DUMMY_DATA,
            "timed_sessions": True,
            "topic_explanations": True,
            "explanation_caching": True
        },
        "configuration": {
            "questions_per_test": config.QUESTIONS_PER_TEST,
            "options_per_question": config.OPTIONS_PER_QUESTION,
            "program_days": config.PROGRAM_DAYS,
            "test_duration_seconds": config.TEST_DURATION_SECONDS,
            "explanation_cache_seconds": config.EXPLANATION_CACHE_SECONDS
        },
        "endpoints": {
            "user": "GET|PUT /api/user",
            "tests": "GET|POST /api/tests",
            "test": "GET /api/tests/{id}",
            "generate_test": "POST /api/tests/generate",
            "save_result": "POST /api/results",
            "progress": "GET /api/progress",
            "progress_summary": "GET /api/progress/summary",
            "progress_topics": "GET /api/progress/topics",
            "topics": "GET /api/topics",
            "explanation": "GET /api/topics/{topic}/explanation",
            "session": "POST /api/session/start, GET /api/session",
            "health": "GET /health",
            "docs": "GET /docs"
        }
    }

def run():
    """Console entry point"""
    import uvicorn

    logger.info("🚀 Starting Archimedes Prep API")
    logger.info(f"🌐 Server: http://{config.API_HOST}:{config.API_PORT}")
    logger.info(f"📚 Docs: http://{config.API_HOST}:{config.API_PORT}/docs")

    uvicorn.run(
        "archimedes_prep.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG_MODE,
        log_level=config.LOG_LEVEL.lower(),
        access_log=config.DEBUG_MODE
    )

if __name__ == "__main__":
    run()
