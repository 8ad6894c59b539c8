"""
RooMate Voice - Backend Application

FastAPI application for the voice-driven roommate profile interview.
Rooma asks a fixed set of questions, the browser recognizes the spoken
answers, and the collected answers become profile data for matching.

Features:
    - Linear voice interview with per-session state (memory or Redis)
    - Spoken-number normalization in 11 languages
    - Text-to-speech prompts with ElevenLabs (optional)
    - Speech-driven runs over WebSocket, or a canned demo run

Run:
    python main.py
    # or
    uvicorn main:app --reload
"""

import asyncio
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
import uvicorn

from config.settings import settings
from core.dependencies import get_speech_service, peek_interview_conductor, reset_services
from services.interview.store import reset_session_store, sweep_expired_sessions
from services.voice.speech import SpeechService
from utils.cache import check_redis_health, close_redis_client
from utils.logging import setup_logging, get_logger
from utils.exceptions import RoomieError
from utils.rate_limit import limiter, rate_limit_exceeded_handler

# Import Routers
from routers import interview, websocket

# Initialize logging
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
        - Startup: Log configuration, start the idle-session sweeper
          when SESSION_TTL_MINUTES is set
        - Shutdown: Stop the sweeper and running interviews, close Redis
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Session store: {'redis' if settings.REDIS_URL else 'memory'}")

    sweeper = None
    if settings.SESSION_TTL_MINUTES is not None:
        sweeper = asyncio.create_task(
            sweep_expired_sessions(settings.SESSION_CLEANUP_INTERVAL_SECONDS)
        )
    app.state.session_sweeper = sweeper

    yield

    # Shutdown
    logger.info("Shutting down application")
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
    conductor = peek_interview_conductor()
    if conductor is not None:
        await conductor.shutdown()
    await close_redis_client()
    reset_session_store()
    reset_services()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Voice interview API for roommate profile setup",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Attach rate limiter to app state
app.state.limiter = limiter


# =============================================================================
# Middleware
# =============================================================================

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(RoomieError)
async def roomie_exception_handler(request: Request, exc: RoomieError):
    """
    Handle custom RooMate exceptions.

    Returns standardized error response with appropriate status code.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.__class__.__name__}: {exc.message}", extra={"details": exc.details})
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# =============================================================================
# Routers
# =============================================================================

app.include_router(interview.router)
app.include_router(websocket.router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - basic health check.

    Returns:
        dict: Simple status message
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/health", tags=["Health"])
async def health_check(speech_service: SpeechService = Depends(get_speech_service)):
    """
    Detailed health check endpoint.

    Checks:
        - Redis connectivity (when configured)
        - ElevenLabs configuration

    Returns:
        dict: Health status with component details
    """
    session_store = await check_redis_health()

    return {
        "status": "healthy" if session_store["healthy"] else "degraded",
        "components": {
            "session_store": session_store["backend"],
            "redis_latency_ms": session_store["latency_ms"],
            "elevenlabs_configured": speech_service.is_configured,
        },
        "version": settings.APP_VERSION
    }


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
