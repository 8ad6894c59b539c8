"""
FastAPI Dependencies Module

Provides dependency injection for the interview services.
All service instances are singletons shared by HTTP and WebSocket routes.

Usage:
    from core.dependencies import get_interview_engine

    @router.get("/interview/{session_id}")
    async def status(
        session_id: str,
        engine: VoiceInterviewEngine = Depends(get_interview_engine)
    ):
        ...
"""

from typing import Optional

from config.settings import settings
from utils.logging import get_logger

# Lazy imports to avoid circular dependencies
_speech_service = None
_prompt_outbox = None
_interview_engine = None
_interview_conductor = None

logger = get_logger(__name__)


# =============================================================================
# Service Initialization
# =============================================================================

async def _initialize_services() -> None:
    """
    Initialize all service singletons.

    Called lazily on first access to any service.
    Logs a warning if ElevenLabs is not configured.
    """
    global _speech_service, _prompt_outbox, _interview_engine, _interview_conductor

    from services.interview.conductor import InterviewConductor
    from services.interview.engine import VoiceInterviewEngine
    from services.interview.store import get_session_store
    from services.voice.boundary import PromptOutbox
    from services.voice.speech import SpeechService

    if not settings.ELEVENLABS_API_KEY:
        logger.warning("ELEVENLABS_API_KEY not configured - prompts are sent as text only")

    _speech_service = SpeechService(
        api_key=settings.ELEVENLABS_API_KEY,
        voice_id=settings.ELEVENLABS_VOICE_ID,
        model=settings.ELEVENLABS_MODEL,
    )
    _prompt_outbox = PromptOutbox(speech_service=_speech_service)

    store = await get_session_store()
    _interview_engine = VoiceInterviewEngine(
        store=store,
        speech_output=_prompt_outbox,
        default_locale=settings.DEFAULT_LOCALE,
    )
    _interview_conductor = InterviewConductor(_interview_engine, _prompt_outbox)

    logger.info("Services initialized successfully")


async def _ensure_initialized() -> None:
    """Ensure services are initialized."""
    if _interview_engine is None:
        await _initialize_services()


# =============================================================================
# Service Providers
# =============================================================================

async def get_speech_service():
    """
    Get SpeechService singleton for text-to-speech.

    Returns:
        SpeechService: ElevenLabs TTS service (may be unconfigured)
    """
    await _ensure_initialized()
    return _speech_service


async def get_prompt_outbox():
    """
    Get PromptOutbox singleton, the speech output every session speaks into.

    Returns:
        PromptOutbox
    """
    await _ensure_initialized()
    return _prompt_outbox


async def get_interview_engine():
    """
    Get VoiceInterviewEngine singleton.

    Returns:
        VoiceInterviewEngine bound to the configured session store
    """
    await _ensure_initialized()
    return _interview_engine


async def get_interview_conductor():
    """
    Get InterviewConductor singleton for speech-driven runs.

    Returns:
        InterviewConductor
    """
    await _ensure_initialized()
    return _interview_conductor


def peek_interview_conductor() -> Optional[object]:
    """Conductor if already created, without initializing anything."""
    return _interview_conductor


def reset_services() -> None:
    """Drop all singletons (used on shutdown and in tests)."""
    global _speech_service, _prompt_outbox, _interview_engine, _interview_conductor
    _speech_service = None
    _prompt_outbox = None
    _interview_engine = None
    _interview_conductor = None
