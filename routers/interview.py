"""
Interview Router

HTTP surface of the voice interview. Clients either drive a session
themselves (speak prompts, post recognized answers) or hand it to a
conductor over the WebSocket route.

Endpoints:
    POST /voice/interview                    - Start an interview
    POST /voice/interview/{id}/answer        - Submit a recognized answer
    GET  /voice/interview/{id}               - Interview status
    GET  /voice/interview/{id}/prompts       - Drain prompts to speak
    GET  /voice/interview/{id}/profile       - Extracted profile data
    POST /voice/normalize                    - Normalize spoken numbers
"""

from fastapi import APIRouter, Depends, Request
from typing import Any, Dict

from core.dependencies import (
    get_interview_conductor,
    get_interview_engine,
    get_prompt_outbox,
)
from core.schemas import (
    AnswerRequest,
    InterviewStatusResponse,
    NormalizeRequest,
    NormalizeResponse,
    PromptListResponse,
    StartInterviewRequest,
)
from config.settings import settings
from services.interview.conductor import InterviewConductor
from services.interview.engine import VoiceInterviewEngine
from services.interview.state import StatusSnapshot
from services.voice.boundary import PromptOutbox
from services.voice.demo import DemoSpeechInput, log_prompt
from services.voice.normalization import NumberWordNormalizer
from utils.exceptions import InvalidStateError
from utils.logging import get_logger
from utils.rate_limit import limit_answers, limit_reads, limit_starts

logger = get_logger(__name__)

router = APIRouter(prefix="/voice", tags=["Voice Interview"])

_normalizer = NumberWordNormalizer(default_locale=settings.DEFAULT_LOCALE)


def _status_response(snapshot: StatusSnapshot, conductor: InterviewConductor) -> InterviewStatusResponse:
    return InterviewStatusResponse(
        **snapshot.to_dict(),
        conducted=conductor.is_driving(snapshot.session_id),
    )


# =============================================================================
# Session Lifecycle
# =============================================================================

@router.post(
    "/interview",
    response_model=InterviewStatusResponse,
    status_code=201,
    summary="Start a voice interview",
    responses={409: {"description": "Session id already in use"}}
)
@limit_starts
async def start_interview(
    request: Request,
    body: StartInterviewRequest,
    engine: VoiceInterviewEngine = Depends(get_interview_engine),
    conductor: InterviewConductor = Depends(get_interview_conductor),
):
    """
    Create a session and queue the first question.

    With `demo` set, a background conductor answers every question with
    canned responses and logs Rooma's prompts instead of queueing them.
    """
    state = await engine.start_interview(body.session_id, body.locale)

    if body.demo:
        speech_input = DemoSpeechInput(engine.current_field)
        conductor.start_background(state.session_id, speech_input, deliver=log_prompt)
        logger.info(f"Demo interview running for {state.session_id}")

    snapshot = await engine.get_status(state.session_id)
    return _status_response(snapshot, conductor)


@router.post(
    "/interview/{session_id}/answer",
    response_model=InterviewStatusResponse,
    summary="Submit an answer",
    responses={
        404: {"description": "Unknown session"},
        409: {"description": "Interview completed or being conducted"}
    }
)
@limit_answers
async def submit_answer(
    request: Request,
    session_id: str,
    body: AnswerRequest,
    engine: VoiceInterviewEngine = Depends(get_interview_engine),
    conductor: InterviewConductor = Depends(get_interview_conductor),
):
    """
    Answer the current question with recognized (or typed) text.

    Rejected with 409 while a conductor owns the session.
    """
    if conductor.is_driving(session_id):
        raise InvalidStateError(
            session_id,
            message="Interview is being conducted over a speech connection",
        )

    await engine.submit_answer(session_id, body.text)
    snapshot = await engine.get_status(session_id)
    return _status_response(snapshot, conductor)


@router.get(
    "/interview/{session_id}",
    response_model=InterviewStatusResponse,
    summary="Get interview status"
)
@limit_reads
async def get_interview_status(
    request: Request,
    session_id: str,
    engine: VoiceInterviewEngine = Depends(get_interview_engine),
    conductor: InterviewConductor = Depends(get_interview_conductor),
):
    snapshot = await engine.get_status(session_id)
    return _status_response(snapshot, conductor)


# =============================================================================
# Prompts & Profile
# =============================================================================

@router.get(
    "/interview/{session_id}/prompts",
    response_model=PromptListResponse,
    summary="Drain pending prompts"
)
@limit_reads
async def get_pending_prompts(
    request: Request,
    session_id: str,
    engine: VoiceInterviewEngine = Depends(get_interview_engine),
    outbox: PromptOutbox = Depends(get_prompt_outbox),
):
    """
    Return and clear the prompts waiting to be spoken, oldest first.

    `audio` is base64 MP3 when ElevenLabs is configured, otherwise null
    and the client should use its own speech synthesis.
    """
    await engine.get_status(session_id)
    prompts = outbox.drain(session_id)
    return PromptListResponse(
        session_id=session_id,
        prompts=[prompt.to_dict() for prompt in prompts],
    )


@router.get(
    "/interview/{session_id}/profile",
    summary="Get extracted profile data",
    responses={404: {"description": "Unknown session"}}
)
@limit_reads
async def get_profile_data(
    request: Request,
    session_id: str,
    engine: VoiceInterviewEngine = Depends(get_interview_engine),
) -> Dict[str, Any]:
    """
    Profile fields derived from the answers so far (camelCase keys).

    Can be called mid-interview; unanswered fields hold defaults.
    """
    profile = await engine.extract_profile_data(session_id)
    return profile.to_client_dict()


# =============================================================================
# Normalization
# =============================================================================

@router.post(
    "/normalize",
    response_model=NormalizeResponse,
    summary="Normalize spoken numbers"
)
@limit_reads
async def normalize_text(request: Request, body: NormalizeRequest):
    """Turn recognized number words into digits ("twenty one" → "21")."""
    result = _normalizer.process(body.text, {"locale": body.locale})
    return NormalizeResponse(
        original=body.text,
        normalized=result.value,
        locale=body.locale,
        is_valid=result.is_valid,
        confidence=result.confidence,
        rounds=result.rounds,
        steps=result.steps,
    )
