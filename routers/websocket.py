"""
WebSocket Router

Speech-driven interview over one WebSocket per session. The browser
speaks each pushed prompt, runs its speech recognizer and sends back
the result; the conductor does the rest.

Server → client:
    {"type": "prompt", "text": ..., "kind": ..., "audio": <base64|null>}
    {"type": "status", ...}   once the run ends
    {"type": "error", ...}    when the run cannot start

Client → server:
    {"type": "listening"}     recognizer started; restarts the capture clock
    {"transcript": "..."} | {"alternatives": [...]} | {"error": "no-speech"}
"""

from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from core.dependencies import get_interview_conductor, get_interview_engine
from services.interview.conductor import InterviewConductor
from services.interview.engine import VoiceInterviewEngine
from services.voice.boundary import SpeechPrompt, WebSocketSpeechInput
from utils.exceptions import RoomieError, SessionNotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/voice", tags=["Voice Interview"])


@router.websocket("/interview/{session_id}/ws")
async def interview_websocket(
    websocket: WebSocket,
    session_id: str,
    locale: Optional[str] = None,
    engine: VoiceInterviewEngine = Depends(get_interview_engine),
    conductor: InterviewConductor = Depends(get_interview_conductor),
):
    """
    Start (or resume) an interview and conduct it over this connection.

    A session that already exists continues from its current question.
    """
    await websocket.accept()
    logger.info(f"WebSocket connection accepted for interview {session_id}: {websocket.client}")

    async def push_prompt(sid: str, prompt: SpeechPrompt) -> None:
        await websocket.send_json({"type": "prompt", **prompt.to_dict()})

    try:
        try:
            await engine.get_status(session_id)
        except SessionNotFoundError:
            await engine.start_interview(session_id, locale)

        snapshot = await conductor.run(
            session_id,
            WebSocketSpeechInput(websocket),
            deliver=push_prompt,
        )
        await websocket.send_json({"type": "status", **snapshot.to_dict()})
        await websocket.close()

    except RoomieError as e:
        logger.warning(f"Interview {session_id} could not run: {e.message}")
        await websocket.send_json({"type": "error", **e.to_dict()})
        await websocket.close(code=1008)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {session_id}")
    except Exception as e:
        logger.error(f"WebSocket error for interview {session_id}: {e}", exc_info=True)
        try:
            await websocket.send_json({
                "type": "error",
                "error": "InternalError",
                "message": "The interview connection failed",
            })
            await websocket.close(code=1011)
        except (WebSocketDisconnect, RuntimeError):
            logger.debug(f"WebSocket for {session_id} already closed")
