"""
Speech Boundary

Capability interfaces between the interview and the speech hardware,
plus the implementations that talk to a real browser.

- SpeechOutput: something that renders Rooma's prompts audibly
- SpeechInput: something that produces the user's recognized answer

Usage:
    outbox = PromptOutbox(speech_service=get_speech_service())
    await outbox.speak(session_id, "Could you tell me your name?")
    prompts = outbox.drain(session_id)
"""

import asyncio
import base64
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from fastapi import WebSocket, WebSocketDisconnect

from config.constants import CONFIDENT_NUMBER_THRESHOLD, MAX_NUMBER_TRANSCRIPT_LENGTH
from config.settings import settings
from services.voice.speech import SpeechService
from utils.exceptions import CaptureFailure, SpeechCaptureError
from utils.logging import get_logger, log_speech_event

logger = get_logger(__name__)


# =============================================================================
# Prompt Model
# =============================================================================

class PromptKind(str, Enum):
    """What a spoken prompt is for."""
    QUESTION = "question"
    FOLLOW_UP = "follow_up"
    CLOSING = "closing"


@dataclass
class SpeechPrompt:
    """A piece of text waiting to be spoken to the user."""
    text: str
    kind: PromptKind = PromptKind.QUESTION
    created_at: datetime = field(default_factory=datetime.now)
    audio: Optional[bytes] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON transports; audio is base64 MP3 when present."""
        return {
            "text": self.text,
            "kind": self.kind.value,
            "created_at": self.created_at.isoformat(),
            "audio": base64.b64encode(self.audio).decode("ascii") if self.audio else None,
        }


# =============================================================================
# Capability Interfaces
# =============================================================================

class SpeechOutput(ABC):
    """Renders prompt text for the user of one session."""

    @abstractmethod
    async def speak(
        self,
        session_id: str,
        text: str,
        kind: PromptKind = PromptKind.QUESTION
    ) -> None:
        """
        Deliver text to the user.

        Raises:
            RoomieError subclass if rendering fails; callers log and carry on.
        """
        pass


class SpeechInput(ABC):
    """Produces the next recognized answer for one session."""

    @abstractmethod
    async def listen(self, session_id: str) -> str:
        """
        Wait for the user's next utterance.

        Returns:
            Raw recognized text

        Raises:
            SpeechCaptureError: timeout, no-speech, permission-denied, ...
        """
        pass


# =============================================================================
# Prompt Outbox (speech output for browser clients)
# =============================================================================

class PromptOutbox(SpeechOutput):
    """
    Per-session FIFO of prompts for the client to speak.

    Browsers fetch the queue (HTTP polling or WebSocket push) and speak the
    text with SpeechSynthesis, or play the attached audio when ElevenLabs
    is configured.
    """

    MAX_PENDING_PROMPTS = 50

    def __init__(self, speech_service: Optional[SpeechService] = None):
        self.speech_service = speech_service
        self._queues: Dict[str, Deque[SpeechPrompt]] = {}

    async def speak(
        self,
        session_id: str,
        text: str,
        kind: PromptKind = PromptKind.QUESTION
    ) -> None:
        prompt = SpeechPrompt(text=text, kind=kind)
        queue = self._queues.setdefault(
            session_id, deque(maxlen=self.MAX_PENDING_PROMPTS)
        )
        queue.append(prompt)
        log_speech_event("speak", session_id, success=True, details=text)

        # Text is queued first so a TTS failure still leaves something to show
        if self.speech_service and self.speech_service.is_configured:
            prompt.audio = await asyncio.to_thread(self.speech_service.text_to_speech, text)

    def drain(self, session_id: str) -> List[SpeechPrompt]:
        """Remove and return every pending prompt for a session, oldest first."""
        queue = self._queues.pop(session_id, None)
        return list(queue) if queue else []

    def pending(self, session_id: str) -> int:
        queue = self._queues.get(session_id)
        return len(queue) if queue else 0

    def discard(self, session_id: str) -> None:
        self._queues.pop(session_id, None)


# =============================================================================
# Transcript Selection
# =============================================================================

NUMBER_TRANSCRIPTS = frozenset({
    'zero', 'one', 'two', 'three', 'four', 'five',
    'six', 'seven', 'eight', 'nine', 'ten',
})


def _is_number_like(transcript: str) -> bool:
    lowered = transcript.lower()
    return lowered in NUMBER_TRANSCRIPTS or (len(lowered) == 1 and lowered.isdigit())


def pick_best_transcript(alternatives: List[Dict[str, Any]]) -> str:
    """
    Choose one transcript from a recognizer's alternatives.

    A short, confident number ("four", "4") wins outright since the scale
    questions expect one. Otherwise the longest or most confident
    alternative is used.

    Args:
        alternatives: [{"transcript": str, "confidence": float}, ...]

    Returns:
        The chosen transcript, or "" when nothing usable was heard
    """
    best = ""
    best_confidence = 0.0
    confident_number = ""

    for alternative in alternatives:
        transcript = str(alternative.get("transcript") or "").strip()
        confidence = float(alternative.get("confidence") or 0.0)
        if not transcript:
            continue

        if (len(transcript) <= MAX_NUMBER_TRANSCRIPT_LENGTH
                and confidence > CONFIDENT_NUMBER_THRESHOLD
                and _is_number_like(transcript)):
            confident_number = transcript

        if len(transcript) > len(best) or confidence > best_confidence:
            best = transcript
            best_confidence = confidence

    return confident_number or best


# =============================================================================
# WebSocket Speech Input (speech input from a browser)
# =============================================================================

class WebSocketSpeechInput(SpeechInput):
    """
    Receives recognition results the browser sends over a WebSocket.

    Accepted messages:
        {"transcript": "I'd say four"}
        {"alternatives": [{"transcript": "...", "confidence": 0.9}, ...]}
        {"error": "no-speech" | "not-allowed" | "timeout" | ...}
        {"type": "listening"}

    The capture deadline restarts on "listening", so time the browser
    spends speaking the prompt does not count against the answer.
    Anything else (pings, acks, frames that are not JSON) is ignored.
    """

    def __init__(self, websocket: WebSocket, timeout_seconds: Optional[float] = None):
        self.websocket = websocket
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None
            else settings.SPEECH_CAPTURE_TIMEOUT_SECONDS
        )

    async def listen(self, session_id: str) -> str:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds

        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise self._failure(session_id, CaptureFailure.TIMEOUT)

            try:
                message = await asyncio.wait_for(self.websocket.receive_json(), remaining)
            except asyncio.TimeoutError:
                raise self._failure(session_id, CaptureFailure.TIMEOUT)
            except WebSocketDisconnect:
                raise self._failure(session_id, CaptureFailure.ABORTED, "client disconnected")
            except (ValueError, KeyError):
                logger.debug(f"Ignoring non-JSON frame for {session_id}")
                continue

            if not isinstance(message, dict):
                continue

            if message.get("type") == "listening":
                deadline = loop.time() + self.timeout_seconds
                continue

            if message.get("error"):
                raise self._failure(session_id, CaptureFailure.parse(str(message["error"])))

            if "alternatives" in message:
                transcript = pick_best_transcript(message.get("alternatives") or [])
            elif "transcript" in message:
                transcript = str(message.get("transcript") or "").strip()
            else:
                continue

            if not transcript:
                raise self._failure(session_id, CaptureFailure.NO_SPEECH)

            log_speech_event("listen", session_id, success=True, details=transcript)
            return transcript

    def _failure(
        self,
        session_id: str,
        reason: CaptureFailure,
        details: Optional[str] = None
    ) -> SpeechCaptureError:
        log_speech_event("listen", session_id, success=False, details=details or reason.value)
        return SpeechCaptureError(reason, details={"session_id": session_id})


# =============================================================================
# Retry Policy
# =============================================================================

async def listen_with_retry(
    speech_input: SpeechInput,
    session_id: str,
    retries: Optional[int] = None
) -> str:
    """
    Listen, re-attempting only when nothing was heard.

    Args:
        speech_input: Boundary to listen on
        session_id: Session being interviewed
        retries: Extra attempts after a no-speech result
                 (default: settings.SPEECH_CAPTURE_RETRIES)

    Raises:
        SpeechCaptureError: The last failure, once retries are used up or
                            for any reason other than no-speech
    """
    if retries is None:
        retries = settings.SPEECH_CAPTURE_RETRIES

    attempt = 0
    while True:
        try:
            return await speech_input.listen(session_id)
        except SpeechCaptureError as e:
            if e.reason != CaptureFailure.NO_SPEECH or attempt >= retries:
                raise
            attempt += 1
            logger.info(f"No speech detected for {session_id}, retrying ({attempt}/{retries})")
