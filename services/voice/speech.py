"""
Text-to-Speech Service

Provides text-to-speech functionality using ElevenLabs API.
Voices the interview questions and follow-ups Rooma asks.

Usage:
    from services.voice.speech import SpeechService

    service = SpeechService(api_key="...")
    audio_bytes = service.text_to_speech("Could you please tell me your name?")
"""

import time
import requests
from typing import Optional

from utils.logging import get_logger, log_tts_call
from utils.exceptions import SpeechGenerationError

logger = get_logger(__name__)


class SpeechService:
    """
    ElevenLabs Text-to-Speech service.

    Converts interview prompts to natural-sounding audio.

    Attributes:
        api_key: ElevenLabs API key
        default_voice_id: Default voice to use (Rachel)
        model: TTS model (eleven_turbo_v2_5)
    """

    API_BASE = "https://api.elevenlabs.io/v1"

    DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"  # Rachel
    DEFAULT_MODEL = "eleven_turbo_v2_5"
    REQUEST_TIMEOUT_SECONDS = 30

    def __init__(
        self,
        api_key: Optional[str] = None,
        voice_id: Optional[str] = None,
        model: Optional[str] = None
    ):
        """
        Initialize speech service.

        Args:
            api_key: ElevenLabs API key
            voice_id: Voice ID to use (default: Rachel)
            model: TTS model to use (default: eleven_turbo_v2_5)
        """
        self.api_key = api_key
        self.default_voice_id = voice_id or self.DEFAULT_VOICE_ID
        self.model = model or self.DEFAULT_MODEL

        if not self.api_key:
            logger.warning("ElevenLabs API key not configured - TTS disabled")
        else:
            logger.info("SpeechService initialized")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def text_to_speech(
        self,
        text: str,
        voice_id: Optional[str] = None
    ) -> Optional[bytes]:
        """
        Convert text to speech audio.

        Args:
            text: Text to convert to speech
            voice_id: Optional voice ID override

        Returns:
            bytes: Audio data as MP3, or None when TTS is not configured

        Raises:
            SpeechGenerationError: If the ElevenLabs call fails
        """
        if not self.api_key:
            return None

        target_voice_id = voice_id or self.default_voice_id
        url = f"{self.API_BASE}/text-to-speech/{target_voice_id}"

        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.api_key
        }

        data = {
            "text": text,
            "model_id": self.model,
            "voice_settings": {
                "stability": 0.5,
                "similarity_boost": 0.75
            }
        }

        started = time.perf_counter()
        try:
            logger.debug(f"Generating speech for: '{text[:50]}...'")

            response = requests.post(
                url,
                json=data,
                headers=headers,
                timeout=self.REQUEST_TIMEOUT_SECONDS
            )
        except requests.Timeout as e:
            log_tts_call(success=False, characters=len(text), error="timeout")
            raise SpeechGenerationError("ElevenLabs API timeout", text=text) from e
        except requests.RequestException as e:
            log_tts_call(success=False, characters=len(text), error=str(e))
            raise SpeechGenerationError(f"ElevenLabs request failed: {e}", text=text) from e

        duration_ms = (time.perf_counter() - started) * 1000

        if response.status_code != 200:
            error_msg = f"Status {response.status_code}: {response.text[:200]}"
            log_tts_call(success=False, characters=len(text),
                         duration_ms=duration_ms, error=error_msg)
            raise SpeechGenerationError(
                "ElevenLabs API error",
                text=text,
                details={"status_code": response.status_code}
            )

        logger.debug(f"Speech generated: {len(response.content)} bytes")
        log_tts_call(success=True, characters=len(text), duration_ms=duration_ms)
        return response.content
