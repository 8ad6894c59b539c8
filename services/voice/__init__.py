"""
Voice Package

Speech boundary (prompts out, transcripts in), ElevenLabs TTS and
spoken-number normalization.
"""

from services.voice.speech import SpeechService
from services.voice.boundary import (
    PromptKind,
    SpeechPrompt,
    SpeechOutput,
    SpeechInput,
    PromptOutbox,
    WebSocketSpeechInput,
    pick_best_transcript,
    listen_with_retry,
)
from services.voice.demo import DEMO_RESPONSES, DemoSpeechInput, log_prompt
from services.voice.normalization import NumberWordNormalizer, normalize_spoken_number

__all__ = [
    'SpeechService',
    'PromptKind',
    'SpeechPrompt',
    'SpeechOutput',
    'SpeechInput',
    'PromptOutbox',
    'WebSocketSpeechInput',
    'pick_best_transcript',
    'listen_with_retry',
    'DEMO_RESPONSES',
    'DemoSpeechInput',
    'log_prompt',
    'NumberWordNormalizer',
    'normalize_spoken_number',
]
