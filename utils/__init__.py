"""
Utilities Module

Provides shared utilities across the application:
- Logging configuration
- Custom exceptions
- Rate limiting
"""

from .logging import get_logger, setup_logging, session_logger, log_tts_call, log_speech_event
from .exceptions import (
    RoomieError,
    DuplicateSessionError,
    SessionNotFoundError,
    InvalidStateError,
    SessionStoreError,
    CaptureFailure,
    SpeechCaptureError,
    SpeechGenerationError,
)
from .rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    RATE_LIMITS,
    client_key,
    session_key,
    limit_starts,
    limit_answers,
    limit_reads,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "session_logger",
    "log_tts_call",
    "log_speech_event",
    # Exceptions
    "RoomieError",
    "DuplicateSessionError",
    "SessionNotFoundError",
    "InvalidStateError",
    "SessionStoreError",
    "CaptureFailure",
    "SpeechCaptureError",
    "SpeechGenerationError",
    # Rate Limiting
    "limiter",
    "rate_limit_exceeded_handler",
    "RATE_LIMITS",
    "client_key",
    "session_key",
    "limit_starts",
    "limit_answers",
    "limit_reads",
]
