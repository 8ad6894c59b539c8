"""
Logging Configuration Module

Console or JSON logging with the interview session attached to every
record, so one call's prompts, transcripts and failures can be followed
through interleaved output.

Usage:
    from utils.logging import get_logger, session_logger

    logger = get_logger(__name__)
    log = session_logger(logger, session_id)
    log.info("Question asked", extra={"field": "cleanliness"})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from config.settings import settings


NO_SESSION = "-"

# Attributes copied from extra={...} into JSON output
CONTEXT_FIELDS = ("session_id", "field", "direction", "reason", "details", "duration_ms")


# =============================================================================
# Session Context
# =============================================================================

class SessionContextFilter(logging.Filter):
    """Give every record a session_id so formatters can rely on it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "session_id", None):
            record.session_id = NO_SESSION
        return True


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Logger bound to one interview session."""

    def process(self, msg, kwargs):
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def session_logger(logger: logging.Logger, session_id: str) -> SessionLoggerAdapter:
    return SessionLoggerAdapter(logger, {"session_id": session_id})


# =============================================================================
# Formatters
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """Level-colored console lines with the session column."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s │ %(levelname)s │ %(session_id)-12s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        # Copy so other handlers still see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None and value != NO_SESSION:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


# =============================================================================
# Logger Configuration
# =============================================================================

def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None
) -> logging.Handler:
    """
    Configure application-wide logging.

    Args:
        level: Log level name. Defaults to settings.LOG_LEVEL, then to
               DEBUG in debug mode and INFO otherwise.
        json_format: Use JSONFormatter. Defaults to settings.LOG_JSON.

    Returns:
        The installed console handler.
    """
    if level is None:
        level = settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")
    if json_format is None:
        json_format = settings.LOG_JSON

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(SessionContextFilter())
    handler.setFormatter(JSONFormatter() if json_format else ColoredFormatter())
    root_logger.addHandler(handler)

    for noisy in ("httpx", "httpcore", "urllib3", "asyncio", "redis"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# =============================================================================
# Speech Events
# =============================================================================

def log_tts_call(
    success: bool,
    characters: int,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log one ElevenLabs synthesis request.

    Args:
        success: Whether audio came back
        characters: Length of the synthesized prompt
        duration_ms: Request duration in milliseconds
        error: Error message if failed
    """
    logger = get_logger("speech.tts")

    msg = f"{'✅' if success else '❌'} ElevenLabs | {characters} chars"
    if duration_ms is not None:
        msg += f" | {duration_ms:.0f}ms"

    extra = {"duration_ms": duration_ms}
    if success:
        logger.info(msg, extra=extra)
    else:
        logger.error(f"{msg} | Error: {error}", extra=extra)


def log_speech_event(
    direction: str,
    session_id: str,
    success: bool,
    details: Optional[str] = None
) -> None:
    """
    Log a prompt spoken to, or an answer heard from, a session.

    Args:
        direction: "speak" or "listen"
        session_id: Interview session the event belongs to
        success: Whether the boundary call succeeded
        details: Prompt/transcript preview or failure reason
    """
    log = session_logger(get_logger("speech"), session_id)

    status = "🔊" if direction == "speak" else "👂"
    if not success:
        status = "❌"
    msg = f"{status} {direction.upper()}"
    if details:
        msg += f" | {details[:80]}"

    extra = {"direction": direction}
    if success:
        log.info(msg, extra=extra)
    else:
        log.warning(msg, extra=dict(extra, reason=details))
