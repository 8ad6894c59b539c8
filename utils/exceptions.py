"""
Custom Exceptions Module

Defines application-specific exceptions for clearer error handling.
All exceptions inherit from a base RoomieError for easy catching.

Usage:
    from utils.exceptions import SessionNotFoundError, InvalidStateError

    try:
        await engine.submit_answer(session_id, text)
    except InvalidStateError as e:
        logger.warning(f"Answer rejected: {e}")
"""

from enum import Enum
from typing import Optional, Dict, Any


class RoomieError(Exception):
    """
    Base exception for all RooMate Voice errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code to return (optional)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# Interview Session Exceptions
# =============================================================================

class DuplicateSessionError(RoomieError):
    """
    Raised when an interview is started on a session id that already has state.

    Session ids must be unique per caller; restarting requires a new id.
    """

    def __init__(
        self,
        session_id: str,
        message: str = "Interview session already exists",
        details: Optional[Dict[str, Any]] = None
    ):
        self.session_id = session_id
        super().__init__(
            message=message,
            details={"session_id": session_id, **(details or {})},
            status_code=409
        )


class SessionNotFoundError(RoomieError):
    """Raised when no interview state exists for a session id."""

    def __init__(
        self,
        session_id: str,
        message: str = "Interview session not found",
        details: Optional[Dict[str, Any]] = None
    ):
        self.session_id = session_id
        super().__init__(
            message=message,
            details={"session_id": session_id, **(details or {})},
            status_code=404
        )


class InvalidStateError(RoomieError):
    """
    Raised when an operation does not fit the session's current state.

    Common causes:
        - Answer submitted after the interview completed
        - Manual answer submitted while a conductor drives the session
    """

    def __init__(
        self,
        session_id: str,
        message: str = "Operation not allowed in current interview state",
        status: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.session_id = session_id
        super().__init__(
            message=message,
            details={"session_id": session_id, "status": status, **(details or {})},
            status_code=409
        )


class SessionStoreError(RoomieError):
    """Raised when the backing session store cannot be reached."""

    def __init__(
        self,
        message: str = "Session store unavailable",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=503
        )


# =============================================================================
# Voice/Speech Exceptions
# =============================================================================

class CaptureFailure(str, Enum):
    """Reasons a speech capture attempt produced no transcript."""
    TIMEOUT = "timeout"
    NO_SPEECH = "no-speech"
    PERMISSION_DENIED = "permission-denied"
    UNSUPPORTED = "unsupported"
    ABORTED = "aborted"

    @classmethod
    def parse(cls, value: str) -> "CaptureFailure":
        """Map a browser error code onto a reason; unknown codes count as aborted."""
        normalized = (value or "").strip().lower().replace("_", "-")
        if normalized == "not-allowed":
            return cls.PERMISSION_DENIED
        for reason in cls:
            if reason.value == normalized:
                return reason
        return cls.ABORTED


class SpeechCaptureError(RoomieError):
    """
    Raised when speech-to-text capture yields no answer.

    The interview does not advance; the caller decides whether to
    listen again or ask for typed input.
    """

    def __init__(
        self,
        reason: CaptureFailure,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.reason = reason
        super().__init__(
            message=message or f"Speech capture failed: {reason.value}",
            details={"reason": reason.value, **(details or {})},
            status_code=400
        )


class SpeechGenerationError(RoomieError):
    """
    Raised when text-to-speech generation fails.

    Common causes:
        - ElevenLabs API error
        - Invalid API key
        - Rate limit exceeded
    """

    def __init__(
        self,
        message: str = "Failed to generate speech",
        text: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"text_preview": text[:50] if text else None, **(details or {})},
            status_code=502
        )
