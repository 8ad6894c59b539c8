"""
Interview Session State

Data classes for voice interview session state.
Pure data with serialization helpers; the engine owns all mutation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from config.constants import MAX_PROGRESS_PERCENT
from utils.exceptions import InvalidStateError


class InterviewStatus(str, Enum):
    """Interview session states."""
    IN_PROGRESS = "in-progress"  # Questions remain
    COMPLETED = "completed"      # Every question answered


@dataclass
class ConversationState:
    """
    State of one voice interview.

    Invariants:
        0 <= current_step <= total_steps
        responses only ever gain keys
        transcript only ever grows, and stops growing once completed
        end_time is set exactly once, when status becomes COMPLETED
    """
    session_id: str
    total_steps: int
    locale: str = "en"

    status: InterviewStatus = InterviewStatus.IN_PROGRESS
    current_step: int = 0
    responses: Dict[str, Any] = field(default_factory=dict)
    transcript: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    summary: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == InterviewStatus.COMPLETED

    @property
    def transcript_text(self) -> str:
        return "\n".join(self.transcript)

    def progress(self) -> float:
        """Answered share of the interview as a percentage, clamped to 100."""
        if self.total_steps <= 0:
            return float(MAX_PROGRESS_PERCENT)
        percent = self.current_step / self.total_steps * 100
        return min(float(MAX_PROGRESS_PERCENT), round(percent, 1))

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        """Seconds from start to end, or to now while still in progress."""
        until = self.end_time or now or datetime.now()
        return max(0, int((until - self.start_time).total_seconds()))

    def append_transcript(self, line: str) -> None:
        if self.is_completed:
            raise InvalidStateError(
                self.session_id,
                message="Transcript is final once the interview completes",
                status=self.status.value,
            )
        self.transcript.append(line)

    def record_answer(self, field_name: str, value: Any) -> None:
        """Store an answer and move to the next question."""
        if self.is_completed:
            raise InvalidStateError(
                self.session_id,
                message="Interview already completed",
                status=self.status.value,
            )
        self.responses[field_name] = value
        self.current_step += 1

    def complete(self, summary: Optional[str] = None) -> None:
        if self.end_time is None:
            self.end_time = datetime.now()
        self.status = InterviewStatus.COMPLETED
        self.summary = summary

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for storage."""
        return {
            "session_id": self.session_id,
            "total_steps": self.total_steps,
            "locale": self.locale,
            "status": self.status.value,
            "current_step": self.current_step,
            "responses": self.responses,
            "transcript": self.transcript,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationState":
        """Deserialize from storage."""
        return cls(
            session_id=data["session_id"],
            total_steps=data["total_steps"],
            locale=data.get("locale", "en"),
            status=InterviewStatus(data.get("status", InterviewStatus.IN_PROGRESS.value)),
            current_step=data.get("current_step", 0),
            responses=data.get("responses", {}),
            transcript=data.get("transcript", []),
            start_time=datetime.fromisoformat(data["start_time"]) if data.get("start_time") else datetime.now(),
            end_time=datetime.fromisoformat(data["end_time"]) if data.get("end_time") else None,
            summary=data.get("summary"),
        )


@dataclass
class StatusSnapshot:
    """Point-in-time view of an interview for clients."""
    session_id: str
    status: InterviewStatus
    progress: float
    current_step: int
    total_steps: int
    elapsed_seconds: int
    transcript: str
    responses: Dict[str, Any]
    current_question: Optional[str] = None
    current_field: Optional[str] = None
    summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "status": self.status.value,
            "progress": self.progress,
            "current_step": self.current_step,
            "total_steps": self.total_steps,
            "elapsed_seconds": self.elapsed_seconds,
            "transcript": self.transcript,
            "responses": dict(self.responses),
            "current_question": self.current_question,
            "current_field": self.current_field,
            "summary": self.summary,
        }
