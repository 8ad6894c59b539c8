"""
Core Module

Provides request/response schemas and service dependencies for the application.
"""

from .schemas import (
    StartInterviewRequest,
    AnswerRequest,
    InterviewStatusResponse,
    PromptResponse,
    PromptListResponse,
    NormalizeRequest,
    NormalizeResponse,
)
from .dependencies import (
    get_speech_service,
    get_prompt_outbox,
    get_interview_engine,
    get_interview_conductor,
    reset_services,
)

__all__ = [
    # Schemas
    "StartInterviewRequest",
    "AnswerRequest",
    "InterviewStatusResponse",
    "PromptResponse",
    "PromptListResponse",
    "NormalizeRequest",
    "NormalizeResponse",
    # Dependencies
    "get_speech_service",
    "get_prompt_outbox",
    "get_interview_engine",
    "get_interview_conductor",
    "reset_services",
]
