"""
Interview Package

Voice interview state machine, session storage and profile projection.
"""

from services.interview.questions import INTERVIEW_QUESTIONS, InterviewQuestion, validate_questions
from services.interview.state import ConversationState, InterviewStatus, StatusSnapshot
from services.interview.store import (
    SessionStore,
    InMemorySessionStore,
    RedisSessionStore,
    get_session_store,
    reset_session_store,
)
from services.interview.profile import (
    ExtractedProfileData,
    Lifestyle,
    RoommatePreferences,
    build_profile_data,
    render_summary,
)
from services.interview.engine import VoiceInterviewEngine
from services.interview.conductor import InterviewConductor

__all__ = [
    # Questions
    'INTERVIEW_QUESTIONS',
    'InterviewQuestion',
    'validate_questions',
    # State
    'ConversationState',
    'InterviewStatus',
    'StatusSnapshot',
    # Storage
    'SessionStore',
    'InMemorySessionStore',
    'RedisSessionStore',
    'get_session_store',
    'reset_session_store',
    # Profile
    'ExtractedProfileData',
    'Lifestyle',
    'RoommatePreferences',
    'build_profile_data',
    'render_summary',
    # Orchestration
    'VoiceInterviewEngine',
    'InterviewConductor',
]
