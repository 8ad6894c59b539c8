"""
Test Configuration

Pytest configuration and shared fixtures for all tests.
"""

import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport

from services.interview.engine import VoiceInterviewEngine
from services.interview.store import InMemorySessionStore
from services.voice.boundary import PromptOutbox


@pytest.fixture
def store() -> InMemorySessionStore:
    """Fresh in-memory session store."""
    return InMemorySessionStore()


@pytest.fixture
def outbox() -> PromptOutbox:
    """Prompt outbox without text-to-speech."""
    return PromptOutbox()


@pytest.fixture
def engine(store, outbox) -> VoiceInterviewEngine:
    """Interview engine over the in-memory store and outbox."""
    return VoiceInterviewEngine(store, outbox, default_locale="en")


@pytest.fixture
def reset_app_state():
    """Isolate service singletons and rate limits between API tests."""
    from config.settings import settings
    from core.dependencies import reset_services
    from services.interview.store import reset_session_store
    from utils.rate_limit import limiter

    original_redis_url = settings.REDIS_URL
    original_api_key = settings.ELEVENLABS_API_KEY
    settings.REDIS_URL = None
    settings.ELEVENLABS_API_KEY = None
    limiter.enabled = False
    reset_services()
    reset_session_store()

    yield

    reset_services()
    reset_session_store()
    limiter.enabled = True
    settings.REDIS_URL = original_redis_url
    settings.ELEVENLABS_API_KEY = original_api_key


@pytest.fixture
async def client(reset_app_state) -> AsyncGenerator[AsyncClient, None]:
    """Get async test client for API testing."""
    from main import app

    # Create test transport
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def full_interview_answers():
    """One realistic answer per interview question, in order."""
    return [
        "My name is Sarah",
        "four",
        "3 - balanced",
        "11 PM",
        "I have a cat",
        "reading and yoga, cooking",
        "single room",
    ]
