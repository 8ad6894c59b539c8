"""
API Tests for the Voice Interview Endpoints

Drives the HTTP surface through httpx against the ASGI app.
"""

import asyncio
import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from core.dependencies import get_interview_conductor
from services.interview.questions import INTERVIEW_QUESTIONS


async def start(client, **body):
    response = await client.post("/voice/interview", json=body)
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Health Tests
# =============================================================================

class TestHealthEndpoints:
    """Tests for / and /health."""

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_without_redis(self, client):
        response = await client.get("/health")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["session_store"] == "memory"
        assert data["components"]["elevenlabs_configured"] is False
        assert data["components"]["redis_latency_ms"] is None

    def test_lifespan_runs_session_sweeper_with_ttl(self, reset_app_state):
        from config.settings import settings
        from main import app

        original_ttl = settings.SESSION_TTL_MINUTES
        settings.SESSION_TTL_MINUTES = 30
        try:
            with TestClient(app):
                sweeper = app.state.session_sweeper
                assert sweeper is not None
                assert not sweeper.done()
            assert sweeper.cancelled()
        finally:
            settings.SESSION_TTL_MINUTES = original_ttl

    def test_no_sweeper_without_ttl(self, reset_app_state):
        from main import app

        with TestClient(app):
            assert app.state.session_sweeper is None


# =============================================================================
# Interview Lifecycle Tests
# =============================================================================

class TestInterviewEndpoints:
    """Tests for starting, answering and inspecting interviews."""

    @pytest.mark.asyncio
    async def test_start_interview(self, client):
        data = await start(client, session_id="call-1")

        assert data["session_id"] == "call-1"
        assert data["status"] == "in-progress"
        assert data["progress"] == 0
        assert data["current_field"] == "name"
        assert data["conducted"] is False

    @pytest.mark.asyncio
    async def test_start_generates_id(self, client):
        data = await start(client)
        assert data["session_id"]

    @pytest.mark.asyncio
    async def test_duplicate_start_conflict(self, client):
        await start(client, session_id="call-1")

        response = await client.post("/voice/interview", json={"session_id": "call-1"})

        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateSessionError"

    @pytest.mark.asyncio
    async def test_answer_flow_to_completion(self, client, full_interview_answers):
        await start(client, session_id="call-1")

        for answer in full_interview_answers:
            response = await client.post("/voice/interview/call-1/answer", json={"text": answer})
            assert response.status_code == 200

        data = response.json()
        assert data["status"] == "completed"
        assert data["progress"] == 100
        assert data["responses"]["cleanliness"] == "4"
        assert "User Name: Sarah" in data["summary"]

        response = await client.post("/voice/interview/call-1/answer", json={"text": "late"})
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidStateError"

    @pytest.mark.asyncio
    async def test_status_unknown_session(self, client):
        response = await client.get("/voice/interview/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "SessionNotFoundError"

    @pytest.mark.asyncio
    async def test_answer_too_long_rejected(self, client):
        await start(client, session_id="call-1")

        response = await client.post("/voice/interview/call-1/answer", json={"text": "x" * 2001})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_prompts_drained(self, client):
        await start(client, session_id="call-1")
        await client.post("/voice/interview/call-1/answer", json={"text": "Sarah"})

        response = await client.get("/voice/interview/call-1/prompts")

        prompts = response.json()["prompts"]
        assert [p["kind"] for p in prompts] == ["question", "follow_up", "question"]
        assert prompts[0]["text"] == INTERVIEW_QUESTIONS[0].prompt
        assert prompts[0]["audio"] is None

        response = await client.get("/voice/interview/call-1/prompts")
        assert response.json()["prompts"] == []

    @pytest.mark.asyncio
    async def test_prompts_unknown_session(self, client):
        response = await client.get("/voice/interview/missing/prompts")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_partial_profile(self, client):
        await start(client, session_id="call-1")
        await client.post("/voice/interview/call-1/answer", json={"text": "My name is Sarah"})

        response = await client.get("/voice/interview/call-1/profile")

        data = response.json()
        assert response.status_code == 200
        assert data["name"] == "Sarah"
        assert data["lifestyle"]["cleanliness"] == 3
        assert data["lifestyle"]["pets"] is False
        assert "roommatePreferences" in data


# =============================================================================
# Conducted Session Tests
# =============================================================================

class TestConductedSessions:
    """Tests for demo runs and conductor ownership over HTTP."""

    @pytest.mark.asyncio
    async def test_demo_interview_runs_to_completion(self, client):
        await start(client, session_id="demo-1", demo=True)

        data = None
        for _ in range(100):
            data = (await client.get("/voice/interview/demo-1")).json()
            if data["status"] == "completed":
                break
            await asyncio.sleep(0.01)

        assert data["status"] == "completed"
        assert len(data["responses"]) == len(INTERVIEW_QUESTIONS)

    @pytest.mark.asyncio
    async def test_answer_rejected_while_conducted(self, client):
        await start(client, session_id="call-1")
        conductor = await get_interview_conductor()
        gate = asyncio.Event()

        async def wait_for_gate(session_id):
            await gate.wait()
            return "Sarah"

        speech_input = MagicMock()
        speech_input.listen = wait_for_gate
        task = conductor.start_background("call-1", speech_input)

        response = await client.post("/voice/interview/call-1/answer", json={"text": "Lisa"})
        assert response.status_code == 409

        status = (await client.get("/voice/interview/call-1")).json()
        assert status["conducted"] is True
        assert status["responses"] == {}

        await conductor.shutdown()
        assert task.done()


# =============================================================================
# Normalization Tests
# =============================================================================

class TestNormalizeEndpoint:
    """Tests for POST /voice/normalize."""

    @pytest.mark.asyncio
    async def test_normalize(self, client):
        response = await client.post("/voice/normalize", json={"text": "Twenty One", "locale": "en-US"})

        data = response.json()
        assert data["normalized"] == "21"
        assert data["is_valid"] is True
        assert data["steps"]

    @pytest.mark.asyncio
    async def test_normalize_unknown_locale(self, client):
        response = await client.post("/voice/normalize", json={"text": " Five ", "locale": "fr"})

        assert response.json()["normalized"] == "five"


# =============================================================================
# WebSocket Tests
# =============================================================================

class TestInterviewWebSocket:
    """Tests for the speech-driven WebSocket route."""

    def test_full_interview_over_websocket(self, reset_app_state, full_interview_answers):
        from main import app

        with TestClient(app) as test_client:
            with test_client.websocket_connect("/voice/interview/ws-1/ws?locale=en-US") as websocket:
                first = websocket.receive_json()
                assert first["type"] == "prompt"
                assert first["text"] == INTERVIEW_QUESTIONS[0].prompt

                for answer in full_interview_answers:
                    websocket.send_json({"transcript": answer})
                    message = websocket.receive_json()
                    while message["type"] == "prompt" and message["kind"] != "question":
                        if message["kind"] == "closing":
                            break
                        message = websocket.receive_json()

                status = websocket.receive_json()
                assert status["type"] == "status"
                assert status["status"] == "completed"
                assert status["responses"]["cleanliness"] == "4"

    def test_permission_denied_hands_session_back(self, reset_app_state):
        from main import app

        with TestClient(app) as test_client:
            with test_client.websocket_connect("/voice/interview/ws-2/ws") as websocket:
                assert websocket.receive_json()["type"] == "prompt"

                websocket.send_json({"error": "not-allowed"})

                status = websocket.receive_json()
                assert status["type"] == "status"
                assert status["status"] == "in-progress"
                assert status["current_step"] == 0

            response = test_client.post("/voice/interview/ws-2/answer", json={"text": "Sarah"})
            assert response.status_code == 200

    def test_malformed_frame_does_not_break_run(self, reset_app_state):
        from main import app

        with TestClient(app) as test_client:
            with test_client.websocket_connect("/voice/interview/ws-3/ws") as websocket:
                assert websocket.receive_json()["type"] == "prompt"

                websocket.send_text("not json")
                websocket.send_json({"type": "listening"})
                websocket.send_json({"transcript": "Sarah"})

                message = websocket.receive_json()
                assert message["type"] == "prompt"
                assert message["kind"] == "follow_up"

                websocket.send_json({"error": "not-allowed"})
                while message["type"] == "prompt":
                    message = websocket.receive_json()

                assert message["type"] == "status"
                assert message["current_step"] == 1
                assert message["responses"] == {"name": "Sarah"}
