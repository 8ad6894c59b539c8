"""
Tests for InterviewConductor

Covers speech-driven runs: prompt delivery, capture failure handling
and session ownership.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from services.interview.conductor import InterviewConductor
from services.interview.state import InterviewStatus
from services.voice.boundary import PromptKind
from services.voice.demo import DemoSpeechInput
from utils.exceptions import CaptureFailure, InvalidStateError, SpeechCaptureError


def scripted_input(*results) -> MagicMock:
    """SpeechInput whose listen() returns (or raises) each result in turn."""
    speech_input = MagicMock()
    speech_input.listen = AsyncMock(side_effect=list(results))
    return speech_input


@pytest.fixture
def conductor(engine, outbox) -> InterviewConductor:
    return InterviewConductor(engine, outbox, max_failures=3, question_delay=0, retries=1)


# =============================================================================
# Run Tests
# =============================================================================

class TestConductorRun:
    """Tests for InterviewConductor.run()."""

    @pytest.mark.asyncio
    async def test_completes_interview(self, engine, conductor, full_interview_answers):
        await engine.start_interview("call-1")
        delivered = []

        status = await conductor.run(
            "call-1",
            scripted_input(*full_interview_answers),
            deliver=lambda sid, prompt: delivered.append(prompt),
        )

        assert status.status == InterviewStatus.COMPLETED
        assert status.progress == 100
        assert status.responses["cleanliness"] == "4"
        assert delivered[0].kind == PromptKind.QUESTION
        assert delivered[-1].kind == PromptKind.CLOSING
        assert len(delivered) == 1 + 2 * 6 + 1
        assert not conductor.is_driving("call-1")

    @pytest.mark.asyncio
    async def test_async_deliver(self, engine, conductor, full_interview_answers):
        await engine.start_interview("call-1")
        deliver = AsyncMock()

        await conductor.run("call-1", scripted_input(*full_interview_answers), deliver=deliver)

        assert deliver.await_count == 14

    @pytest.mark.asyncio
    async def test_without_deliver_prompts_stay_queued(self, engine, outbox, conductor, full_interview_answers):
        await engine.start_interview("call-1")

        await conductor.run("call-1", scripted_input(*full_interview_answers))

        assert outbox.pending("call-1") == 14

    @pytest.mark.asyncio
    async def test_no_speech_retried_then_answered(self, engine, conductor, full_interview_answers):
        await engine.start_interview("call-1")
        speech_input = scripted_input(
            SpeechCaptureError(CaptureFailure.NO_SPEECH),
            *full_interview_answers,
        )

        status = await conductor.run("call-1", speech_input)

        assert status.status == InterviewStatus.COMPLETED
        assert speech_input.listen.await_count == len(full_interview_answers) + 1

    @pytest.mark.asyncio
    async def test_fatal_failure_stops_at_current_step(self, engine, conductor):
        await engine.start_interview("call-1")
        speech_input = scripted_input("Sarah", SpeechCaptureError(CaptureFailure.PERMISSION_DENIED))

        status = await conductor.run("call-1", speech_input)

        assert status.status == InterviewStatus.IN_PROGRESS
        assert status.current_step == 1
        assert status.responses == {"name": "Sarah"}
        assert not conductor.is_driving("call-1")

    @pytest.mark.asyncio
    async def test_repeated_timeouts_stop_run(self, engine, conductor):
        await engine.start_interview("call-1")
        speech_input = scripted_input(*[SpeechCaptureError(CaptureFailure.TIMEOUT)] * 3)

        status = await conductor.run("call-1", speech_input)

        assert status.current_step == 0
        assert speech_input.listen.await_count == 3

    @pytest.mark.asyncio
    async def test_failure_count_resets_after_answer(self, engine, conductor, full_interview_answers):
        await engine.start_interview("call-1")
        timeout = SpeechCaptureError(CaptureFailure.TIMEOUT)
        results = []
        for answer in full_interview_answers:
            results.extend([timeout, timeout, answer])

        status = await conductor.run("call-1", scripted_input(*results))

        assert status.status == InterviewStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_resumes_from_current_step(self, engine, conductor, full_interview_answers):
        await engine.start_interview("call-1")
        await engine.submit_answer("call-1", full_interview_answers[0])

        status = await conductor.run("call-1", scripted_input(*full_interview_answers[1:]))

        assert status.status == InterviewStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_demo_input_completes(self, engine, conductor):
        await engine.start_interview("call-1")

        status = await conductor.run("call-1", DemoSpeechInput(engine.current_field, seed=42))

        assert status.status == InterviewStatus.COMPLETED
        assert set(status.responses) == {
            "name", "cleanliness", "socialLevel", "sleepTime", "pets", "interests", "roomType"
        }


# =============================================================================
# Ownership Tests
# =============================================================================

class TestConductorOwnership:
    """Tests for session ownership and background runs."""

    @pytest.mark.asyncio
    async def test_second_run_rejected_while_driving(self, engine, conductor):
        await engine.start_interview("call-1")
        gate = asyncio.Event()

        async def wait_forever(session_id):
            await gate.wait()
            raise SpeechCaptureError(CaptureFailure.ABORTED)

        speech_input = MagicMock()
        speech_input.listen = wait_forever

        task = conductor.start_background("call-1", speech_input)
        assert conductor.is_driving("call-1")

        with pytest.raises(InvalidStateError):
            await conductor.run("call-1", scripted_input("Sarah"))

        gate.set()
        await task
        assert not conductor.is_driving("call-1")

    @pytest.mark.asyncio
    async def test_background_run_completes(self, engine, conductor, full_interview_answers):
        await engine.start_interview("call-1")

        task = conductor.start_background("call-1", scripted_input(*full_interview_answers))
        status = await task

        assert status.status == InterviewStatus.COMPLETED
        assert not conductor.is_driving("call-1")

    @pytest.mark.asyncio
    async def test_shutdown_cancels_runs(self, engine, conductor):
        await engine.start_interview("call-1")

        async def never(session_id):
            await asyncio.sleep(60)

        speech_input = MagicMock()
        speech_input.listen = never
        task = conductor.start_background("call-1", speech_input)
        await asyncio.sleep(0)

        await conductor.shutdown()

        assert task.cancelled()
        assert not conductor.is_driving("call-1")
