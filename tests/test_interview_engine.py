"""
Tests for VoiceInterviewEngine

Covers session lifecycle, answer recording, status snapshots, prompt
delivery and profile extraction over an in-memory store.
"""

import pytest
from unittest.mock import AsyncMock

from config.constants import CLOSING_MESSAGE
from services.interview.engine import VoiceInterviewEngine
from services.interview.questions import INTERVIEW_QUESTIONS, InterviewQuestion
from services.interview.state import InterviewStatus
from services.voice.boundary import PromptKind
from utils.exceptions import (
    DuplicateSessionError,
    InvalidStateError,
    SessionNotFoundError,
    SpeechGenerationError,
)


async def answer_all(engine, session_id, answers):
    state = None
    for answer in answers:
        state = await engine.submit_answer(session_id, answer)
    return state


# =============================================================================
# Start Tests
# =============================================================================

class TestStartInterview:
    """Tests for start_interview()."""

    @pytest.mark.asyncio
    async def test_creates_session_at_step_zero(self, engine, store):
        state = await engine.start_interview("call-1")

        assert state.session_id == "call-1"
        assert state.status == InterviewStatus.IN_PROGRESS
        assert state.current_step == 0
        assert state.total_steps == len(INTERVIEW_QUESTIONS)
        assert state.responses == {}
        assert state.end_time is None
        assert await store.exists("call-1")

    @pytest.mark.asyncio
    async def test_generates_session_id(self, engine):
        first = await engine.start_interview()
        second = await engine.start_interview()

        assert first.session_id
        assert first.session_id != second.session_id

    @pytest.mark.asyncio
    async def test_duplicate_session_rejected(self, engine):
        await engine.start_interview("call-1")

        with pytest.raises(DuplicateSessionError) as exc_info:
            await engine.start_interview("call-1")

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_first_question_spoken_and_logged(self, engine, outbox):
        state = await engine.start_interview("call-1")

        prompts = outbox.drain("call-1")
        assert [p.text for p in prompts] == [INTERVIEW_QUESTIONS[0].prompt]
        assert prompts[0].kind == PromptKind.QUESTION
        assert state.transcript == [f"Rooma: {INTERVIEW_QUESTIONS[0].prompt}"]

    @pytest.mark.asyncio
    async def test_locale_defaults_and_overrides(self, engine):
        default = await engine.start_interview("a")
        hindi = await engine.start_interview("b", locale="hi-IN")

        assert default.locale == "en"
        assert hindi.locale == "hi-IN"

    def test_invalid_question_list_rejected(self, store, outbox):
        questions = (
            InterviewQuestion(2, "name", "Name?", "", ""),
        )
        with pytest.raises(ValueError):
            VoiceInterviewEngine(store, outbox, questions=questions)


# =============================================================================
# Answer Tests
# =============================================================================

class TestSubmitAnswer:
    """Tests for submit_answer()."""

    @pytest.mark.asyncio
    async def test_stores_answer_and_advances(self, engine):
        await engine.start_interview("call-1")

        state = await engine.submit_answer("call-1", "My name is Sarah")

        assert state.responses == {"name": "My name is Sarah"}
        assert state.current_step == 1
        assert "User: My name is Sarah" in state.transcript

    @pytest.mark.asyncio
    async def test_numeric_fields_are_normalized(self, engine):
        await engine.start_interview("call-1")
        await engine.submit_answer("call-1", "Sarah")

        state = await engine.submit_answer("call-1", "F O U R")
        assert state.responses["cleanliness"] == "4"

        state = await engine.submit_answer("call-1", "three - balanced")
        assert state.responses["socialLevel"] == "3 - balanced"

    @pytest.mark.asyncio
    async def test_numeric_fields_use_session_locale(self, engine):
        await engine.start_interview("call-1", locale="hi-IN")
        await engine.submit_answer("call-1", "Priya")

        state = await engine.submit_answer("call-1", "paanch")

        assert state.responses["cleanliness"] == "5"

    @pytest.mark.asyncio
    async def test_text_fields_stored_verbatim(self, engine):
        await engine.start_interview("call-1")

        state = await engine.submit_answer("call-1", "  Twenty One  ")

        assert state.responses["name"] == "  Twenty One  "

    @pytest.mark.asyncio
    async def test_empty_answer_accepted(self, engine):
        await engine.start_interview("call-1")

        state = await engine.submit_answer("call-1", "")

        assert state.responses["name"] == ""
        assert state.current_step == 1

    @pytest.mark.asyncio
    async def test_follow_up_then_next_question_spoken(self, engine, outbox):
        await engine.start_interview("call-1")
        outbox.drain("call-1")

        await engine.submit_answer("call-1", "Sarah")

        prompts = outbox.drain("call-1")
        assert [(p.kind, p.text) for p in prompts] == [
            (PromptKind.FOLLOW_UP, INTERVIEW_QUESTIONS[0].follow_up),
            (PromptKind.QUESTION, INTERVIEW_QUESTIONS[1].prompt),
        ]

    @pytest.mark.asyncio
    async def test_unknown_session(self, engine):
        with pytest.raises(SessionNotFoundError):
            await engine.submit_answer("missing", "hello")

    @pytest.mark.asyncio
    async def test_full_interview_completes(self, engine, outbox, full_interview_answers):
        await engine.start_interview("call-1")

        state = await answer_all(engine, "call-1", full_interview_answers)

        assert state.status == InterviewStatus.COMPLETED
        assert state.end_time is not None
        assert state.current_step == state.total_steps
        assert set(state.responses) == {q.field for q in INTERVIEW_QUESTIONS}
        assert "User Name: Sarah" in state.summary
        assert outbox.drain("call-1")[-1].kind == PromptKind.CLOSING

        status = await engine.get_status("call-1")
        assert status.progress == 100
        assert status.status == InterviewStatus.COMPLETED
        assert status.current_question is None

    @pytest.mark.asyncio
    async def test_answer_after_completion_rejected(self, engine, full_interview_answers):
        await engine.start_interview("call-1")
        completed = await answer_all(engine, "call-1", full_interview_answers)

        with pytest.raises(InvalidStateError):
            await engine.submit_answer("call-1", "one more thing")

        status = await engine.get_status("call-1")
        assert status.responses == completed.responses
        assert status.transcript == completed.transcript_text

    @pytest.mark.asyncio
    async def test_transcript_ends_with_closing(self, engine, full_interview_answers):
        await engine.start_interview("call-1")

        state = await answer_all(engine, "call-1", full_interview_answers)

        assert state.transcript[-1] == f"Rooma: {CLOSING_MESSAGE}"

    @pytest.mark.asyncio
    async def test_sessions_progress_independently(self, engine):
        await engine.start_interview("a")
        await engine.start_interview("b")

        await engine.submit_answer("a", "Sarah")
        await engine.submit_answer("a", "5")
        await engine.submit_answer("b", "Lisa")

        assert (await engine.get_status("a")).current_step == 2
        assert (await engine.get_status("b")).current_step == 1


# =============================================================================
# Speech Output Failure Tests
# =============================================================================

class TestSpeechOutputFailures:
    """Prompt delivery failures must not hold up the interview."""

    @pytest.mark.asyncio
    async def test_failed_speech_does_not_block(self, store, full_interview_answers):
        speech_output = AsyncMock()
        speech_output.speak.side_effect = SpeechGenerationError("ElevenLabs down")
        engine = VoiceInterviewEngine(store, speech_output)

        await engine.start_interview("call-1")
        state = await answer_all(engine, "call-1", full_interview_answers)

        assert state.status == InterviewStatus.COMPLETED
        assert speech_output.speak.await_count == 1 + 2 * 6 + 1

    @pytest.mark.asyncio
    async def test_state_saved_before_speaking(self, store):
        speech_output = AsyncMock()
        seen_steps = []

        async def record_step(session_id, text, kind):
            state = await store.get(session_id)
            seen_steps.append(state.current_step)

        speech_output.speak.side_effect = record_step
        engine = VoiceInterviewEngine(store, speech_output)

        await engine.start_interview("call-1")
        await engine.submit_answer("call-1", "Sarah")

        assert seen_steps == [0, 1, 1]


# =============================================================================
# Status & Profile Tests
# =============================================================================

class TestStatusAndProfile:
    """Tests for get_status(), current_field() and extract_profile_data()."""

    @pytest.mark.asyncio
    async def test_status_snapshot(self, engine):
        await engine.start_interview("call-1")
        await engine.submit_answer("call-1", "Sarah")

        status = await engine.get_status("call-1")

        assert status.status == InterviewStatus.IN_PROGRESS
        assert status.current_step == 1
        assert status.total_steps == 7
        assert status.progress == 14.3
        assert status.elapsed_seconds >= 0
        assert status.responses == {"name": "Sarah"}
        assert status.current_field == "cleanliness"
        assert status.current_question == INTERVIEW_QUESTIONS[1].prompt
        assert "User: Sarah" in status.transcript

    @pytest.mark.asyncio
    async def test_status_unknown_session(self, engine):
        with pytest.raises(SessionNotFoundError):
            await engine.get_status("missing")

    @pytest.mark.asyncio
    async def test_current_field(self, engine, full_interview_answers):
        await engine.start_interview("call-1")
        assert await engine.current_field("call-1") == "name"

        await answer_all(engine, "call-1", full_interview_answers)
        assert await engine.current_field("call-1") is None

    @pytest.mark.asyncio
    async def test_partial_extraction_uses_defaults(self, engine):
        await engine.start_interview("call-1")
        await engine.submit_answer("call-1", "My name is Sarah")

        profile = await engine.extract_profile_data("call-1")

        assert profile.name == "Sarah"
        assert profile.lifestyle.cleanliness == 3
        assert profile.lifestyle.social_level == 3
        assert profile.lifestyle.pets is False
        assert profile.lifestyle.sleep_time == "23:00"
        assert profile.lifestyle.room_type == "no_preference"

    @pytest.mark.asyncio
    async def test_extraction_has_no_side_effects(self, engine):
        await engine.start_interview("call-1")
        before = await engine.get_status("call-1")

        await engine.extract_profile_data("call-1")

        after = await engine.get_status("call-1")
        assert after.responses == before.responses
        assert after.transcript == before.transcript

    @pytest.mark.asyncio
    async def test_extraction_unknown_session(self, engine):
        with pytest.raises(SessionNotFoundError):
            await engine.extract_profile_data("missing")
