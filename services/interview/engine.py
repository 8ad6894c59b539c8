"""
Voice Interview Engine

Walks a session through the fixed question list:

    start_interview → (submit_answer)* → completed

The engine is stateless; every call loads ConversationState from the
session store, applies one transition and saves it back before any
prompt is spoken. Prompts go to a SpeechOutput, and a failed prompt is
logged without holding up the interview.

Usage:
    engine = VoiceInterviewEngine(store, outbox)
    state = await engine.start_interview()
    state = await engine.submit_answer(state.session_id, "My name is Sarah")
"""

import uuid
from typing import Optional, Sequence

from config.constants import ASSISTANT_LABEL, CLOSING_MESSAGE, USER_LABEL
from config.settings import settings
from services.interview.profile import ExtractedProfileData, build_profile_data, render_summary
from services.interview.questions import INTERVIEW_QUESTIONS, InterviewQuestion, validate_questions
from services.interview.state import ConversationState, StatusSnapshot
from services.interview.store import SessionStore
from services.voice.boundary import PromptKind, SpeechOutput
from services.voice.normalization import NumberWordNormalizer
from utils.exceptions import DuplicateSessionError, InvalidStateError, SessionNotFoundError
from utils.logging import get_logger, session_logger

logger = get_logger(__name__)


class VoiceInterviewEngine:
    """
    Linear interview state machine over a session store and a speech output.

    Callers must serialize calls for one session id; distinct sessions
    progress independently.
    """

    def __init__(
        self,
        store: SessionStore,
        speech_output: SpeechOutput,
        questions: Sequence[InterviewQuestion] = INTERVIEW_QUESTIONS,
        default_locale: Optional[str] = None,
        normalizer: Optional[NumberWordNormalizer] = None,
    ):
        validate_questions(tuple(questions))
        self.store = store
        self.speech_output = speech_output
        self.questions = tuple(questions)
        self.default_locale = default_locale or settings.DEFAULT_LOCALE
        self.normalizer = normalizer or NumberWordNormalizer(default_locale=self.default_locale)

    @property
    def total_steps(self) -> int:
        return len(self.questions)

    # =========================================================================
    # Transitions
    # =========================================================================

    async def start_interview(
        self,
        session_id: Optional[str] = None,
        locale: Optional[str] = None
    ) -> ConversationState:
        """
        Create a session at step 0 and ask the first question.

        Args:
            session_id: Caller-chosen id (default: fresh uuid4 hex)
            locale: Language tag used for numeric answers

        Raises:
            DuplicateSessionError: The id already has state
        """
        session_id = session_id or uuid.uuid4().hex
        if await self.store.exists(session_id):
            raise DuplicateSessionError(session_id)

        state = ConversationState(
            session_id=session_id,
            total_steps=self.total_steps,
            locale=locale or self.default_locale,
        )
        first = self.questions[0]
        state.append_transcript(f"{ASSISTANT_LABEL}: {first.prompt}")
        await self.store.put(state)

        session_logger(logger, session_id).info(f"Interview started (locale={state.locale})")
        await self._speak(session_id, first.prompt, PromptKind.QUESTION)
        return state

    async def submit_answer(self, session_id: str, raw_text: str) -> ConversationState:
        """
        Record the answer to the current question and move on.

        Numeric fields are normalized in the session locale; everything
        else is stored verbatim, empty strings included.

        Raises:
            SessionNotFoundError: Unknown session id
            InvalidStateError: The interview already completed
        """
        state = await self._load(session_id)
        if state.is_completed:
            raise InvalidStateError(
                session_id,
                message="Interview already completed",
                status=state.status.value,
            )

        question = self.questions[state.current_step]
        answer = raw_text if raw_text is not None else ""
        value = answer
        if question.is_numeric:
            value = self.normalizer.normalize(answer, {"locale": state.locale})

        state.append_transcript(f"{USER_LABEL}: {answer}")
        state.record_answer(question.field, value)
        session_logger(logger, session_id).debug(
            f"Answered {question.field!r}: {value!r}", extra={"field": question.field}
        )

        if state.current_step >= self.total_steps:
            state.append_transcript(f"{ASSISTANT_LABEL}: {CLOSING_MESSAGE}")
            state.complete(summary=render_summary(state.responses))
            await self.store.put(state)

            session_logger(logger, session_id).info(
                f"Interview completed in {state.elapsed_seconds()}s"
            )
            await self._speak(session_id, CLOSING_MESSAGE, PromptKind.CLOSING)
            return state

        next_question = self.questions[state.current_step]
        state.append_transcript(f"{ASSISTANT_LABEL}: {question.follow_up}")
        state.append_transcript(f"{ASSISTANT_LABEL}: {next_question.prompt}")
        await self.store.put(state)

        await self._speak(session_id, question.follow_up, PromptKind.FOLLOW_UP)
        await self._speak(session_id, next_question.prompt, PromptKind.QUESTION)
        return state

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_status(self, session_id: str) -> StatusSnapshot:
        """
        Snapshot of progress, transcript and answers so far.

        Raises:
            SessionNotFoundError: Unknown session id
        """
        state = await self._load(session_id)
        question = self._question_for(state)
        return StatusSnapshot(
            session_id=state.session_id,
            status=state.status,
            progress=state.progress(),
            current_step=state.current_step,
            total_steps=state.total_steps,
            elapsed_seconds=state.elapsed_seconds(),
            transcript=state.transcript_text,
            responses=dict(state.responses),
            current_question=question.prompt if question else None,
            current_field=question.field if question else None,
            summary=state.summary,
        )

    async def extract_profile_data(self, session_id: str) -> ExtractedProfileData:
        """
        Project answers onto the profile schema.

        Works at any progress: unanswered fields take defaults.

        Raises:
            SessionNotFoundError: Unknown session id
        """
        state = await self._load(session_id)
        return build_profile_data(state.responses, state.locale)

    async def current_field(self, session_id: str) -> Optional[str]:
        """Field of the question awaiting an answer, None once completed."""
        state = await self._load(session_id)
        question = self._question_for(state)
        return question.field if question else None

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _load(self, session_id: str) -> ConversationState:
        state = await self.store.get(session_id)
        if state is None:
            raise SessionNotFoundError(session_id)
        return state

    def _question_for(self, state: ConversationState) -> Optional[InterviewQuestion]:
        if state.is_completed or state.current_step >= len(self.questions):
            return None
        return self.questions[state.current_step]

    async def _speak(self, session_id: str, text: str, kind: PromptKind) -> None:
        try:
            await self.speech_output.speak(session_id, text, kind)
        except Exception as e:
            session_logger(logger, session_id).warning(
                f"Speech output failed ({kind.value}): {e}", extra={"reason": str(e)}
            )
