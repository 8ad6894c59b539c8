"""
Interview Conductor

Drives an interview session from a SpeechInput until it completes:

    deliver pending prompts → listen (retry on no-speech) → submit → repeat

A capture failure leaves the session on its current question. Fatal
failures (permission denied, unsupported, aborted) stop the run at once;
others stop it after MAX_CAPTURE_FAILURES in a row. Either way the
session is handed back to the client at its current step.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Dict, Optional, Set, Union

from config.settings import settings
from services.interview.engine import VoiceInterviewEngine
from services.interview.state import InterviewStatus, StatusSnapshot
from services.voice.boundary import PromptOutbox, SpeechInput, SpeechPrompt, listen_with_retry
from utils.exceptions import CaptureFailure, InvalidStateError, SpeechCaptureError
from utils.logging import get_logger, session_logger

logger = get_logger(__name__)

Deliver = Callable[[str, SpeechPrompt], Union[None, Awaitable[None]]]

FATAL_CAPTURE_FAILURES = frozenset({
    CaptureFailure.PERMISSION_DENIED,
    CaptureFailure.UNSUPPORTED,
    CaptureFailure.ABORTED,
})


class InterviewConductor:
    """
    Runs speech-driven interviews on top of a VoiceInterviewEngine.

    Only one run may own a session at a time; is_driving() lets other
    entry points (the HTTP answer endpoint) keep out of its way.
    """

    def __init__(
        self,
        engine: VoiceInterviewEngine,
        outbox: PromptOutbox,
        max_failures: Optional[int] = None,
        question_delay: Optional[float] = None,
        retries: Optional[int] = None,
    ):
        self.engine = engine
        self.outbox = outbox
        self.max_failures = max_failures if max_failures is not None else settings.MAX_CAPTURE_FAILURES
        self.question_delay = (
            question_delay if question_delay is not None else settings.QUESTION_DELAY_SECONDS
        )
        self.retries = retries
        self._driving: Set[str] = set()
        self._tasks: Dict[str, asyncio.Task] = {}

    def is_driving(self, session_id: str) -> bool:
        return session_id in self._driving

    async def run(
        self,
        session_id: str,
        speech_input: SpeechInput,
        deliver: Optional[Deliver] = None
    ) -> StatusSnapshot:
        """
        Conduct the interview in the foreground.

        Args:
            session_id: An already started session
            speech_input: Where answers come from
            deliver: Called with each prompt as it is drained from the
                     outbox. Without it prompts stay queued for polling.

        Returns:
            Status when the run ends (completed or handed back)

        Raises:
            InvalidStateError: Another run already owns the session
            SessionNotFoundError: Unknown session id
        """
        self._claim(session_id)
        try:
            return await self._conduct(session_id, speech_input, deliver)
        finally:
            self._driving.discard(session_id)

    def start_background(
        self,
        session_id: str,
        speech_input: SpeechInput,
        deliver: Optional[Deliver] = None
    ) -> asyncio.Task:
        """Conduct the interview in a background task."""
        self._claim(session_id)
        task = asyncio.create_task(self._run_claimed(session_id, speech_input, deliver))
        self._tasks[session_id] = task
        task.add_done_callback(lambda t: self._on_task_done(session_id, t))
        return task

    async def shutdown(self) -> None:
        """Cancel every background run."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} running interview(s)")

    # =========================================================================
    # Internals
    # =========================================================================

    def _claim(self, session_id: str) -> None:
        if session_id in self._driving:
            raise InvalidStateError(
                session_id,
                message="Interview is already being conducted",
            )
        self._driving.add(session_id)

    async def _run_claimed(
        self,
        session_id: str,
        speech_input: SpeechInput,
        deliver: Optional[Deliver]
    ) -> StatusSnapshot:
        try:
            return await self._conduct(session_id, speech_input, deliver)
        finally:
            self._driving.discard(session_id)

    def _on_task_done(self, session_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(session_id, None)
        self._driving.discard(session_id)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            session_logger(logger, session_id).error(f"Interview run failed: {error}")

    async def _conduct(
        self,
        session_id: str,
        speech_input: SpeechInput,
        deliver: Optional[Deliver]
    ) -> StatusSnapshot:
        snapshot = await self.engine.get_status(session_id)
        failures = 0
        log = session_logger(logger, session_id)
        log.info(f"Conducting interview from step {snapshot.current_step}")

        while snapshot.status != InterviewStatus.COMPLETED:
            await self._flush(session_id, deliver)

            try:
                answer = await listen_with_retry(speech_input, session_id, self.retries)
            except SpeechCaptureError as e:
                failures += 1
                if e.reason in FATAL_CAPTURE_FAILURES:
                    log.warning(f"Stopping: capture {e.reason.value}", extra={"reason": e.reason.value})
                    break
                if failures >= self.max_failures:
                    log.warning(
                        f"Stopping after {failures} failed captures ({e.reason.value})",
                        extra={"reason": e.reason.value},
                    )
                    break
                log.info(f"Capture failed ({e.reason.value}), listening again")
                continue

            failures = 0
            await self.engine.submit_answer(session_id, answer)
            snapshot = await self.engine.get_status(session_id)

            if snapshot.status != InterviewStatus.COMPLETED and self.question_delay > 0:
                await asyncio.sleep(self.question_delay)

        await self._flush(session_id, deliver)
        return await self.engine.get_status(session_id)

    async def _flush(self, session_id: str, deliver: Optional[Deliver]) -> None:
        if deliver is None:
            return
        for prompt in self.outbox.drain(session_id):
            result = deliver(session_id, prompt)
            if inspect.isawaitable(result):
                await result
