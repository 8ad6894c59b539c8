"""
Demo Speech Boundary

Stand-ins for the browser when no microphone is involved: canned but
realistic answers for every interview field, and a prompt sink that
just logs what Rooma would have said.
"""

import asyncio
import random
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from config.constants import ASSISTANT_LABEL
from services.voice.boundary import SpeechInput, SpeechPrompt
from utils.logging import get_logger, log_speech_event

logger = get_logger(__name__)


DEMO_RESPONSES: Dict[str, List[str]] = {
    "name": ["Sarah", "Jessica", "Emily", "Rachel", "Amanda", "Lisa"],
    "cleanliness": ["4", "5", "3", "4 - I like things pretty clean"],
    "socialLevel": ["3", "2 - I prefer quieter living", "4 - I enjoy socializing", "3 - balanced"],
    "sleepTime": ["11 PM", "10:30 PM", "midnight", "11:30 PM"],
    "pets": ["I have a cat", "No pets but I'm okay with them", "I don't have pets"],
    "interests": ["reading and yoga", "cooking and hiking", "music and art", "fitness and movies"],
    "roomType": ["single room", "I'm open to sharing", "preferably single"],
}

FALLBACK_RESPONSE = "I'm not sure"


class DemoSpeechInput(SpeechInput):
    """
    Answers each question with a random canned response.

    Args:
        field_lookup: async session_id -> field of the question being asked
                      (VoiceInterviewEngine.current_field fits)
        seed: Seed for reproducible answers
        delay_range: (min, max) seconds to "think" before answering
    """

    def __init__(
        self,
        field_lookup: Callable[[str], Awaitable[Optional[str]]],
        seed: Optional[int] = None,
        delay_range: Tuple[float, float] = (0.0, 0.0),
        responses: Optional[Dict[str, Sequence[str]]] = None,
    ):
        self.field_lookup = field_lookup
        self.delay_range = delay_range
        self.responses = responses or DEMO_RESPONSES
        self._random = random.Random(seed)

    async def listen(self, session_id: str) -> str:
        low, high = self.delay_range
        if high > 0:
            await asyncio.sleep(self._random.uniform(low, high))

        field_name = await self.field_lookup(session_id)
        choices = self.responses.get(field_name or "") or [FALLBACK_RESPONSE]
        answer = self._random.choice(list(choices))

        log_speech_event("listen", session_id, success=True, details=f"[demo] {answer}")
        return answer


def log_prompt(session_id: str, prompt: SpeechPrompt) -> None:
    """Deliver callback for demo runs: write the prompt to the log."""
    logger.info(f"[{session_id}] {ASSISTANT_LABEL}: {prompt.text}")
