"""
Interview Questions

The fixed, ordered question list Rooma walks through during profile setup.
"""

from dataclasses import dataclass
from typing import Tuple

from config.constants import NUMERIC_FIELDS


@dataclass(frozen=True)
class InterviewQuestion:
    """One step of the interview. Field names match the profile schema."""
    step: int
    field: str
    prompt: str
    expected_response: str
    follow_up: str

    @property
    def is_numeric(self) -> bool:
        """Whether answers are run through spoken-number normalization."""
        return self.field in NUMERIC_FIELDS


INTERVIEW_QUESTIONS: Tuple[InterviewQuestion, ...] = (
    InterviewQuestion(
        step=1,
        field="name",
        prompt="Hi! I'm Rooma, your AI roommate matching assistant. Could you please tell me your name?",
        expected_response="My name is...",
        follow_up="Nice to meet you!",
    ),
    InterviewQuestion(
        step=2,
        field="cleanliness",
        prompt=(
            "On a scale of 1-5, how important is cleanliness to you in shared spaces? "
            "1 being not important at all, 5 being extremely important."
        ),
        expected_response="I'd say...",
        follow_up="That's helpful to know for matching!",
    ),
    InterviewQuestion(
        step=3,
        field="socialLevel",
        prompt=(
            "How social are you? On a scale of 1-5, do you prefer quiet time at home (1) "
            "or lots of social interaction (5)?"
        ),
        expected_response="I'm usually around...",
        follow_up="Great, that helps me understand your social preferences.",
    ),
    InterviewQuestion(
        step=4,
        field="sleepTime",
        prompt="What time do you usually go to bed? This helps match you with someone with a compatible schedule.",
        expected_response="I usually sleep around...",
        follow_up="Perfect, sleep schedules are important for compatibility.",
    ),
    InterviewQuestion(
        step=5,
        field="pets",
        prompt="Do you have any pets, or are you okay living with pets?",
        expected_response="I have... / I'm okay with...",
        follow_up="Good to know about your pet preferences.",
    ),
    InterviewQuestion(
        step=6,
        field="interests",
        prompt="What are some of your interests or hobbies? This helps find someone you might connect with.",
        expected_response="I enjoy...",
        follow_up="Those sound like great interests!",
    ),
    InterviewQuestion(
        step=7,
        field="roomType",
        prompt="Would you prefer a single room or are you open to sharing a room?",
        expected_response="I prefer...",
        follow_up="That's noted for your room preferences.",
    ),
)


def validate_questions(questions: Tuple[InterviewQuestion, ...]) -> None:
    """
    Check a question list can drive an interview.

    Raises:
        ValueError: If the list is empty, steps are not 1..N in order,
                    or a field is asked twice.
    """
    if not questions:
        raise ValueError("Interview needs at least one question")

    expected_steps = list(range(1, len(questions) + 1))
    if [q.step for q in questions] != expected_steps:
        raise ValueError("Question steps must run 1..N in order")

    fields = [q.field for q in questions]
    if len(set(fields)) != len(fields):
        raise ValueError("Each question must map to a distinct field")
