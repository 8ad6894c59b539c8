"""
Profile Projection

Turns interview answers into the profile shape the matching service
consumes. Pure functions: nothing here touches session state.

Every field the interview has not answered yet gets a fixed default, so
a partial interview still yields a complete profile.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config.constants import (
    DEFAULT_AGE,
    DEFAULT_AGE_RANGE,
    DEFAULT_BUDGET_RANGE,
    DEFAULT_FLOOR_TYPE,
    DEFAULT_IMPORTANCE,
    DEFAULT_LANGUAGES,
    DEFAULT_LEVEL,
    DEFAULT_LOCATION,
    DEFAULT_LOCATION_RADIUS,
    DEFAULT_OCCUPATION,
    DEFAULT_ROOM_TYPE,
    DEFAULT_SLEEP_TIME,
    DEFAULT_WAKE_TIME,
    CLOSING_MESSAGE,
)
from services.voice.normalization import normalize_spoken_number


# =============================================================================
# Profile Schema
# =============================================================================

class _CamelModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Lifestyle(_CamelModel):
    cleanliness: int = DEFAULT_LEVEL
    cleanliness_importance: str = DEFAULT_IMPORTANCE
    social_level: int = DEFAULT_LEVEL
    social_level_importance: str = DEFAULT_IMPORTANCE
    sleep_time: str = DEFAULT_SLEEP_TIME
    wake_time: str = DEFAULT_WAKE_TIME
    sleep_importance: str = "high"
    work_schedule: str = DEFAULT_OCCUPATION
    pets: bool = False
    pet_type: str = ""
    smoking: bool = False
    drinking: bool = False
    drinking_frequency: str = "never"
    room_type: str = DEFAULT_ROOM_TYPE
    floor_type: str = DEFAULT_FLOOR_TYPE
    cooking: bool = True
    music_level: int = 2
    music_importance: str = "low"
    lifestyle_tags: List[str] = Field(default_factory=list)
    guest_policy: str = "occasionally"


class RoommatePreferences(_CamelModel):
    preferred_cleanliness: int = DEFAULT_LEVEL
    cleanliness_importance: str = DEFAULT_IMPORTANCE
    preferred_social_level: int = DEFAULT_LEVEL
    social_importance: str = DEFAULT_IMPORTANCE
    ok_with_pets: bool = False
    pet_importance: str = DEFAULT_IMPORTANCE
    ok_with_smoking: bool = False
    smoking_importance: str = "high"
    preferred_sleep_schedule: str = "flexible"
    sleep_importance: str = "high"
    preferred_guest_policy: str = "occasionally"
    guest_importance: str = "low"
    interest_matching: str = "important"
    age_range: List[int] = Field(default_factory=lambda: list(DEFAULT_AGE_RANGE))
    location_radius: int = DEFAULT_LOCATION_RADIUS
    budget_range: List[int] = Field(default_factory=lambda: list(DEFAULT_BUDGET_RANGE))
    deal_breakers: List[str] = Field(default_factory=lambda: ["smoking"])
    must_haves: List[str] = Field(default_factory=lambda: ["clean", "respectful"])


class ExtractedProfileData(_CamelModel):
    """Profile fields derived from interview answers."""
    name: str = ""
    age: int = DEFAULT_AGE
    location: str = DEFAULT_LOCATION
    occupation: str = DEFAULT_OCCUPATION
    budget: str = ""
    bio: str = ""
    lifestyle: Lifestyle = Field(default_factory=Lifestyle)
    roommate_preferences: RoommatePreferences = Field(default_factory=RoommatePreferences)
    interests: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=lambda: list(DEFAULT_LANGUAGES))

    def to_client_dict(self) -> Dict[str, Any]:
        """camelCase dict in the shape the profile-update endpoint expects."""
        return self.model_dump(by_alias=True)


# =============================================================================
# Answer Heuristics
# =============================================================================

NAME_PREFIXES = re.compile(
    r"^(?:hi,?\s+|hello,?\s+)?(?:my\s+name\s+is|my\s+name's|i\s+am|i'm|it's|it\s+is|this\s+is|call\s+me)\s+",
    re.IGNORECASE,
)
NEGATION = re.compile(r"\b(?:no|not|don'?t|do\s+not|never|none)\b")
AFFIRMATIVE_PET = re.compile(r"\b(?:yes|yeah|have|own|got)\b")
PET_TOLERANT = re.compile(r"\b(?:okay|ok|fine|love|like|open|happy)\b")
PET_AVERSE = re.compile(r"\b(?:allergic|not\s+okay|not\s+ok|not\s+fine|prefer\s+no)\b")
CLOCK_TIME = re.compile(
    r"\b(?P<h12>\d{1,2})(?:[:\s](?P<m12>\d{2}))?\s*(?P<meridiem>[ap])\.?\s*m\b\.?"
    r"|\b(?P<h24>\d{1,2}):(?P<m24>\d{2})\b"
    # "at 10", or a bare "10" answer, when no a.m./p.m. follows it
    r"|(?:\b(?:at|around|about|by|before|after|until|till)\s+|^)"
    r"(?P<bare>\d{1,2})(?:[:\s](?P<bare_minute>\d{2}))?\b(?![:\s]*\d*\s*[ap]\.?\s*m\b)"
)
INTEREST_SEPARATORS = re.compile(r",|&|\band\b")


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def parse_name(value: Any) -> str:
    """'My name is Sarah.' → 'Sarah'."""
    text = NAME_PREFIXES.sub("", _text(value))
    return text.strip(" .!?,")


def parse_level(value: Any) -> Optional[int]:
    """First whole number in an answer ('4 - I like things clean' → 4)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = re.search(r"\d+", _text(value))
    return int(match.group()) if match else None


def parse_pets(value: Any) -> Tuple[bool, str, bool]:
    """
    Read a pets answer.

    Returns:
        (has_pets, pet_type, ok_with_pets)
    """
    if isinstance(value, bool):
        return value, "other" if value else "", value

    text = _text(value).lower()
    has_pets = bool(AFFIRMATIVE_PET.search(text)) and not NEGATION.search(text)

    pet_type = ""
    if has_pets:
        if "cat" in text:
            pet_type = "cat"
        elif "dog" in text:
            pet_type = "dog"
        else:
            pet_type = "other"

    ok_with_pets = has_pets or (bool(PET_TOLERANT.search(text)) and not PET_AVERSE.search(text))
    return has_pets, pet_type, ok_with_pets


def parse_yes_no(value: Any) -> bool:
    """Plain yes/no answer; True values and "yes"-style text without a negation."""
    if isinstance(value, bool):
        return value
    text = _text(value).lower()
    return bool(re.search(r"\b(?:yes|yeah|sure|do|okay|ok)\b", text)) and not NEGATION.search(text)


def parse_sleep_time(value: Any, locale: str = "en") -> Optional[str]:
    """
    Read a bedtime as HH:MM.

    '11 PM' → '23:00', 'ten thirty pm' → '22:30', 'midnight' → '00:00'.
    The first time mentioned is the bedtime, so in "at 10 and up at 6 am"
    the a.m. belongs to the wake-up time. Hours given without a.m./p.m.
    (6 to 12) are read as evening. Returns None when no time can be found.
    """
    text = normalize_spoken_number(_text(value), locale)
    if not text:
        return None
    if "midnight" in text:
        return "00:00"
    if "noon" in text:
        return "12:00"

    match = CLOCK_TIME.search(text)
    if not match:
        return None

    if match.group("h12"):
        hour = int(match.group("h12"))
        minute = int(match.group("m12") or 0)
        if match.group("meridiem") == "p" and hour < 12:
            hour += 12
        elif match.group("meridiem") == "a" and hour == 12:
            hour = 0
    elif match.group("h24"):
        hour = int(match.group("h24"))
        minute = int(match.group("m24"))
    else:
        hour = int(match.group("bare"))
        minute = int(match.group("bare_minute") or 0)
        if 6 <= hour < 12:
            hour += 12
        elif hour == 12:
            hour = 0

    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def parse_interests(value: Any) -> List[str]:
    """'reading and yoga, cooking' → ['reading', 'yoga', 'cooking']."""
    if isinstance(value, (list, tuple)):
        return [_text(v) for v in value if _text(v)]
    parts = INTEREST_SEPARATORS.split(_text(value))
    return [part.strip(" .") for part in parts if part.strip(" .")]


def parse_room_type(value: Any) -> str:
    text = _text(value).lower()
    if "single" in text:
        return "single"
    if "shar" in text or "open" in text:
        return "shared"
    return DEFAULT_ROOM_TYPE


def _describe_cleanliness(level: int) -> str:
    return "very clean and organized" if level == 5 else "reasonably clean"


def _describe_social(level: int) -> str:
    if level == 3:
        return "enjoy a good balance of social time and quiet time"
    if level > 3:
        return "am quite social"
    return "prefer quieter living"


# =============================================================================
# Projection
# =============================================================================

def build_profile_data(responses: Mapping[str, Any], locale: str = "en") -> ExtractedProfileData:
    """
    Project interview answers onto the profile schema.

    Unanswered fields take defaults (cleanliness 3, social level 3,
    no pets, 23:00 bedtime, no room preference). Answers are interpreted,
    not validated: an out-of-range level is passed through as spoken.

    Args:
        responses: field → answer, as stored by the interview engine
        locale: Language tag the answers were spoken in

    Returns:
        ExtractedProfileData
    """
    name = parse_name(responses.get("name"))

    cleanliness = parse_level(responses.get("cleanliness"))
    if cleanliness is None:
        cleanliness = DEFAULT_LEVEL
    social_level = parse_level(responses.get("socialLevel"))
    if social_level is None:
        social_level = DEFAULT_LEVEL

    sleep_time = DEFAULT_SLEEP_TIME
    if _text(responses.get("sleepTime")):
        sleep_time = parse_sleep_time(responses["sleepTime"], locale) or _text(responses["sleepTime"])

    has_pets, pet_type, ok_with_pets = False, "", False
    if "pets" in responses:
        has_pets, pet_type, ok_with_pets = parse_pets(responses["pets"])

    interests = parse_interests(responses.get("interests"))
    room_type = parse_room_type(responses.get("roomType"))

    smoking = parse_yes_no(responses.get("smoking"))
    ok_with_smoking = parse_yes_no(responses.get("okWithSmoking"))

    bio = (
        f"I'm {name or 'a student'} looking for a compatible roommate. "
        f"I'm {_describe_cleanliness(cleanliness)} and I {_describe_social(social_level)}."
    )
    if interests:
        bio += f" My interests include {', '.join(interests)}."

    lifestyle = Lifestyle(
        cleanliness=cleanliness,
        social_level=social_level,
        sleep_time=sleep_time,
        wake_time=_text(responses.get("wakeTime")) or DEFAULT_WAKE_TIME,
        pets=has_pets,
        pet_type=pet_type,
        smoking=smoking,
        room_type=room_type,
        floor_type=_text(responses.get("floorType")) or DEFAULT_FLOOR_TYPE,
        lifestyle_tags=interests,
    )

    preferences = RoommatePreferences(
        preferred_cleanliness=cleanliness,
        preferred_social_level=social_level,
        ok_with_pets=ok_with_pets,
        pet_importance="low" if ok_with_pets else DEFAULT_IMPORTANCE,
        ok_with_smoking=ok_with_smoking,
        smoking_importance="low" if ok_with_smoking else "high",
        deal_breakers=[] if ok_with_smoking else ["smoking"],
    )

    return ExtractedProfileData(
        name=name,
        budget=_text(responses.get("budget")),
        bio=bio,
        lifestyle=lifestyle,
        roommate_preferences=preferences,
        interests=interests,
    )


def render_summary(responses: Mapping[str, Any]) -> str:
    """Human-readable recap of an interview, shown once it completes."""
    def answered(field_name: str, default: str = "Not specified") -> str:
        return _text(responses.get(field_name)) or default

    has_pets, _, ok_with_pets = parse_pets(responses.get("pets"))
    interests = parse_interests(responses.get("interests"))

    lines = [
        "Hi, this is Rooma from RooMate.ai! I'd like to ask a few questions "
        "to help match you with a compatible roommate.",
        "",
        f"User Name: {parse_name(responses.get('name')) or 'Not provided'}",
        "",
        f"Sleep Schedule: sleeps at {answered('sleepTime', 'not specified')}, "
        f"wakes at {answered('wakeTime', 'not specified')}",
        "",
        f"Cleanliness Level: {answered('cleanliness')}/5",
        "",
        f"Social Level: {answered('socialLevel')}/5",
        "",
        f"Pets: {'Has pets' if has_pets else 'No pets'} "
        f"({'okay with pets' if ok_with_pets else 'prefers no pets'})",
        "",
        f"Interests: {', '.join(interests) if interests else 'Not specified'}",
        "",
        f"Room Preferences: {answered('roomType', 'No preference')}",
        "",
        f"Budget: {answered('budget')}",
        "",
        CLOSING_MESSAGE,
    ]
    return "\n".join(lines)
