"""
Application Constants

Centralizes magic numbers and fixed values for the voice interview.
Avoids hardcoded values scattered throughout the codebase.

Usage:
    from config.constants import NUMERIC_FIELDS, DEFAULT_LEVEL
"""

# =============================================================================
# Interview Flow
# =============================================================================

# Fields whose spoken answers go through number normalization
NUMERIC_FIELDS = frozenset({'cleanliness', 'socialLevel'})

# Progress is reported as a percentage and never exceeds this
MAX_PROGRESS_PERCENT = 100

# Transcript speaker labels
ASSISTANT_LABEL = "Rooma"
USER_LABEL = "User"

CLOSING_MESSAGE = (
    "Thank you for taking the time to share your preferences! "
    "This information will help us find you the perfect roommate match."
)


# =============================================================================
# Speech Capture
# =============================================================================

# Short, confident recognitions of these are accepted as number answers
CONFIDENT_NUMBER_THRESHOLD = 0.5
MAX_NUMBER_TRANSCRIPT_LENGTH = 5


# =============================================================================
# Profile Defaults (applied to unanswered interview fields)
# =============================================================================

DEFAULT_LEVEL = 3
DEFAULT_IMPORTANCE = "medium"
DEFAULT_SLEEP_TIME = "23:00"
DEFAULT_WAKE_TIME = "07:00"
DEFAULT_ROOM_TYPE = "no_preference"
DEFAULT_FLOOR_TYPE = "no_preference"
DEFAULT_AGE = 22
DEFAULT_LOCATION = "San Francisco, CA"
DEFAULT_OCCUPATION = "Student"
DEFAULT_AGE_RANGE = (18, 30)
DEFAULT_BUDGET_RANGE = (500, 1500)
DEFAULT_LOCATION_RADIUS = 10
DEFAULT_LANGUAGES = ("English",)
