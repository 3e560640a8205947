"""
Mood check-in responses.

A fixed lookup from the widget's mood buttons to a supportive reply. Pure
and stateless: the same mood always yields the same text.
"""

from enum import Enum
from typing import Any, Dict


class Mood(str, Enum):
    """Mood values offered by the widget."""

    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    STRESSED = "stressed"
    OVERWHELMED = "overwhelmed"
    OTHER = "other"


MOOD_RESPONSES: Dict[Mood, str] = {
    Mood.GREAT: "That's wonderful! Let's make the most of this positive energy! 🌟",
    Mood.GOOD: "Glad to hear you're doing well! Ready to learn? 📚",
    Mood.OKAY: "That's perfectly fine. We'll take things at your pace today. 💜",
    Mood.STRESSED: "I hear you. Let's work through this together, one step at a time. 🤗",
    Mood.OVERWHELMED: "Thank you for being honest. Remember, you're not alone. Let's start with something small. 💪",
}

DEFAULT_MOOD_RESPONSE = "I'm here for you, whatever you need. 💜"


def get_mood_response(mood: Any) -> str:
    """Return the supportive reply for a mood; free text and `other` get the default."""
    if not isinstance(mood, str):
        return DEFAULT_MOOD_RESPONSE
    try:
        return MOOD_RESPONSES.get(Mood(mood), DEFAULT_MOOD_RESPONSE)
    except ValueError:
        return DEFAULT_MOOD_RESPONSE
