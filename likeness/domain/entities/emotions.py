"""Emotion taxonomy used for clip synthesis and coverage tracking."""
from typing import List, Literal

EmotionIntensity = Literal["subtle", "moderate", "intense"]

# Emotions offered when the expanded taxonomy is disabled
BASIC_EMOTIONS: List[str] = [
    "Happy",
    "Sad",
    "Angry",
    "Surprised",
    "Fearful",
    "Disgusted",
    "Ecstatic",
    "Weary",
    "Neutral",
]

EXPANDED_EMOTIONS: List[str] = [
    "Happy",
    "Sad",
    "Angry",
    "Surprised",
    "Fearful",
    "Disgusted",
    "Ecstatic",
    "Weary",
    "Neutral",
    "Content",
    "Amused",
    "Proud",
    "Hopeful",
    "Loving",
    "Grateful",
    "Confused",
    "Anxious",
    "Frustrated",
    "Embarrassed",
    "Guilty",
    "Jealous",
    "Bored",
    "Contemptuous",
    "Determined",
]

# Coverage percentages are measured against the full taxonomy
TOTAL_EMOTIONS = len(EXPANDED_EMOTIONS)


def available_emotions(expanded: bool) -> List[str]:
    """Get the emotion list for the current taxonomy setting."""
    return list(EXPANDED_EMOTIONS if expanded else BASIC_EMOTIONS)
