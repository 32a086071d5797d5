"""Actor profile domain entities."""
import random
import string
import time
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from likeness.domain.entities.emotions import TOTAL_EMOTIONS, EmotionIntensity

VideoCategory = Literal["facial", "body", "motion"]

_ID_ALPHABET = string.ascii_lowercase + string.digits


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_profile_id() -> str:
    """Generate a unique id of the form ``profile_<epoch-ms>_<random>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"profile_{int(time.time() * 1000)}_{suffix}"


def coverage_percent(covered_emotions: int) -> float:
    """Percentage of the emotion taxonomy covered, capped at 100."""
    return min(100.0, covered_emotions / TOTAL_EMOTIONS * 100)


def running_average(current: float, incoming: float) -> float:
    """Fold a new consistency score into the running average."""
    if current == 0:
        return incoming
    return (current + incoming) / 2


class EmotionClipData(BaseModel):
    """Generated clips recorded for one emotion."""
    clips: List[str] = Field(default_factory=list, description="Clip data URIs or storage URLs")
    quality: float = Field(0.0, description="Quality score (0-1)", ge=0.0, le=1.0)
    intensity: EmotionIntensity = Field("moderate", description="Emotion intensity level")
    generated_at: datetime = Field(default_factory=utcnow, description="When the clips were generated")


class MotorTraits(BaseModel):
    """Movement characteristics used for full-body modeling."""
    gait: str = Field(..., description="Natural language description of the gait")
    gestures: List[str] = Field(default_factory=list, description="Common gestures")
    posture: str = Field(..., description="Typical posture description")


class TrainingVideos(BaseModel):
    """Training videos grouped by capture category."""
    facial: List[str] = Field(default_factory=list)
    body: List[str] = Field(default_factory=list)
    motion: List[str] = Field(default_factory=list)


class ActorProfile(BaseModel):
    """Long-lived aggregate describing one actor's likeness data."""
    id: str = Field(default_factory=generate_profile_id, description="Profile identifier")
    name: str = Field(..., description="Actor name")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # Identity embeddings
    face_embedding: Optional[List[float]] = Field(None, description="Text-derived identity embedding")
    body_embedding: Optional[List[float]] = Field(None, description="Body identity embedding")
    reference_frames: List[str] = Field(default_factory=list, description="Canonical face images")

    training_videos: TrainingVideos = Field(default_factory=TrainingVideos)
    emotion_coverage: Dict[str, EmotionClipData] = Field(default_factory=dict)
    motor_traits: Optional[MotorTraits] = None

    # Quality metrics
    consistency_score: float = Field(0.0, description="Average identity consistency (0-1)")
    emotion_coverage_percent: float = Field(0.0, description="Share of emotions covered (0-100)")
    data_quality_score: float = Field(0.0, description="Overall data quality (0-1)")

    enable_full_body: bool = False
    enable_multi_modal: bool = False
