"""API models for clip generation, refinement and consistency checks."""
from typing import List, Optional

from pydantic import BaseModel, Field

from likeness.core.config import settings
from likeness.domain.entities.emotions import EmotionIntensity
from likeness.domain.value_objects.generation import ClipResult, ConsistencyResult

# Constants for validation ranges used in API models
MIN_THRESHOLD = 0.0
MAX_THRESHOLD = 1.0


class ClipGenerationRequest(BaseModel):
    """Request model for the /generation/clips endpoint."""
    source_image: str = Field(..., description="Frame of the actor as a data URI", min_length=1)
    target_emotion: str = Field(..., description="Emotion to synthesize", min_length=1, max_length=64)
    clip_count: int = Field(
        1,
        ge=0,
        le=settings.MAX_CLIPS_PER_BATCH,
        description=f"Number of clips to attempt (0-{settings.MAX_CLIPS_PER_BATCH})",
    )
    identity_embedding: Optional[List[float]] = Field(
        None, description="Reference identity embedding for face preservation"
    )
    reference_frames: Optional[List[str]] = Field(None, description="Reference frames as data URIs")
    intensity: Optional[EmotionIntensity] = Field(None, description="Emotion intensity")
    validate_consistency: bool = Field(
        False, description="Discard clips that fail the identity consistency check"
    )
    profile_id: Optional[str] = Field(
        None, description="Actor profile to read the identity from and record the clips on"
    )


class ClipGenerationResponse(BaseModel):
    """Response model for the /generation/clips endpoint."""
    clips: List[ClipResult] = Field(..., description="Generated clips in completion order")


class RefinementRequest(BaseModel):
    """Request model for the /generation/refine endpoint."""
    base_image: str = Field(..., description="Base likeness image as a data URI", min_length=1)
    instructions: str = Field(..., description="Natural-language edit instructions", min_length=1)


class RefinementResponse(BaseModel):
    refined_image_uri: str = Field(..., description="Refined image as a data URI")


class ConsistencyRequest(BaseModel):
    """Request model for the /generation/consistency endpoint."""
    generated_media_uri: str = Field(..., description="Generated image or video as a data URI")
    identity_embedding: List[float] = Field(..., description="Reference identity embedding", min_length=1)
    identity_description: Optional[str] = Field(None, description="Reference face description")
    threshold: float = Field(
        settings.CONSISTENCY_THRESHOLD,
        description="Minimum similarity to pass (0.0 to 1.0)",
        ge=MIN_THRESHOLD, le=MAX_THRESHOLD,
    )


class ConsistencyResponse(BaseModel):
    """Response model for the /generation/consistency endpoint."""
    score: float
    passed: bool
    threshold: float
    details: Optional[str] = None

    @classmethod
    def from_result(cls, result: ConsistencyResult) -> "ConsistencyResponse":
        return cls(
            score=result.score,
            passed=result.passed,
            threshold=result.threshold,
            details=result.details,
        )
