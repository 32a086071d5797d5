"""Analysis value objects.

These models double as response schemas for structured model completions, so
their field descriptions are written for the model as much as for readers.
"""
from typing import List

from pydantic import BaseModel, Field

# Weights for the overall data quality score
QUALITY_WEIGHTS = {
    "resolution": 0.20,
    "lighting": 0.25,
    "face_visibility": 0.30,
    "motion_blur": 0.10,
    "diversity": 0.15,
}


class VideoAnalysisReport(BaseModel):
    """Suitability assessment of footage for likeness training."""
    suitability_report: str = Field(
        ...,
        description=(
            "A detailed report on the video data suitability for training the likeness model, "
            "including identified gaps in emotional range or body posture representation."
        ),
    )


class FaceDescription(BaseModel):
    """Text description of facial features."""
    description: str = Field(..., description="Detailed description of facial features")


class ResolutionQuality(BaseModel):
    width: int
    height: int
    score: float = Field(..., ge=0.0, le=1.0)


class LightingQuality(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    issues: List[str] = Field(default_factory=list)


class FaceVisibilityQuality(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    percentage: float = Field(..., ge=0.0, le=100.0)


class MotionBlurQuality(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    detected: bool


class DiversityQuality(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    angles: int
    expressions: int


class DataQualityReport(BaseModel):
    """Quality report for a training video."""
    overall_score: float = Field(..., description="Overall quality score (0-1)", ge=0.0, le=1.0)
    resolution: ResolutionQuality
    lighting: LightingQuality
    face_visibility: FaceVisibilityQuality
    motion_blur: MotionBlurQuality
    diversity: DiversityQuality
    recommendations: List[str] = Field(default_factory=list)

    def weighted_score(self) -> float:
        """Weighted average of the component scores."""
        return (
            self.resolution.score * QUALITY_WEIGHTS["resolution"]
            + self.lighting.score * QUALITY_WEIGHTS["lighting"]
            + self.face_visibility.score * QUALITY_WEIGHTS["face_visibility"]
            + self.motion_blur.score * QUALITY_WEIGHTS["motion_blur"]
            + self.diversity.score * QUALITY_WEIGHTS["diversity"]
        )


class IdentityEmbedding(BaseModel):
    """Text-derived identity embedding for an actor."""
    embedding: List[float] = Field(..., description="Identity embedding vector (text-based proxy)")
    face_description: str = Field(..., description="Description of the canonical frame")
    consistency_score: float = Field(..., description="Mean pairwise similarity of the reference frames")
    canonical_frame_index: int = Field(..., description="Index of the most representative frame")
