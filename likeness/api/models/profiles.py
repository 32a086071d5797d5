"""API models for actor profile management."""
from typing import List, Optional

from pydantic import BaseModel, Field

from likeness.domain.entities.profile import VideoCategory


class CreateProfileRequest(BaseModel):
    name: str = Field(..., description="Actor name", min_length=1, max_length=200)


class UpdateProfileRequest(BaseModel):
    """Partial update; only fields present in the body are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    enable_full_body: Optional[bool] = None
    enable_multi_modal: Optional[bool] = None
    data_quality_score: Optional[float] = Field(None, ge=0.0, le=1.0)


class TrainingVideoRequest(BaseModel):
    category: VideoCategory = Field("facial", description="Capture category")
    video_uri: str = Field(..., description="Training video as a data URI or storage URL", min_length=1)


class IdentityUpdateRequest(BaseModel):
    embedding: List[float] = Field(..., description="Identity embedding", min_length=1)
    reference_frames: List[str] = Field(default_factory=list, description="Canonical face images")


class ConsistencyScoreRequest(BaseModel):
    score: float = Field(..., description="Consistency score to fold into the average", ge=0.0, le=1.0)
