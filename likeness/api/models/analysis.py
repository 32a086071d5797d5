"""API models for video analysis and identity embedding."""
from typing import List, Optional

from pydantic import BaseModel, Field

from likeness.services.identity import MAX_REFERENCE_FRAMES


class VideoAnalysisRequest(BaseModel):
    """Request model for the /analysis/video endpoint."""
    video_uri: str = Field(..., description="Actor footage as a data URI", min_length=1)


class DataQualityRequest(BaseModel):
    """Request model for the /analysis/quality endpoint."""
    video_uri: str = Field(..., description="Training video as a data URI", min_length=1)
    profile_id: Optional[str] = Field(
        None, description="Profile whose data quality score is updated with the result"
    )


class IdentityEmbeddingRequest(BaseModel):
    """Request model for the /identity/embedding endpoint."""
    reference_frames: List[str] = Field(
        ...,
        description=f"Face images as data URIs (1-{MAX_REFERENCE_FRAMES})",
        min_length=1,
        max_length=MAX_REFERENCE_FRAMES,
    )
    profile_id: Optional[str] = Field(
        None, description="Profile that stores the resulting embedding"
    )
