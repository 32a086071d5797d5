"""Generation value objects."""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from likeness.domain.entities.emotions import EmotionIntensity


class PromptPart(BaseModel):
    """One part of a multimodal prompt: text or a data URI."""
    text: Optional[str] = Field(None, description="Prompt text")
    media_uri: Optional[str] = Field(None, description="Media as a data URI")

    @classmethod
    def from_text(cls, text: str) -> "PromptPart":
        return cls(text=text)

    @classmethod
    def from_media(cls, media_uri: str) -> "PromptPart":
        return cls(media_uri=media_uri)


class MediaResult(BaseModel):
    """Media produced by a model."""
    media_uri: str = Field(..., description="Data URI or transient provider URL")
    content_type: str = Field(..., description="MIME type of the media")


class Completion(BaseModel):
    """Result of a synchronous completion request."""
    text: Optional[str] = Field(None, description="Concatenated text output")
    output: Optional[Any] = Field(None, description="Output parsed against the requested schema")
    media: List[MediaResult] = Field(default_factory=list, description="Media parts in the response")


class IdentityContext(BaseModel):
    """Reference identity used to keep generated faces consistent."""
    model_config = ConfigDict(frozen=True)

    embedding: List[float] = Field(..., description="Identity embedding")
    reference_frames: List[str] = Field(default_factory=list, description="Reference frames as data URIs")


class GenerationRequest(BaseModel):
    """A video generation request. Immutable once submitted."""
    model_config = ConfigDict(frozen=True)

    source_media: str = Field(..., description="Source image as a data URI")
    target_description: str = Field(..., description="Generation prompt")
    intensity: Optional[EmotionIntensity] = None
    identity_context: Optional[IdentityContext] = None


class VideoGenerationConfig(BaseModel):
    """Provider-side video generation options."""
    duration_seconds: int = 8
    aspect_ratio: str = "16:9"
    person_generation: str = "allow_adult"


class OperationError(BaseModel):
    """Error reported by a completed remote operation."""
    message: str
    code: Optional[int] = None


class Operation(BaseModel):
    """Snapshot of a remote long-running operation.

    Transitions only from pending to done; the client never changes its state.
    """
    id: str = Field(..., description="Provider operation name")
    done: bool = False
    output: Optional[MediaResult] = None
    error: Optional[OperationError] = None


class ClipResult(BaseModel):
    """One successfully generated clip."""
    media_uri: str = Field(..., description="Clip as a data URI")
    consistency_score: Optional[float] = Field(None, description="Identity similarity if validated")


class ConsistencyResult(BaseModel):
    """Outcome of an identity consistency check."""
    score: float = Field(..., description="Similarity score")
    passed: bool = Field(..., description="True if score >= threshold")
    threshold: float = Field(..., description="Threshold that was applied", ge=0.0, le=1.0)
    details: Optional[str] = None
    errored: bool = Field(False, description="True when the check could not be carried out")
