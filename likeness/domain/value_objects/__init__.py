"""Value objects package."""
from .analysis import DataQualityReport, FaceDescription, IdentityEmbedding, VideoAnalysisReport
from .generation import (
    ClipResult,
    Completion,
    ConsistencyResult,
    GenerationRequest,
    IdentityContext,
    MediaResult,
    Operation,
    OperationError,
    PromptPart,
    VideoGenerationConfig,
)

__all__ = [
    "ClipResult",
    "Completion",
    "ConsistencyResult",
    "DataQualityReport",
    "FaceDescription",
    "GenerationRequest",
    "IdentityContext",
    "IdentityEmbedding",
    "MediaResult",
    "Operation",
    "OperationError",
    "PromptPart",
    "VideoAnalysisReport",
    "VideoGenerationConfig",
]
