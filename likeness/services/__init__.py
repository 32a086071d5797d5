"""Application services package."""
from .analysis import VideoAnalysisService
from .clip_generation import ClipGenerationService
from .consistency import ConsistencyValidator
from .identity import IdentityEmbeddingService
from .profiles import ActorProfileService
from .refinement import LikenessRefinementService
from .similarity import cosine_similarity

__all__ = [
    "ActorProfileService",
    "ClipGenerationService",
    "ConsistencyValidator",
    "IdentityEmbeddingService",
    "LikenessRefinementService",
    "VideoAnalysisService",
    "cosine_similarity",
]
