"""Video analysis and identity embedding endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from likeness.api.features import require_feature
from likeness.api.models.analysis import (
    DataQualityRequest,
    IdentityEmbeddingRequest,
    VideoAnalysisRequest,
)
from likeness.core.config import FeatureFlags
from likeness.core.exceptions import (
    FeatureDisabledError,
    GatewayError,
    InvalidDataUriError,
    InvalidReferenceFramesError,
    ProfileNotFoundError,
    RateLimitedError,
)
from likeness.core.logging import get_logger
from likeness.domain.value_objects.analysis import (
    DataQualityReport,
    IdentityEmbedding,
    VideoAnalysisReport,
)
from likeness.infrastructure.dependencies import (
    get_analysis_service,
    get_feature_flags,
    get_identity_service,
    get_profile_service,
)
from likeness.services.analysis import VideoAnalysisService
from likeness.services.identity import IdentityEmbeddingService
from likeness.services.profiles import ActorProfileService

logger = get_logger(__name__)

analysis_router = APIRouter(
    responses={
        400: {"description": "Invalid media payload"},
        500: {"description": "Internal server error"},
    }
)
identity_router = APIRouter()


@analysis_router.post(
    "/video",
    response_model=VideoAnalysisReport,
    summary="Analyze actor footage",
    description="Reports how suitable a video is for training a likeness model.",
)
async def analyze_video(
    request: VideoAnalysisRequest,
    service: VideoAnalysisService = Depends(get_analysis_service),
) -> VideoAnalysisReport:
    try:
        return await service.analyze_video(request.video_uri)

    except InvalidDataUriError as e:
        logger.error("Invalid video payload", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except RateLimitedError as e:
        logger.warning("Video analysis rate limited", error=str(e))
        raise HTTPException(status_code=429, detail=str(e))
    except GatewayError as e:
        logger.error("Video analysis failed", error=str(e))
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during video analysis", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")


@analysis_router.post(
    "/quality",
    response_model=DataQualityReport,
    summary="Validate training data quality",
    description=(
        "Scores resolution, lighting, face visibility, motion blur and diversity. "
        "When a profile is given its data quality score is updated."
    ),
)
async def validate_data_quality(
    request: DataQualityRequest,
    service: VideoAnalysisService = Depends(get_analysis_service),
    profiles: ActorProfileService = Depends(get_profile_service),
) -> DataQualityReport:
    """Validate the quality of a training video.

    Args:
        request: Video and optional profile
        service: Video analysis service provided by dependency injection
        profiles: Profile service provided by dependency injection

    Returns:
        DataQualityReport with component scores and recommendations
    """
    try:
        if request.profile_id:
            await profiles.get_profile(request.profile_id)
        report = await service.validate_data_quality(request.video_uri)
        if request.profile_id:
            await profiles.update_profile(
                request.profile_id, data_quality_score=report.overall_score
            )
        return report

    except InvalidDataUriError as e:
        logger.error("Invalid video payload", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RateLimitedError as e:
        logger.warning("Data quality validation rate limited", error=str(e))
        raise HTTPException(status_code=429, detail=str(e))
    except GatewayError as e:
        logger.error("Data quality validation failed", error=str(e))
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during data quality validation", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")


@identity_router.post(
    "/embedding",
    response_model=IdentityEmbedding,
    summary="Generate an identity embedding",
    description=(
        "Builds a text-derived identity embedding from 1-10 reference frames. "
        "Requires the identity embedding feature."
    ),
    responses={403: {"description": "Identity embedding is disabled"}},
)
async def generate_identity_embedding(
    request: IdentityEmbeddingRequest,
    service: IdentityEmbeddingService = Depends(get_identity_service),
    profiles: ActorProfileService = Depends(get_profile_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> IdentityEmbedding:
    try:
        require_feature(flags, "ENABLE_IDENTITY_EMBEDDING")
        if request.profile_id:
            await profiles.get_profile(request.profile_id)

        identity = await service.generate(request.reference_frames)
        if request.profile_id:
            await profiles.update_identity_embedding(
                request.profile_id,
                identity.embedding,
                request.reference_frames,
            )
        return identity

    except FeatureDisabledError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except (InvalidDataUriError, InvalidReferenceFramesError) as e:
        logger.error("Invalid reference frames", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RateLimitedError as e:
        logger.warning("Identity embedding rate limited", error=str(e))
        raise HTTPException(status_code=429, detail=str(e))
    except GatewayError as e:
        logger.error("Identity embedding failed", error=str(e))
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during identity embedding", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")
