"""Clip generation, likeness refinement and consistency endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from likeness.api.models.generation import (
    ClipGenerationRequest,
    ClipGenerationResponse,
    ConsistencyRequest,
    ConsistencyResponse,
    RefinementRequest,
    RefinementResponse,
)
from likeness.core.exceptions import (
    ClipBatchFailedError,
    GatewayError,
    GenerationError,
    InvalidDataUriError,
    ProfileNotFoundError,
    RefinementExhaustedError,
)
from likeness.core.logging import get_logger
from likeness.infrastructure.dependencies import (
    get_clip_generation_service,
    get_consistency_validator,
    get_profile_service,
    get_refinement_service,
)
from likeness.services.clip_generation import ClipGenerationService
from likeness.services.consistency import ConsistencyValidator
from likeness.services.profiles import ActorProfileService
from likeness.services.refinement import LikenessRefinementService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        400: {"description": "Invalid media payload"},
        500: {"description": "Internal server error"},
        502: {"description": "Model provider failure"},
    }
)


@router.post(
    "/clips",
    response_model=ClipGenerationResponse,
    summary="Generate emotion clips",
    description=(
        "Generates short video clips of the person in the source image expressing the "
        "target emotion. Attempts run concurrently; partial success returns the clips "
        "that succeeded."
    ),
    responses={
        200: {
            "description": "At least one clip was generated",
            "content": {
                "application/json": {
                    "example": {
                        "clips": [
                            {"media_uri": "data:video/mp4;base64,AAAA...", "consistency_score": 0.91}
                        ]
                    }
                }
            },
        },
        404: {"description": "Profile not found"},
        502: {
            "description": "Every attempt failed",
            "content": {
                "application/json": {
                    "example": {"detail": "Video operation did not complete within 900s"}
                }
            },
        },
    },
)
async def generate_clips(
    request: ClipGenerationRequest,
    service: ClipGenerationService = Depends(get_clip_generation_service),
    profiles: ActorProfileService = Depends(get_profile_service),
) -> ClipGenerationResponse:
    """Generate emotion clips, optionally against an actor profile.

    Args:
        request: Clip generation request
        service: Clip generation service provided by dependency injection
        profiles: Profile service provided by dependency injection

    Returns:
        ClipGenerationResponse containing the generated clips

    Raises:
        HTTPException: If the request is invalid or every attempt fails
    """
    try:
        identity_embedding = request.identity_embedding
        reference_frames = request.reference_frames
        if request.profile_id:
            profile = await profiles.get_profile(request.profile_id)
            identity_embedding = identity_embedding or profile.face_embedding
            reference_frames = reference_frames or profile.reference_frames

        clips = await service.generate_clips(
            source_image=request.source_image,
            target_emotion=request.target_emotion,
            count=request.clip_count,
            identity_embedding=identity_embedding,
            reference_frames=reference_frames,
            intensity=request.intensity,
            validate_consistency=request.validate_consistency,
        )

        if request.profile_id and clips:
            await profiles.record_generated_clips(
                request.profile_id, request.target_emotion, clips, request.intensity
            )
        return ClipGenerationResponse(clips=clips)

    except InvalidDataUriError as e:
        logger.error("Invalid source image", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileNotFoundError as e:
        logger.warning("Profile not found for clip generation", error=str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except ClipBatchFailedError as e:
        logger.error(
            "Clip generation batch failed",
            error=str(e),
            cause=type(e.cause).__name__,
            **e.details,
        )
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during clip generation", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while generating clips"
        )


@router.post(
    "/refine",
    response_model=RefinementResponse,
    summary="Refine a likeness image",
    description="Applies natural-language instructions to a base likeness image.",
    responses={
        429: {
            "description": "Still rate limited after all retries",
            "content": {
                "application/json": {
                    "example": {"detail": "Failed to refine likeness after multiple retries."}
                }
            },
        },
    },
)
async def refine_likeness(
    request: RefinementRequest,
    service: LikenessRefinementService = Depends(get_refinement_service),
) -> RefinementResponse:
    """Refine a likeness image.

    Raises:
        HTTPException: If the provider fails or keeps rate limiting
    """
    try:
        refined_uri = await service.refine(request.base_image, request.instructions)
        return RefinementResponse(refined_image_uri=refined_uri)

    except InvalidDataUriError as e:
        logger.error("Invalid base image", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except RefinementExhaustedError as e:
        logger.error("Likeness refinement rate limited", error=str(e))
        raise HTTPException(status_code=429, detail=str(e))
    except (GatewayError, GenerationError) as e:
        logger.error("Likeness refinement failed", error=str(e), kind=type(e).__name__)
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error during likeness refinement", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")


@router.post(
    "/consistency",
    response_model=ConsistencyResponse,
    summary="Validate identity consistency",
    description=(
        "Scores generated media against a reference identity embedding. Validation "
        "errors are reported as a failing result rather than an HTTP error."
    ),
)
async def validate_consistency(
    request: ConsistencyRequest,
    validator: ConsistencyValidator = Depends(get_consistency_validator),
) -> ConsistencyResponse:
    try:
        result = await validator.validate(
            request.generated_media_uri,
            request.identity_embedding,
            identity_description=request.identity_description,
            threshold=request.threshold,
        )
        return ConsistencyResponse.from_result(result)

    except Exception as e:
        logger.error("Unexpected error during consistency validation", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")
