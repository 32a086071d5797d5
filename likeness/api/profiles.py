"""Actor profile endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from likeness.api.features import require_feature
from likeness.api.models.profiles import (
    ConsistencyScoreRequest,
    CreateProfileRequest,
    IdentityUpdateRequest,
    TrainingVideoRequest,
    UpdateProfileRequest,
)
from likeness.core.config import FeatureFlags
from likeness.core.exceptions import (
    FeatureDisabledError,
    ProfileNotFoundError,
    ProfileStoreError,
)
from likeness.core.logging import get_logger
from likeness.domain.entities.profile import ActorProfile, EmotionClipData, MotorTraits
from likeness.infrastructure.dependencies import get_feature_flags, get_profile_service
from likeness.services.profiles import ActorProfileService

logger = get_logger(__name__)
router = APIRouter(
    responses={
        404: {"description": "Profile not found"},
        500: {"description": "Internal server error"},
    }
)


def _store_failure(e: ProfileStoreError) -> HTTPException:
    logger.error("Profile store failure", error=str(e), exc_info=True)
    return HTTPException(status_code=500, detail="Failed to access profile storage")


@router.get("", response_model=List[ActorProfile], summary="List actor profiles")
async def list_profiles(
    service: ActorProfileService = Depends(get_profile_service),
) -> List[ActorProfile]:
    try:
        return await service.list_profiles()
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.post("", response_model=ActorProfile, status_code=201, summary="Create an actor profile")
async def create_profile(
    request: CreateProfileRequest,
    service: ActorProfileService = Depends(get_profile_service),
) -> ActorProfile:
    try:
        return await service.create_profile(request.name)
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.get("/{profile_id}", response_model=ActorProfile, summary="Get an actor profile")
async def get_profile(
    profile_id: str,
    service: ActorProfileService = Depends(get_profile_service),
) -> ActorProfile:
    try:
        return await service.get_profile(profile_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.patch("/{profile_id}", response_model=ActorProfile, summary="Update an actor profile")
async def update_profile(
    profile_id: str,
    request: UpdateProfileRequest,
    service: ActorProfileService = Depends(get_profile_service),
) -> ActorProfile:
    """Update the fields present in the request body."""
    try:
        return await service.update_profile(profile_id, **request.model_dump(exclude_unset=True))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.delete("/{profile_id}", status_code=204, summary="Delete an actor profile")
async def delete_profile(
    profile_id: str,
    service: ActorProfileService = Depends(get_profile_service),
) -> Response:
    try:
        deleted = await service.delete_profile(profile_id)
    except ProfileStoreError as e:
        raise _store_failure(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Profile not found: {profile_id}")
    return Response(status_code=204)


@router.post(
    "/{profile_id}/training-videos",
    response_model=ActorProfile,
    summary="Add a training video",
    description="Body and motion videos require the multi-modal capture feature.",
)
async def add_training_video(
    profile_id: str,
    request: TrainingVideoRequest,
    service: ActorProfileService = Depends(get_profile_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> ActorProfile:
    try:
        if request.category != "facial":
            require_feature(flags, "ENABLE_MULTIMODAL")
        return await service.add_training_video(profile_id, request.category, request.video_uri)
    except FeatureDisabledError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.put(
    "/{profile_id}/emotions/{emotion}",
    response_model=ActorProfile,
    summary="Record clips for an emotion",
)
async def update_emotion_coverage(
    profile_id: str,
    emotion: str,
    clip_data: EmotionClipData,
    service: ActorProfileService = Depends(get_profile_service),
) -> ActorProfile:
    try:
        return await service.update_emotion_coverage(profile_id, emotion, clip_data)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.put("/{profile_id}/identity", response_model=ActorProfile, summary="Set the identity embedding")
async def update_identity_embedding(
    profile_id: str,
    request: IdentityUpdateRequest,
    service: ActorProfileService = Depends(get_profile_service),
) -> ActorProfile:
    try:
        return await service.update_identity_embedding(
            profile_id, request.embedding, request.reference_frames
        )
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.put(
    "/{profile_id}/motor-traits",
    response_model=ActorProfile,
    summary="Set motor traits",
    description="Requires the full-body modeling feature.",
)
async def update_motor_traits(
    profile_id: str,
    motor_traits: MotorTraits,
    service: ActorProfileService = Depends(get_profile_service),
    flags: FeatureFlags = Depends(get_feature_flags),
) -> ActorProfile:
    try:
        require_feature(flags, "ENABLE_FULL_BODY")
        return await service.update_motor_traits(profile_id, motor_traits)
    except FeatureDisabledError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)


@router.post(
    "/{profile_id}/consistency",
    response_model=ActorProfile,
    summary="Record a consistency score",
    description="Folds the score into the profile's running average.",
)
async def update_consistency_score(
    profile_id: str,
    request: ConsistencyScoreRequest,
    service: ActorProfileService = Depends(get_profile_service),
) -> ActorProfile:
    try:
        return await service.update_consistency_score(profile_id, request.score)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_failure(e)
