"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends

from likeness.core.config import FeatureFlags, settings
from likeness.core.container import ServiceContainer, container
from likeness.core.exceptions import ServiceNotInitializedError
from likeness.services.analysis import VideoAnalysisService
from likeness.services.clip_generation import ClipGenerationService
from likeness.services.consistency import ConsistencyValidator
from likeness.services.identity import IdentityEmbeddingService
from likeness.services.profiles import ActorProfileService
from likeness.services.refinement import LikenessRefinementService


async def get_container() -> ServiceContainer:
    """Dependency provider for the global ServiceContainer instance."""
    if not container.initialized:
        # Attempt to initialize if not already done (e.g., during testing)
        try:
            await container.initialize()
        except Exception as e:
            # Raise specific error if container is needed but fails init
            raise ServiceNotInitializedError(f"Service container could not be initialized: {e}")
    return container


def get_feature_flags() -> FeatureFlags:
    """Provide the active feature flags."""
    return settings.FEATURES


async def get_clip_generation_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[ClipGenerationService, None]:
    """Provide the clip generation service.

    Yields:
        ClipGenerationService: Initialized clip generation service

    Raises:
        ServiceNotInitializedError: If service is not initialized
    """
    if container.clip_generation_service is None:
        raise ServiceNotInitializedError("Clip generation service not initialized")
    yield container.clip_generation_service


async def get_refinement_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[LikenessRefinementService, None]:
    """Provide the likeness refinement service."""
    if container.refinement_service is None:
        raise ServiceNotInitializedError("Refinement service not initialized")
    yield container.refinement_service


async def get_consistency_validator(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[ConsistencyValidator, None]:
    if container.consistency_validator is None:
        raise ServiceNotInitializedError("Consistency validator not initialized")
    yield container.consistency_validator


async def get_analysis_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[VideoAnalysisService, None]:
    if container.analysis_service is None:
        raise ServiceNotInitializedError("Video analysis service not initialized")
    yield container.analysis_service


async def get_identity_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[IdentityEmbeddingService, None]:
    if container.identity_service is None:
        raise ServiceNotInitializedError("Identity embedding service not initialized")
    yield container.identity_service


async def get_profile_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[ActorProfileService, None]:
    """Provide the actor profile service.

    Yields:
        ActorProfileService: Service bound to the configured profile store

    Raises:
        ServiceNotInitializedError: If service is not initialized
    """
    if container.profile_service is None:
        raise ServiceNotInitializedError("Profile service not initialized")
    yield container.profile_service
