"""Actor profile service.

Applies the profile mutation rules (coverage percentage, running-average
consistency, immutable id and creation time) on top of a ProfileStore.
"""
from typing import Any, List, Optional, Sequence

from likeness.core.exceptions import ProfileNotFoundError
from likeness.core.logging import get_logger
from likeness.domain.entities.emotions import EmotionIntensity
from likeness.domain.entities.profile import (
    ActorProfile,
    EmotionClipData,
    MotorTraits,
    VideoCategory,
    coverage_percent,
    running_average,
    utcnow,
)
from likeness.domain.interfaces.storage.profile_store import ProfileStore
from likeness.domain.value_objects.generation import ClipResult

logger = get_logger(__name__)

# Fields callers may not overwrite through update_profile
_PROTECTED_FIELDS = {"id", "created_at", "updated_at"}


class ActorProfileService:
    """Service for creating and mutating actor profiles.

    Example:
        ```python
        service = ActorProfileService(InMemoryProfileStore())
        profile = await service.create_profile("Jane Doe")
        await service.update_consistency_score(profile.id, 0.9)
        ```
    """

    def __init__(self, store: ProfileStore) -> None:
        """Initialize the profile service.

        Args:
            store: Backing profile store
        """
        self._store = store

    async def create_profile(self, name: str) -> ActorProfile:
        """Create a new profile with default metrics."""
        profile = ActorProfile(name=name)
        await self._store.put(profile)
        logger.info("Created actor profile", profile_id=profile.id)
        return profile

    async def get_profile(self, profile_id: str) -> ActorProfile:
        """Get a profile.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        profile = await self._store.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"Profile not found: {profile_id}")
        return profile

    async def list_profiles(self) -> List[ActorProfile]:
        return await self._store.list()

    async def update_profile(self, profile_id: str, **changes: Any) -> ActorProfile:
        """Apply field changes to a profile.

        ``id`` and ``created_at`` are never changed; ``updated_at`` is refreshed.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        profile = await self.get_profile(profile_id)
        allowed = {key: value for key, value in changes.items() if key not in _PROTECTED_FIELDS}
        merged = profile.model_dump()
        merged.update(allowed)
        merged["updated_at"] = utcnow()
        updated = ActorProfile.model_validate(merged)
        await self._store.put(updated)
        logger.debug("Updated actor profile", profile_id=profile_id, fields=sorted(allowed))
        return updated

    async def delete_profile(self, profile_id: str) -> bool:
        deleted = await self._store.delete(profile_id)
        if deleted:
            logger.info("Deleted actor profile", profile_id=profile_id)
        return deleted

    async def add_training_video(
        self,
        profile_id: str,
        category: VideoCategory,
        video_uri: str,
    ) -> ActorProfile:
        """Append a training video to one category."""
        profile = await self.get_profile(profile_id)
        videos = profile.training_videos.model_dump()
        videos[category] = [*videos[category], video_uri]
        return await self.update_profile(profile_id, training_videos=videos)

    async def update_emotion_coverage(
        self,
        profile_id: str,
        emotion: str,
        clip_data: EmotionClipData,
    ) -> ActorProfile:
        """Record clips for an emotion and recompute the coverage percentage."""
        profile = await self.get_profile(profile_id)
        coverage = {name: data.model_dump() for name, data in profile.emotion_coverage.items()}
        coverage[emotion] = clip_data.model_dump()
        return await self.update_profile(
            profile_id,
            emotion_coverage=coverage,
            emotion_coverage_percent=coverage_percent(len(coverage)),
        )

    async def update_identity_embedding(
        self,
        profile_id: str,
        embedding: Sequence[float],
        reference_frames: Sequence[str],
    ) -> ActorProfile:
        return await self.update_profile(
            profile_id,
            face_embedding=list(embedding),
            reference_frames=list(reference_frames),
        )

    async def update_motor_traits(self, profile_id: str, motor_traits: MotorTraits) -> ActorProfile:
        return await self.update_profile(profile_id, motor_traits=motor_traits.model_dump())

    async def update_consistency_score(self, profile_id: str, score: float) -> ActorProfile:
        """Fold a new consistency score into the profile's running average."""
        profile = await self.get_profile(profile_id)
        return await self.update_profile(
            profile_id,
            consistency_score=running_average(profile.consistency_score, score),
        )

    async def record_generated_clips(
        self,
        profile_id: str,
        emotion: str,
        clips: Sequence[ClipResult],
        intensity: Optional[EmotionIntensity] = None,
    ) -> ActorProfile:
        """Record a generation batch as emotion coverage and consistency history.

        Quality is the mean consistency score of the scored clips, or 0 if
        none were validated.
        """
        scores = [clip.consistency_score for clip in clips if clip.consistency_score is not None]
        quality = sum(scores) / len(scores) if scores else 0.0
        profile = await self.update_emotion_coverage(
            profile_id,
            emotion,
            EmotionClipData(
                clips=[clip.media_uri for clip in clips],
                quality=min(1.0, max(0.0, quality)),
                intensity=intensity or "moderate",
            ),
        )
        for score in scores:
            profile = await self.update_consistency_score(profile_id, score)
        return profile
