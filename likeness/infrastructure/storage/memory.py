"""In-memory implementation of the profile store."""
import asyncio
from typing import Dict, List, Optional

from likeness.core.logging import get_logger
from likeness.domain.entities.profile import ActorProfile
from likeness.domain.interfaces.storage.profile_store import ProfileStore

logger = get_logger(__name__)


class InMemoryProfileStore(ProfileStore):
    """Profile store backed by a process-local dict.

    Profiles are copied on the way in and out so callers never share mutable
    state with the store.
    """

    def __init__(self) -> None:
        self._profiles: Dict[str, ActorProfile] = {}
        self._lock = asyncio.Lock()

    async def get(self, profile_id: str) -> Optional[ActorProfile]:
        async with self._lock:
            profile = self._profiles.get(profile_id)
            return profile.model_copy(deep=True) if profile else None

    async def list(self) -> List[ActorProfile]:
        async with self._lock:
            return [profile.model_copy(deep=True) for profile in self._profiles.values()]

    async def put(self, profile: ActorProfile) -> None:
        async with self._lock:
            self._profiles[profile.id] = profile.model_copy(deep=True)
        logger.debug("Stored profile in memory", profile_id=profile.id)

    async def delete(self, profile_id: str) -> bool:
        async with self._lock:
            return self._profiles.pop(profile_id, None) is not None
