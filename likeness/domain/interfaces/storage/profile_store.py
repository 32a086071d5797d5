"""Profile store interface for actor profiles."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ...entities.profile import ActorProfile


class ProfileStore(ABC):
    """Interface for keyed storage of actor profiles.

    Concurrent writes to the same profile are last-write-wins.
    """

    @abstractmethod
    async def get(self, profile_id: str) -> Optional[ActorProfile]:
        """
        Get a profile by id.

        Returns:
            The stored profile, or None if it does not exist

        Raises:
            ProfileStoreError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def list(self) -> List[ActorProfile]:
        """
        List all stored profiles.

        Raises:
            ProfileStoreError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def put(self, profile: ActorProfile) -> None:
        """
        Insert or replace a profile.

        Raises:
            ProfileStoreError: If the backend cannot be written
        """
        pass

    @abstractmethod
    async def delete(self, profile_id: str) -> bool:
        """
        Delete a profile.

        Returns:
            True if a profile was deleted, False if it did not exist

        Raises:
            ProfileStoreError: If the backend cannot be written
        """
        pass
