"""Service container for dependency injection."""
from typing import Optional

from likeness.core.config import settings
from likeness.core.logging import get_logger

# Import interfaces
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.interfaces.storage.profile_store import ProfileStore

# Import concrete implementations used for instantiation
from likeness.infrastructure.gateway import GeminiModelGateway
from likeness.infrastructure.http import MediaDownloader
from likeness.infrastructure.storage import InMemoryProfileStore, S3ProfileStore
from likeness.services.analysis import VideoAnalysisService
from likeness.services.clip_generation import ClipGenerationService
from likeness.services.consistency import ConsistencyValidator
from likeness.services.identity import IdentityEmbeddingService
from likeness.services.profiles import ActorProfileService
from likeness.services.refinement import LikenessRefinementService

logger = get_logger(__name__)


class ServiceContainer:
    """Container for application services.

    This container manages the lifecycle and dependencies of all services in the application.
    The profile store implementation is chosen once, at initialization, from the
    cloud storage feature flag.

    Example:
        ```python
        container = ServiceContainer()
        await container.initialize()

        # Get services from container
        clips = container.clip_generation_service
        profiles = container.profile_service
        ```
    """

    def __init__(self) -> None:
        """Initialize empty container."""
        # Core services - Use interface type hints
        self.model_gateway: Optional[ModelGateway] = None
        self.profile_store: Optional[ProfileStore] = None
        self.media_downloader: Optional[MediaDownloader] = None

        # Domain services (depend on interfaces)
        self.consistency_validator: Optional[ConsistencyValidator] = None
        self.clip_generation_service: Optional[ClipGenerationService] = None
        self.refinement_service: Optional[LikenessRefinementService] = None
        self.analysis_service: Optional[VideoAnalysisService] = None
        self.identity_service: Optional[IdentityEmbeddingService] = None
        self.profile_service: Optional[ActorProfileService] = None

    @property
    def initialized(self) -> bool:
        return self.profile_service is not None

    async def initialize(self) -> None:
        """Initialize all services in the correct order."""
        # Instantiate concrete implementations
        self.model_gateway = GeminiModelGateway()
        self.media_downloader = MediaDownloader()
        if settings.FEATURES.ENABLE_CLOUD_STORAGE:
            self.profile_store = S3ProfileStore()
            logger.info("Using S3 profile store", bucket=settings.AWS_S3_BUCKET)
        else:
            self.profile_store = InMemoryProfileStore()
            logger.info("Using in-memory profile store")

        self.consistency_validator = ConsistencyValidator(self.model_gateway)
        self.clip_generation_service = ClipGenerationService(
            gateway=self.model_gateway,
            downloader=self.media_downloader,
            validator=self.consistency_validator,
        )
        self.refinement_service = LikenessRefinementService(self.model_gateway)
        self.analysis_service = VideoAnalysisService(self.model_gateway)
        self.identity_service = IdentityEmbeddingService(self.model_gateway)
        self.profile_service = ActorProfileService(self.profile_store)

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        # Cleanup domain services
        self.profile_service = None
        self.identity_service = None
        self.analysis_service = None
        self.refinement_service = None
        self.clip_generation_service = None
        self.consistency_validator = None

        # Cleanup core services
        if self.media_downloader:
            await self.media_downloader.aclose()
            self.media_downloader = None
        self.profile_store = None
        self.model_gateway = None


# Global container instance
container = ServiceContainer()
