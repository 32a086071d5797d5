"""Configuration settings for the likeness service."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseModel):
    """Toggles for optional subsystems.

    All flags default to disabled. Override them through nested environment
    variables, e.g. ``FEATURES__ENABLE_IDENTITY_EMBEDDING=true``.
    """
    ENABLE_MULTIMODAL: bool = Field(False, description="Upload multiple videos for comprehensive data capture")
    ENABLE_FULL_BODY: bool = Field(False, description="Capture and generate full-body clips with motor traits")
    ENABLE_IDENTITY_EMBEDDING: bool = Field(False, description="Advanced facial consistency using identity embeddings")
    ENABLE_EXPANDED_EMOTIONS: bool = Field(False, description="24 emotions with intensity control")
    ENABLE_CLOUD_STORAGE: bool = Field(False, description="Cloud storage for actor profiles")
    ENABLE_ANALYTICS: bool = Field(False, description="Usage tracking and performance monitoring")


# Display names for the feature flag status listing
FEATURE_DISPLAY_NAMES: Dict[str, str] = {
    "ENABLE_MULTIMODAL": "Multi-Modal Capture",
    "ENABLE_FULL_BODY": "Full-Body Modeling",
    "ENABLE_IDENTITY_EMBEDDING": "Identity Embedding",
    "ENABLE_EXPANDED_EMOTIONS": "Expanded Emotions",
    "ENABLE_CLOUD_STORAGE": "Cloud Storage",
    "ENABLE_ANALYTICS": "Analytics",
}


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        GEMINI_API_KEY: API key for the Gemini / Veo models
        VIDEO_POLL_TIMEOUT_SECONDS: Maximum time to wait for a video operation (0 = no limit)
        CONSISTENCY_THRESHOLD: Minimum identity similarity for a generated clip (0-1)
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",  # No prefix for environment variables
        env_nested_delimiter="__"  # Use double underscore for nested settings
    )

    # Core Settings
    PROJECT_NAME: str = "LikenessAI"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Model provider settings
    GEMINI_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""
    ANALYSIS_MODEL: str = "gemini-2.5-flash"
    IMAGE_MODEL: str = "gemini-2.5-flash-image-preview"
    VIDEO_MODEL: str = "veo-3.0-generate-001"
    EMBEDDING_MODEL: str = "text-embedding-004"

    @property
    def api_key(self) -> Optional[str]:
        """Get the model provider key, preferring GEMINI_API_KEY."""
        return self.GEMINI_API_KEY or self.GOOGLE_API_KEY or None

    # Video generation settings
    VIDEO_DURATION_SECONDS: int = 8  # Veo 3.0 accepts 4-8 seconds
    VIDEO_ASPECT_RATIO: str = "16:9"
    VIDEO_PERSON_GENERATION: str = "allow_adult"
    VIDEO_POLL_INTERVAL_SECONDS: float = 5.0
    VIDEO_POLL_TIMEOUT_SECONDS: float = 900.0
    MEDIA_DOWNLOAD_TIMEOUT_SECONDS: float = 300.0
    MAX_CLIPS_PER_BATCH: int = 8

    # Consistency and refinement settings
    CONSISTENCY_THRESHOLD: float = Field(0.85, ge=0.0, le=1.0)
    REFINEMENT_MAX_ATTEMPTS: int = 5

    # AWS Settings (cloud profile store)
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    AWS_S3_BUCKET: str = ""
    PROFILE_STORE_PREFIX: str = "actor-profiles/"

    FEATURES: FeatureFlags = FeatureFlags()

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000


def feature_flag_status(flags: FeatureFlags) -> List[Dict[str, object]]:
    """Describe each feature flag for display.

    Args:
        flags: Feature flags to describe

    Returns:
        List of dicts with ``name``, ``enabled`` and ``description`` keys
    """
    status = []
    for field_name, field_info in FeatureFlags.model_fields.items():
        status.append({
            "name": FEATURE_DISPLAY_NAMES[field_name],
            "enabled": getattr(flags, field_name),
            "description": field_info.description,
        })
    return status


settings = Settings()
