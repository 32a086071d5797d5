"""Custom exceptions for the likeness service."""
from typing import Optional


class LikenessError(Exception):
    """Base exception for likeness service operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize likeness error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidDataUriError(LikenessError):
    """Raised when a media payload is not a valid base64 data URI."""
    pass


class InvalidReferenceFramesError(LikenessError):
    """Raised when an identity embedding gets too few or too many reference frames."""
    pass


class FeatureDisabledError(LikenessError):
    """Raised when an operation needs a feature flag that is switched off."""
    pass


class ServiceNotInitializedError(LikenessError):
    """Raised when a service is requested before the container is ready."""
    pass


class GatewayError(LikenessError):
    """Base exception for failures reported by the model provider."""
    pass


class RateLimitedError(GatewayError):
    """Raised when the provider rejects a request because of rate limits."""
    pass


class TransientGatewayError(GatewayError):
    """Raised for provider failures that may succeed on a later request."""
    pass


class FatalGatewayError(GatewayError):
    """Raised for provider failures that will not succeed on retry."""
    pass


class GenerationError(LikenessError):
    """Base exception for a single generation attempt."""
    pass


class MalformedResponseError(GenerationError):
    """Raised when the provider response lacks an operation handle or media."""
    pass


class GenerationFailedError(GenerationError):
    """Raised when a video operation completes with a provider error."""
    pass


class MediaDownloadError(GenerationError):
    """Raised when generated media cannot be fetched."""
    pass


class OperationTimeoutError(GenerationError):
    """Raised when a video operation does not complete within the poll limit."""
    pass


class ConsistencyCheckFailedError(GenerationError):
    """Raised when a generated clip does not match the reference identity."""
    pass


class ClipBatchFailedError(LikenessError):
    """Raised when every attempt in a clip generation batch failed."""

    def __init__(self, message: str, cause: Exception, details: Optional[dict] = None):
        """
        Initialize batch failure.

        Args:
            message: Error description
            cause: The first recorded attempt failure
            details: Additional error context
        """
        super().__init__(message, details)
        self.cause = cause


class RefinementExhaustedError(LikenessError):
    """Raised when likeness refinement is still rate limited after all retries."""
    pass


class ProfileStoreError(LikenessError):
    """Base exception for profile store operations."""
    pass


class ProfileNotFoundError(ProfileStoreError):
    """Raised when attempting to access a non-existent actor profile."""
    pass
