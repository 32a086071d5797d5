"""Model gateway implementations."""
from .gemini import GeminiModelGateway, classify_provider_error

__all__ = ["GeminiModelGateway", "classify_provider_error"]
