"""Download of generated media from transient provider URLs."""
from typing import Optional

import httpx

from likeness.core.config import settings
from likeness.core.exceptions import MediaDownloadError
from likeness.core.logging import get_logger
from likeness.core.utils.data_uri import encode_data_uri
from likeness.domain.value_objects.generation import MediaResult

logger = get_logger(__name__)


class MediaDownloader:
    """Fetch provider media once and re-encode it as a data URI.

    The provider serves generated videos from URLs that require the API key,
    so the key is appended as a ``key`` query parameter.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key or settings.api_key
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.MEDIA_DOWNLOAD_TIMEOUT_SECONDS,
            follow_redirects=True,
        )

    async def fetch_as_data_uri(self, media: MediaResult) -> str:
        """Download media and return it as a data URI.

        Args:
            media: Media reference from a completed operation

        Returns:
            str: Media as a data URI

        Raises:
            MediaDownloadError: If the request fails, returns non-200 or has no body
        """
        if media.media_uri.startswith("data:"):
            return media.media_uri

        params = {"key": self.api_key} if self.api_key else None
        try:
            response = await self._client.get(media.media_uri, params=params)
        except httpx.HTTPError as e:
            logger.error("Media download request failed", error=str(e))
            raise MediaDownloadError(f"Failed to fetch video: {e}") from e

        if response.status_code != 200 or not response.content:
            logger.error(
                "Media download returned no content",
                status_code=response.status_code,
                size=len(response.content),
            )
            raise MediaDownloadError(
                "Failed to fetch video",
                details={"status_code": response.status_code},
            )

        logger.debug("Downloaded generated media", size=len(response.content))
        return encode_data_uri(response.content, media.content_type)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
