"""Tests for the generated media downloader."""
import httpx
import pytest

from likeness.core.exceptions import MediaDownloadError
from likeness.domain.value_objects.generation import MediaResult
from likeness.infrastructure.http.media import MediaDownloader

VIDEO_URL = "https://generativelanguage.googleapis.com/v1beta/files/abc:download"


def _downloader(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MediaDownloader(api_key="secret", client=client)


class TestMediaDownloader:

    async def test_data_uri_is_returned_unchanged(self):
        def handler(request):
            raise AssertionError("no request expected")

        downloader = _downloader(handler)
        media = MediaResult(media_uri="data:video/mp4;base64,AA==", content_type="video/mp4")

        assert await downloader.fetch_as_data_uri(media) == "data:video/mp4;base64,AA=="
        await downloader.aclose()

    async def test_download_appends_key_and_encodes(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, content=b"mp4")

        downloader = _downloader(handler)
        media = MediaResult(media_uri=VIDEO_URL, content_type="video/mp4")

        result = await downloader.fetch_as_data_uri(media)

        assert result == "data:video/mp4;base64,bXA0"
        assert seen[0].params["key"] == "secret"
        await downloader.aclose()

    @pytest.mark.parametrize("response", [httpx.Response(404), httpx.Response(200, content=b"")])
    async def test_bad_response_raises(self, response):
        downloader = _downloader(lambda request: response)
        media = MediaResult(media_uri=VIDEO_URL, content_type="video/mp4")

        with pytest.raises(MediaDownloadError, match="Failed to fetch video"):
            await downloader.fetch_as_data_uri(media)
        await downloader.aclose()

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        downloader = _downloader(handler)
        media = MediaResult(media_uri=VIDEO_URL, content_type="video/mp4")

        with pytest.raises(MediaDownloadError):
            await downloader.fetch_as_data_uri(media)
        await downloader.aclose()
