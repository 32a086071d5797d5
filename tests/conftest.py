"""Shared fixtures: a scripted model gateway, a fake downloader and a recording sleep."""
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from likeness.core.exceptions import MediaDownloadError
from likeness.core.utils.data_uri import encode_data_uri
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.analysis import FaceDescription
from likeness.domain.value_objects.generation import (
    Completion,
    GenerationRequest,
    MediaResult,
    Operation,
    PromptPart,
    VideoGenerationConfig,
)

SOURCE_IMAGE = encode_data_uri(b"\x89PNG fake image", "image/png")
VIDEO_URI = encode_data_uri(b"fake mp4 bytes", "video/mp4")


def media_uri_of(prompt: Sequence[PromptPart]) -> Optional[str]:
    """First media part of a prompt."""
    for part in prompt:
        if part.media_uri is not None:
            return part.media_uri
    return None


class FakeModelGateway(ModelGateway):
    """Model gateway driven by per-test handlers.

    ``submit`` is called with the zero-based submission index and the request
    and returns an Operation, None, or raises. ``poll`` maps an operation to
    its next snapshot. ``complete_handler`` and ``embed_handler`` back the
    synchronous calls.
    """

    def __init__(self) -> None:
        self.submit: Callable[[int, GenerationRequest], Optional[Operation]] = (
            lambda index, request: Operation(
                id=f"operations/{index}",
                done=True,
                output=MediaResult(media_uri=VIDEO_URI, content_type="video/mp4"),
            )
        )
        self.poll: Callable[[Operation], Operation] = lambda operation: operation
        self.complete_handler: Callable[..., Completion] = (
            lambda prompt, output_schema, response_modalities: Completion(
                output=FaceDescription(description="a face")
            )
        )
        self.embed_handler: Callable[[str], List[float]] = lambda text: [1.0, 0.0, 0.0]

        self.submitted: List[GenerationRequest] = []
        self.polled: List[str] = []
        self.complete_calls: List[Sequence[PromptPart]] = []

    async def complete(self, prompt, output_schema=None, response_modalities=None) -> Completion:
        self.complete_calls.append(prompt)
        return self.complete_handler(prompt, output_schema, response_modalities)

    async def embed(self, text: str) -> List[float]:
        return self.embed_handler(text)

    async def generate_async(
        self,
        request: GenerationRequest,
        config: VideoGenerationConfig,
    ) -> Optional[Operation]:
        index = len(self.submitted)
        self.submitted.append(request)
        return self.submit(index, request)

    async def poll_operation(self, operation: Operation) -> Operation:
        self.polled.append(operation.id)
        return self.poll(operation)


class FakeDownloader:
    """Returns data URIs unchanged and fails for URLs listed in ``broken``."""

    def __init__(self) -> None:
        self.broken: Dict[str, str] = {}
        self.fetched: List[str] = []

    async def fetch_as_data_uri(self, media: MediaResult) -> str:
        self.fetched.append(media.media_uri)
        if media.media_uri in self.broken:
            raise MediaDownloadError(self.broken[media.media_uri])
        if media.media_uri.startswith("data:"):
            return media.media_uri
        return encode_data_uri(media.media_uri.encode(), media.content_type)

    async def aclose(self) -> None:
        pass


class RecordingSleep:
    """Sleep replacement that records delays and advances a fake clock."""

    def __init__(self) -> None:
        self.delays: List[float] = []
        self.now = 0.0

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.now += delay

    def clock(self) -> float:
        return self.now


@pytest.fixture
def gateway() -> FakeModelGateway:
    return FakeModelGateway()


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
