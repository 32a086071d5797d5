"""Tests for the emotion clip generation service."""
import pytest

from conftest import SOURCE_IMAGE, VIDEO_URI
from likeness.core.exceptions import (
    ClipBatchFailedError,
    ConsistencyCheckFailedError,
    GenerationFailedError,
    InvalidDataUriError,
    MalformedResponseError,
    MediaDownloadError,
    OperationTimeoutError,
)
from likeness.domain.value_objects.generation import (
    Completion,
    MediaResult,
    Operation,
    OperationError,
)
from likeness.services.clip_generation import ClipGenerationService
from likeness.services.consistency import ConsistencyValidator


def _done(operation_id: str, media_uri: str = VIDEO_URI) -> Operation:
    return Operation(
        id=operation_id,
        done=True,
        output=MediaResult(media_uri=media_uri, content_type="video/mp4"),
    )


@pytest.fixture
def service(gateway, downloader, sleep):
    return ClipGenerationService(
        gateway=gateway,
        downloader=downloader,
        validator=ConsistencyValidator(gateway),
        poll_interval=5.0,
        poll_timeout=60.0,
        consistency_threshold=0.85,
        sleep=sleep,
        clock=sleep.clock,
    )


class TestClipGeneration:
    """Test suite for concurrent clip generation."""

    async def test_all_attempts_succeed(self, service, gateway):
        clips = await service.generate_clips(SOURCE_IMAGE, "Happy", count=3)

        assert len(clips) == 3
        assert len(gateway.submitted) == 3
        assert all(clip.media_uri == VIDEO_URI for clip in clips)
        assert all(clip.consistency_score is None for clip in clips)

    async def test_prompt_carries_emotion_and_intensity(self, service, gateway):
        await service.generate_clips(SOURCE_IMAGE, "Weary", count=1, intensity="subtle")

        request = gateway.submitted[0]
        assert "feeling Weary at subtle intensity." in request.target_description
        assert "Maintain exact facial structure" not in request.target_description
        assert request.source_media == SOURCE_IMAGE

    async def test_identity_embedding_adds_preservation_sentence(self, service, gateway):
        await service.generate_clips(
            SOURCE_IMAGE, "Sad", count=1, identity_embedding=[0.1, 0.2], reference_frames=[SOURCE_IMAGE]
        )

        request = gateway.submitted[0]
        assert "Maintain exact facial structure" in request.target_description
        assert request.identity_context.embedding == [0.1, 0.2]
        assert request.identity_context.reference_frames == [SOURCE_IMAGE]

    async def test_polls_until_done_with_fixed_delay(self, service, gateway, sleep):
        polls = {"count": 0}

        def poll(operation):
            polls["count"] += 1
            if polls["count"] < 3:
                return operation
            return _done(operation.id)

        gateway.submit = lambda index, request: Operation(id="operations/slow")
        gateway.poll = poll

        clips = await service.generate_clips(SOURCE_IMAGE, "Angry", count=1)

        assert len(clips) == 1
        assert gateway.polled == ["operations/slow"] * 3
        assert sleep.delays == [5.0, 5.0, 5.0]

    async def test_partial_success_returns_surviving_clips(self, service, gateway):
        pending = {
            0: Operation(id="operations/0", done=True, error=OperationError(message="quota exceeded", code=8)),
            1: _done("operations/1"),
            2: Operation(id="operations/2", done=True),
        }
        gateway.submit = lambda index, request: pending[index]

        clips = await service.generate_clips(SOURCE_IMAGE, "Happy", count=3)

        assert len(clips) == 1
        assert clips[0].media_uri == VIDEO_URI

    async def test_all_failures_raise_first_failure(self, service, gateway):
        def submit(index, request):
            if index == 0:
                return Operation(id="operations/0", done=True, error=OperationError(message="quota exceeded"))
            if index == 1:
                return None
            raise RuntimeError("connection reset")

        gateway.submit = submit

        with pytest.raises(ClipBatchFailedError) as exc_info:
            await service.generate_clips(SOURCE_IMAGE, "Happy", count=3)

        error = exc_info.value
        assert isinstance(error.cause, GenerationFailedError)
        assert error.cause.message == "quota exceeded"
        assert str(error) == "quota exceeded"
        assert error.details["failed"] == 3

    async def test_missing_handle_is_malformed_response(self, service, gateway):
        gateway.submit = lambda index, request: None

        with pytest.raises(ClipBatchFailedError) as exc_info:
            await service.generate_clips(SOURCE_IMAGE, "Happy", count=1)

        assert isinstance(exc_info.value.cause, MalformedResponseError)

    async def test_done_without_output_is_malformed_response(self, service, gateway):
        gateway.submit = lambda index, request: Operation(id="operations/empty", done=True)

        with pytest.raises(ClipBatchFailedError) as exc_info:
            await service.generate_clips(SOURCE_IMAGE, "Happy", count=1)

        assert isinstance(exc_info.value.cause, MalformedResponseError)

    async def test_download_failure_is_reported(self, service, gateway, downloader):
        url = "https://generativelanguage.googleapis.com/v1beta/files/abc:download"
        gateway.submit = lambda index, request: _done("operations/0", media_uri=url)
        downloader.broken[url] = "Failed to fetch video"

        with pytest.raises(ClipBatchFailedError) as exc_info:
            await service.generate_clips(SOURCE_IMAGE, "Happy", count=1)

        assert isinstance(exc_info.value.cause, MediaDownloadError)

    async def test_remote_url_is_downloaded_as_data_uri(self, service, gateway, downloader):
        url = "https://example.com/video.mp4"
        gateway.submit = lambda index, request: _done("operations/0", media_uri=url)

        clips = await service.generate_clips(SOURCE_IMAGE, "Happy", count=1)

        assert downloader.fetched == [url]
        assert clips[0].media_uri.startswith("data:video/mp4;base64,")

    async def test_poll_timeout(self, service, gateway, sleep):
        gateway.submit = lambda index, request: Operation(id="operations/stuck")

        with pytest.raises(ClipBatchFailedError) as exc_info:
            await service.generate_clips(SOURCE_IMAGE, "Happy", count=1)

        assert isinstance(exc_info.value.cause, OperationTimeoutError)
        assert len(sleep.delays) == 12
        assert sleep.now == 60.0

    async def test_zero_count_returns_empty_list(self, service, gateway):
        clips = await service.generate_clips(SOURCE_IMAGE, "Happy", count=0)

        assert clips == []
        assert gateway.submitted == []

    async def test_invalid_source_fails_before_submission(self, service, gateway):
        with pytest.raises(InvalidDataUriError):
            await service.generate_clips("not-a-data-uri", "Happy", count=2)

        assert gateway.submitted == []

    async def test_undecodable_source_fails_before_submission(self, service, gateway):
        with pytest.raises(InvalidDataUriError, match="Invalid base64 payload"):
            await service.generate_clips("data:image/png;base64,@@not-base64@@", "Happy", count=2)

        assert gateway.submitted == []


class TestClipConsistency:
    """Test suite for identity validation of generated clips."""

    async def test_matching_clip_keeps_score(self, service, gateway):
        gateway.embed_handler = lambda text: [1.0, 0.0]

        clips = await service.generate_clips(
            SOURCE_IMAGE, "Happy", count=1, identity_embedding=[1.0, 0.0], validate_consistency=True
        )

        assert clips[0].consistency_score == pytest.approx(1.0)

    async def test_mismatched_clip_is_discarded(self, service, gateway):
        gateway.embed_handler = lambda text: [0.0, 1.0]

        with pytest.raises(ClipBatchFailedError) as exc_info:
            await service.generate_clips(
                SOURCE_IMAGE, "Happy", count=2, identity_embedding=[1.0, 0.0], validate_consistency=True
            )

        assert isinstance(exc_info.value.cause, ConsistencyCheckFailedError)

    async def test_validation_error_keeps_clip_without_score(self, service, gateway):
        def complete(prompt, output_schema, response_modalities):
            raise RuntimeError("describe failed")

        gateway.complete_handler = complete

        clips = await service.generate_clips(
            SOURCE_IMAGE, "Happy", count=1, identity_embedding=[1.0, 0.0], validate_consistency=True
        )

        assert len(clips) == 1
        assert clips[0].consistency_score is None

    async def test_validation_skipped_without_identity(self, service, gateway):
        clips = await service.generate_clips(SOURCE_IMAGE, "Happy", count=1, validate_consistency=True)

        assert clips[0].consistency_score is None
        assert gateway.complete_calls == []

    async def test_mixed_batch_keeps_only_consistent_clips(self, service, gateway):
        other_video = "data:video/mp4;base64,b3RoZXI="
        gateway.submit = lambda index, request: _done(
            f"operations/{index}", media_uri=VIDEO_URI if index == 0 else other_video
        )
        gateway.complete_handler = lambda prompt, output_schema, response_modalities: Completion(
            output=output_schema(description="match" if VIDEO_URI in [p.media_uri for p in prompt] else "other")
        )
        gateway.embed_handler = lambda text: [1.0, 0.0] if text == "match" else [0.0, 1.0]

        clips = await service.generate_clips(
            SOURCE_IMAGE, "Happy", count=2, identity_embedding=[1.0, 0.0], validate_consistency=True
        )

        assert [clip.media_uri for clip in clips] == [VIDEO_URI]
