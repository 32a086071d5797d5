"""Emotion clip generation service.

Generates short video clips of an actor showing a target emotion:

1. Submit one image-to-video job per requested clip
2. Poll each job until the remote operation completes
3. Download the generated video as a data URI
4. Optionally validate identity consistency against a reference embedding

Attempts run concurrently and are joined with settle-all semantics: the batch
waits for every attempt and only fails when none succeeded.

Note:
    Remote jobs cannot be cancelled. If a caller abandons a batch, the
    submitted operations keep running on the provider side.
"""
import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from likeness.core.analytics import track_event
from likeness.core.config import settings
from likeness.core.exceptions import (
    ClipBatchFailedError,
    ConsistencyCheckFailedError,
    GenerationFailedError,
    MalformedResponseError,
    OperationTimeoutError,
)
from likeness.core.logging import get_logger
from likeness.core.utils.data_uri import decode_data_uri
from likeness.domain.entities.emotions import EmotionIntensity
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.generation import (
    ClipResult,
    GenerationRequest,
    IdentityContext,
    Operation,
    VideoGenerationConfig,
)
from likeness.infrastructure.http.media import MediaDownloader
from likeness.services.consistency import ConsistencyValidator
from likeness.services.prompts import emotion_clip_prompt

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

# (attempt index, clip, error) in completion order
_Outcome = Tuple[int, Optional[ClipResult], Optional[Exception]]


class ClipGenerationService:
    """Service for synthesizing emotion clips from a still image.

    Example:
        ```python
        service = ClipGenerationService(gateway, downloader, validator)
        clips = await service.generate_clips(
            source_image="data:image/png;base64,...",
            target_emotion="Happy",
            count=3,
            intensity="moderate",
        )
        ```
    """

    def __init__(
        self,
        gateway: ModelGateway,
        downloader: MediaDownloader,
        validator: ConsistencyValidator,
        poll_interval: Optional[float] = None,
        poll_timeout: Optional[float] = None,
        consistency_threshold: Optional[float] = None,
        video_config: Optional[VideoGenerationConfig] = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the clip generation service.

        Args:
            gateway: Model gateway for submitting and polling video jobs
            downloader: Fetches generated media as data URIs
            validator: Identity consistency validator
            poll_interval: Seconds between operation polls
            poll_timeout: Maximum seconds to wait for one operation (0 = no limit)
            consistency_threshold: Minimum similarity for a clip to be kept
            video_config: Provider video options
            sleep: Coroutine used for the poll delay
            clock: Monotonic clock used for the poll timeout
        """
        self._gateway = gateway
        self._downloader = downloader
        self._validator = validator
        self._poll_interval = (
            settings.VIDEO_POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
        )
        self._poll_timeout = (
            settings.VIDEO_POLL_TIMEOUT_SECONDS if poll_timeout is None else poll_timeout
        )
        self._threshold = (
            settings.CONSISTENCY_THRESHOLD if consistency_threshold is None else consistency_threshold
        )
        self._video_config = video_config or VideoGenerationConfig(
            duration_seconds=settings.VIDEO_DURATION_SECONDS,
            aspect_ratio=settings.VIDEO_ASPECT_RATIO,
            person_generation=settings.VIDEO_PERSON_GENERATION,
        )
        self._sleep = sleep
        self._clock = clock

    async def generate_clips(
        self,
        source_image: str,
        target_emotion: str,
        count: int,
        identity_embedding: Optional[Sequence[float]] = None,
        reference_frames: Optional[Sequence[str]] = None,
        intensity: Optional[EmotionIntensity] = None,
        validate_consistency: bool = False,
    ) -> List[ClipResult]:
        """Generate up to ``count`` clips of the person showing an emotion.

        Args:
            source_image: Frame of the actor as a data URI
            target_emotion: Emotion to synthesize
            count: Number of concurrent generation attempts
            identity_embedding: Optional reference identity embedding
            reference_frames: Optional reference frames for the identity
            intensity: Optional emotion intensity
            validate_consistency: Discard clips that fail the identity check

        Returns:
            Successful clips in completion order; may be fewer than ``count``

        Raises:
            InvalidDataUriError: If the source image is not a valid base64 data URI
            ClipBatchFailedError: If every attempt failed
        """
        decode_data_uri(source_image)

        identity_context = None
        if identity_embedding:
            identity_context = IdentityContext(
                embedding=list(identity_embedding),
                reference_frames=list(reference_frames or []),
            )
        request = GenerationRequest(
            source_media=source_image,
            target_description=emotion_clip_prompt(
                target_emotion, intensity, preserve_identity=identity_context is not None
            ),
            intensity=intensity,
            identity_context=identity_context,
        )

        logger.info(
            "Starting clip generation batch",
            emotion=target_emotion,
            count=count,
            intensity=intensity,
            validate_consistency=validate_consistency,
        )

        outcomes: List[_Outcome] = []

        async def settle(index: int) -> None:
            try:
                clip = await self._generate_single_clip(index, request, validate_consistency)
            except Exception as e:
                outcomes.append((index, None, e))
            else:
                outcomes.append((index, clip, None))

        await asyncio.gather(*(settle(index) for index in range(count)))

        clips: List[ClipResult] = []
        failures: List[Tuple[int, Exception]] = []
        for index, clip, error in outcomes:
            if error is not None:
                logger.error(
                    "Clip generation failed",
                    attempt=index,
                    error=str(error),
                    kind=type(error).__name__,
                )
                failures.append((index, error))
            else:
                clips.append(clip)

        if not clips and failures:
            first_index, first_error = min(failures, key=lambda failure: failure[0])
            raise ClipBatchFailedError(
                str(first_error),
                cause=first_error,
                details={"attempts": count, "failed": len(failures), "first_failed_attempt": first_index},
            ) from first_error

        logger.info(
            "Clip generation batch finished",
            emotion=target_emotion,
            requested=count,
            succeeded=len(clips),
            failed=len(failures),
        )
        track_event(
            "clips_generated",
            emotion=target_emotion,
            requested=count,
            succeeded=len(clips),
        )
        return clips

    async def _generate_single_clip(
        self,
        index: int,
        request: GenerationRequest,
        validate_consistency: bool,
    ) -> ClipResult:
        """Run one generation attempt end to end."""
        operation = await self._gateway.generate_async(request, self._video_config)
        if operation is None:
            raise MalformedResponseError("Expected the model to return an operation")

        logger.debug("Submitted clip attempt", attempt=index, operation_id=operation.id)
        operation = await self._wait_for_operation(index, operation)

        if operation.error is not None:
            raise GenerationFailedError(
                operation.error.message,
                details={"operation_id": operation.id, "code": operation.error.code},
            )
        if operation.output is None:
            raise MalformedResponseError(
                "Failed to find the generated video in operation output",
                details={"operation_id": operation.id},
            )

        media_uri = await self._downloader.fetch_as_data_uri(operation.output)

        consistency_score = None
        if validate_consistency and request.identity_context is not None:
            consistency_score = await self._check_consistency(
                index, media_uri, request.identity_context.embedding
            )

        return ClipResult(media_uri=media_uri, consistency_score=consistency_score)

    async def _wait_for_operation(self, index: int, operation: Operation) -> Operation:
        """Poll an operation until it is done or the poll timeout elapses."""
        started = self._clock()
        polls = 0
        while not operation.done:
            elapsed = self._clock() - started
            if self._poll_timeout and elapsed >= self._poll_timeout:
                raise OperationTimeoutError(
                    f"Video operation did not complete within {self._poll_timeout:.0f}s",
                    details={"operation_id": operation.id, "polls": polls},
                )
            await self._sleep(self._poll_interval)
            operation = await self._gateway.poll_operation(operation)
            polls += 1

        logger.debug("Clip operation completed", attempt=index, operation_id=operation.id, polls=polls)
        return operation

    async def _check_consistency(
        self,
        index: int,
        media_uri: str,
        identity_embedding: Sequence[float],
    ) -> Optional[float]:
        """Validate a clip; raise if it genuinely fails, keep it unscored on errors."""
        try:
            result = await self._validator.validate(
                media_uri, identity_embedding, threshold=self._threshold
            )
        except Exception as e:
            logger.warning(
                "Consistency validator raised, keeping clip without score",
                attempt=index,
                error=str(e),
            )
            return None

        if result.errored:
            logger.warning(
                "Consistency validation unavailable, keeping clip without score",
                attempt=index,
                details=result.details,
            )
            return None
        if not result.passed:
            raise ConsistencyCheckFailedError(
                f"Generated clip failed consistency check: {result.details}",
                details={"score": result.score, "threshold": result.threshold},
            )
        return result.score
