"""Likeness refinement service for natural-language image edits."""
import asyncio
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from likeness.core.analytics import track_event
from likeness.core.config import settings
from likeness.core.exceptions import (
    MalformedResponseError,
    RateLimitedError,
    RefinementExhaustedError,
)
from likeness.core.logging import get_logger
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.generation import PromptPart

logger = get_logger(__name__)

# Image-only output is rejected by the image model
RESPONSE_MODALITIES = ("TEXT", "IMAGE")


def _log_backoff(retry_state: RetryCallState) -> None:
    """Log a rate-limit backoff before sleeping."""
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Rate limited, retrying likeness refinement",
        attempt=retry_state.attempt_number,
        delay_seconds=round(delay, 3),
    )


class LikenessRefinementService:
    """Refine a likeness image from natural-language instructions.

    Rate-limited requests are retried with capped exponential backoff: the
    n-th retry waits ``2^n`` seconds plus up to one second of jitter. Any
    other error propagates immediately.

    Example:
        ```python
        service = LikenessRefinementService(gateway)
        refined_uri = await service.refine(base_image_uri, "Make the jawline sharper")
        ```
    """

    def __init__(
        self,
        gateway: ModelGateway,
        max_attempts: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the refinement service.

        Args:
            gateway: Model gateway used for image edits
            max_attempts: Total attempts including the first (defaults to settings)
            sleep: Coroutine used for backoff delays
        """
        self._gateway = gateway
        self._max_attempts = max_attempts or settings.REFINEMENT_MAX_ATTEMPTS
        self._sleep = sleep

    async def refine(self, base_image: str, instructions: str) -> str:
        """Apply instructions to a base image.

        Args:
            base_image: Base image as a data URI
            instructions: Natural-language edit instructions

        Returns:
            str: Refined image as a data URI

        Raises:
            MalformedResponseError: If the model returned no image
            RefinementExhaustedError: If every attempt was rate limited
            GatewayError: For any other provider failure
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=2) + wait_random(0, 1),
            retry=retry_if_exception_type(RateLimitedError),
            before_sleep=_log_backoff,
            sleep=self._sleep,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    refined_uri = await self._refine_once(base_image, instructions)
                    track_event("likeness_refined", attempts=attempt.retry_state.attempt_number)
                    return refined_uri
        except RetryError as e:
            logger.error("Likeness refinement exhausted retries", attempts=self._max_attempts)
            raise RefinementExhaustedError(
                "Failed to refine likeness after multiple retries.",
                details={"attempts": self._max_attempts},
            ) from e.last_attempt.exception()

    async def _refine_once(self, base_image: str, instructions: str) -> str:
        completion = await self._gateway.complete(
            [PromptPart.from_media(base_image), PromptPart.from_text(instructions)],
            response_modalities=RESPONSE_MODALITIES,
        )
        if not completion.media:
            raise MalformedResponseError("No refined image returned from the model.")
        return completion.media[0].media_uri
