"""Identity consistency validation for generated media."""
from typing import Optional, Sequence

from likeness.core.config import settings
from likeness.core.logging import get_logger
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.analysis import FaceDescription
from likeness.domain.value_objects.generation import ConsistencyResult, PromptPart
from likeness.services.prompts import content_description_prompt
from likeness.services.similarity import cosine_similarity

logger = get_logger(__name__)


class ConsistencyValidator:
    """Score generated media against a reference identity embedding.

    The embedding endpoint only accepts text, so the generated media is first
    described in text and that description is embedded and compared.

    This validator never raises: infrastructure failures are reported as a
    non-passing result with ``errored=True``.

    Example:
        ```python
        validator = ConsistencyValidator(gateway)
        result = await validator.validate(clip_uri, profile.face_embedding)
        if result.passed:
            ...
        ```
    """

    def __init__(self, gateway: ModelGateway) -> None:
        """Initialize the validator.

        Args:
            gateway: Model gateway used to describe and embed content
        """
        self._gateway = gateway

    async def validate(
        self,
        generated_media_uri: str,
        identity_embedding: Sequence[float],
        identity_description: Optional[str] = None,
        threshold: Optional[float] = None,
    ) -> ConsistencyResult:
        """Check whether generated media depicts the reference identity.

        Args:
            generated_media_uri: Generated image or video as a data URI
            identity_embedding: Reference identity embedding
            identity_description: Optional reference face description
            threshold: Minimum similarity to pass (defaults to CONSISTENCY_THRESHOLD)

        Returns:
            ConsistencyResult with score, verdict and details
        """
        if threshold is None:
            threshold = settings.CONSISTENCY_THRESHOLD

        if not 0.0 <= threshold <= 1.0:
            logger.error("Invalid consistency threshold", threshold=threshold)
            return ConsistencyResult(
                score=0.0,
                passed=False,
                threshold=min(max(threshold, 0.0), 1.0),
                details=f"Validation error: threshold {threshold} is outside 0-1",
                errored=True,
            )

        try:
            completion = await self._gateway.complete(
                [
                    PromptPart.from_text(content_description_prompt(identity_description)),
                    PromptPart.from_media(generated_media_uri),
                ],
                output_schema=FaceDescription,
            )
            content_description = completion.output.description
            content_embedding = await self._gateway.embed(content_description)
            score = cosine_similarity(identity_embedding, content_embedding)
        except Exception as e:
            logger.error("Consistency validation failed", error=str(e), exc_info=True)
            return ConsistencyResult(
                score=0.0,
                passed=False,
                threshold=threshold,
                details=f"Validation error: {e}",
                errored=True,
            )

        passed = score >= threshold
        if passed:
            details = f"Content matches identity with {score * 100:.1f}% similarity"
        else:
            details = (
                f"Content similarity {score * 100:.1f}% is below threshold {threshold * 100:.1f}%"
            )
        logger.info("Consistency validated", score=score, passed=passed, threshold=threshold)
        return ConsistencyResult(score=score, passed=passed, threshold=threshold, details=details)
