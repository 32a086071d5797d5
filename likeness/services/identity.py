"""Identity embedding generation from reference frames."""
import asyncio
from typing import List, Sequence

from likeness.core.exceptions import InvalidReferenceFramesError
from likeness.core.logging import get_logger
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.analysis import FaceDescription, IdentityEmbedding
from likeness.domain.value_objects.generation import PromptPart
from likeness.services.prompts import FACE_DESCRIPTION_PROMPT
from likeness.services.similarity import cosine_similarity

logger = get_logger(__name__)

MAX_REFERENCE_FRAMES = 10


class IdentityEmbeddingService:
    """Build a text-derived identity embedding for an actor.

    The embedding endpoint is text-only, so every reference frame is described
    in text and the descriptions are embedded. The canonical frame is the one
    most similar to all the others.
    """

    def __init__(self, gateway: ModelGateway) -> None:
        self._gateway = gateway

    async def generate(self, reference_frames: Sequence[str]) -> IdentityEmbedding:
        """Generate an identity embedding.

        Args:
            reference_frames: 1-10 face images as data URIs

        Returns:
            IdentityEmbedding for the canonical frame

        Raises:
            InvalidReferenceFramesError: If the number of frames is out of range
            GatewayError: If describing or embedding a frame fails
        """
        if not 1 <= len(reference_frames) <= MAX_REFERENCE_FRAMES:
            raise InvalidReferenceFramesError(
                f"Expected 1-{MAX_REFERENCE_FRAMES} reference frames, got {len(reference_frames)}"
            )

        described = await asyncio.gather(*(self._describe(frame) for frame in reference_frames))
        descriptions = [description for description, _ in described]
        embeddings = [embedding for _, embedding in described]

        canonical_index, consistency = self._pick_canonical(embeddings)
        logger.info(
            "Identity embedding generated",
            frames=len(reference_frames),
            canonical_frame_index=canonical_index,
            consistency_score=consistency,
        )
        return IdentityEmbedding(
            embedding=embeddings[canonical_index],
            face_description=descriptions[canonical_index],
            consistency_score=consistency,
            canonical_frame_index=canonical_index,
        )

    async def _describe(self, frame: str):
        completion = await self._gateway.complete(
            [PromptPart.from_text(FACE_DESCRIPTION_PROMPT), PromptPart.from_media(frame)],
            output_schema=FaceDescription,
        )
        description = completion.output.description
        return description, await self._gateway.embed(description)

    @staticmethod
    def _pick_canonical(embeddings: List[List[float]]):
        """Return the index of the most central embedding and the mean pairwise similarity."""
        if len(embeddings) == 1:
            return 0, 1.0

        count = len(embeddings)
        totals = [0.0] * count
        pair_sum = 0.0
        for i in range(count):
            for j in range(i + 1, count):
                similarity = cosine_similarity(embeddings[i], embeddings[j])
                totals[i] += similarity
                totals[j] += similarity
                pair_sum += similarity

        canonical_index = max(range(count), key=lambda k: totals[k])
        pairs = count * (count - 1) / 2
        return canonical_index, pair_sum / pairs
