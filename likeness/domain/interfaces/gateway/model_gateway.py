"""Remote model gateway interface."""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Type

from pydantic import BaseModel

from ...value_objects.generation import (
    Completion,
    GenerationRequest,
    Operation,
    PromptPart,
    VideoGenerationConfig,
)


class ModelGateway(ABC):
    """Interface for a generative-AI provider.

    Implementations normalize provider failures into ``RateLimitedError``,
    ``TransientGatewayError`` or ``FatalGatewayError`` before they reach
    callers.
    """

    @abstractmethod
    async def complete(
        self,
        prompt: Sequence[PromptPart],
        output_schema: Optional[Type[BaseModel]] = None,
        response_modalities: Optional[Sequence[str]] = None,
    ) -> Completion:
        """
        Run a synchronous text, image or analysis request.

        Args:
            prompt: Ordered text and media parts
            output_schema: Optional pydantic model the output must conform to
            response_modalities: Requested output modalities, e.g. ["TEXT", "IMAGE"]

        Returns:
            Completion with text, parsed output and any media parts

        Raises:
            GatewayError: If the provider request fails
        """
        pass

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """
        Compute a fixed-dimension text embedding.

        Media input is not accepted; describe media in text first.

        Raises:
            GatewayError: If the provider request fails
        """
        pass

    @abstractmethod
    async def generate_async(
        self,
        request: GenerationRequest,
        config: VideoGenerationConfig,
    ) -> Optional[Operation]:
        """
        Submit a long-running video generation job.

        Returns:
            Operation handle, or None if the provider returned none

        Raises:
            GatewayError: If the submission fails
        """
        pass

    @abstractmethod
    async def poll_operation(self, operation: Operation) -> Operation:
        """
        Fetch an updated snapshot of an operation.

        Raises:
            GatewayError: If the status request fails
        """
        pass
