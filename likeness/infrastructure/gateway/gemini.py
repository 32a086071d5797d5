"""Gemini / Veo implementation of the remote model gateway."""
from typing import Any, List, Optional, Sequence, Type

import httpx
from google import genai
from google.genai import types
from google.genai.errors import APIError, ServerError
from pydantic import BaseModel, ValidationError

from likeness.core.config import settings
from likeness.core.exceptions import (
    FatalGatewayError,
    GatewayError,
    RateLimitedError,
    TransientGatewayError,
)
from likeness.core.logging import get_logger
from likeness.core.utils.data_uri import decode_data_uri, encode_data_uri
from likeness.domain.interfaces.gateway.model_gateway import ModelGateway
from likeness.domain.value_objects.generation import (
    Completion,
    GenerationRequest,
    MediaResult,
    Operation,
    OperationError,
    PromptPart,
    VideoGenerationConfig,
)

logger = get_logger(__name__)

_RATE_LIMIT_STATUS = "RESOURCE_EXHAUSTED"
_RATE_LIMIT_REASON = "rateLimit"


def _is_rate_limited(exc: BaseException) -> bool:
    """Check an error, and one level of cause below it, for a rate-limit signal."""
    if isinstance(exc, APIError) and (exc.code == 429 or exc.status == _RATE_LIMIT_STATUS):
        return True
    for candidate in (exc, getattr(exc, "cause", None), exc.__cause__):
        if candidate is not None and getattr(candidate, "reason", None) == _RATE_LIMIT_REASON:
            return True
    return False


def classify_provider_error(exc: BaseException) -> GatewayError:
    """Normalize a provider exception into one of the gateway error kinds.

    Args:
        exc: Exception raised by the provider SDK or transport

    Returns:
        RateLimitedError, TransientGatewayError or FatalGatewayError
    """
    if isinstance(exc, GatewayError):
        return exc

    message = str(exc) or exc.__class__.__name__
    details = {"provider_error": exc.__class__.__name__}
    if isinstance(exc, APIError):
        details["code"] = exc.code

    if _is_rate_limited(exc):
        return RateLimitedError(message, details)
    if isinstance(exc, ServerError) or isinstance(
        exc, (httpx.TransportError, ConnectionError, TimeoutError)
    ):
        return TransientGatewayError(message, details)
    return FatalGatewayError(message, details)


def _operation_error(error: Any) -> Optional[OperationError]:
    """Convert the provider's operation error payload."""
    if not error:
        return None
    if isinstance(error, dict):
        return OperationError(
            message=str(error.get("message") or error),
            code=error.get("code"),
        )
    return OperationError(message=str(error))


def operation_from_provider(operation: Any) -> Operation:
    """Convert a provider video operation into a domain Operation snapshot.

    Args:
        operation: ``GenerateVideosOperation`` returned by the SDK

    Returns:
        Operation with the first generated video as output, if any
    """
    output = None
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    if operation.done and response is not None and response.generated_videos:
        video = response.generated_videos[0].video
        if video is not None:
            mime_type = video.mime_type or "video/mp4"
            if video.video_bytes:
                output = MediaResult(
                    media_uri=encode_data_uri(video.video_bytes, mime_type),
                    content_type=mime_type,
                )
            elif video.uri:
                output = MediaResult(media_uri=video.uri, content_type=mime_type)

    return Operation(
        id=operation.name,
        done=bool(operation.done),
        output=output,
        error=_operation_error(getattr(operation, "error", None)),
    )


def _to_part(part: PromptPart) -> types.Part:
    """Convert a prompt part into an SDK content part."""
    if part.media_uri is not None:
        decoded = decode_data_uri(part.media_uri)
        return types.Part.from_bytes(data=decoded.data, mime_type=decoded.mime_type)
    return types.Part.from_text(text=part.text or "")


class GeminiModelGateway(ModelGateway):
    """Gemini / Veo implementation of the model gateway.

    Text and analysis requests go to the analysis model, requests that ask for
    image output go to the image model, video jobs go to Veo and embeddings to
    the text embedding model.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[genai.Client] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Provider API key (defaults to settings)
            client: Preconfigured SDK client
        """
        self._api_key = api_key or settings.api_key
        if client is None and not self._api_key:
            logger.warning(
                "GEMINI_API_KEY or GOOGLE_API_KEY not found; model requests will fail until it is set"
            )
        self._sdk_client = client
        self.analysis_model = settings.ANALYSIS_MODEL
        self.image_model = settings.IMAGE_MODEL
        self.video_model = settings.VIDEO_MODEL
        self.embedding_model = settings.EMBEDDING_MODEL
        logger.info(
            "Gemini model gateway initialized",
            analysis_model=self.analysis_model,
            video_model=self.video_model,
        )

    @property
    def _client(self) -> genai.Client:
        """SDK client, created on first use."""
        if self._sdk_client is None:
            self._sdk_client = genai.Client(api_key=self._api_key)
        return self._sdk_client

    async def complete(
        self,
        prompt: Sequence[PromptPart],
        output_schema: Optional[Type[BaseModel]] = None,
        response_modalities: Optional[Sequence[str]] = None,
    ) -> Completion:
        """Run a generate_content request and collect text, parsed output and media."""
        contents = [_to_part(part) for part in prompt]
        config_args: dict = {}
        if output_schema is not None:
            config_args["response_mime_type"] = "application/json"
            config_args["response_schema"] = output_schema
        if response_modalities:
            config_args["response_modalities"] = list(response_modalities)
        model = self.image_model if response_modalities and "IMAGE" in response_modalities else self.analysis_model

        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(**config_args),
            )
        except Exception as e:
            error = classify_provider_error(e)
            logger.error("Completion request failed", model=model, error=str(e), kind=type(error).__name__)
            raise error from e

        texts: List[str] = []
        media: List[MediaResult] = []
        candidates = response.candidates or []
        if candidates and candidates[0].content is not None:
            for part in candidates[0].content.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    mime_type = part.inline_data.mime_type or "application/octet-stream"
                    media.append(MediaResult(
                        media_uri=encode_data_uri(part.inline_data.data, mime_type),
                        content_type=mime_type,
                    ))
                elif part.text and not part.thought:
                    texts.append(part.text)
        text = "".join(texts) or None

        output = None
        if output_schema is not None:
            output = response.parsed
            if not isinstance(output, output_schema):
                try:
                    output = output_schema.model_validate_json(text or "")
                except ValidationError as e:
                    raise FatalGatewayError(
                        f"Model output did not match {output_schema.__name__}",
                        details={"model": model, "errors": e.errors(include_url=False)},
                    ) from e

        return Completion(text=text, output=output, media=media)

    async def embed(self, text: str) -> List[float]:
        """Embed text with the configured embedding model."""
        try:
            response = await self._client.aio.models.embed_content(
                model=self.embedding_model,
                contents=text,
            )
        except Exception as e:
            error = classify_provider_error(e)
            logger.error("Embedding request failed", error=str(e), kind=type(error).__name__)
            raise error from e

        if not response.embeddings or response.embeddings[0].values is None:
            raise FatalGatewayError("Embedding response contained no values")
        return list(response.embeddings[0].values)

    async def generate_async(
        self,
        request: GenerationRequest,
        config: VideoGenerationConfig,
    ) -> Optional[Operation]:
        """Submit an image-to-video job to Veo."""
        source = decode_data_uri(request.source_media)
        video_config = types.GenerateVideosConfig(
            aspect_ratio=config.aspect_ratio,
            duration_seconds=config.duration_seconds,
            person_generation=config.person_generation,
            number_of_videos=1,
        )
        try:
            operation = await self._client.aio.models.generate_videos(
                model=self.video_model,
                prompt=request.target_description,
                image=types.Image(image_bytes=source.data, mime_type=source.mime_type),
                config=video_config,
            )
        except Exception as e:
            error = classify_provider_error(e)
            logger.error("Video generation submit failed", error=str(e), kind=type(error).__name__)
            raise error from e

        if operation is None or not operation.name:
            return None
        logger.debug("Submitted video operation", operation_id=operation.name)
        return operation_from_provider(operation)

    async def poll_operation(self, operation: Operation) -> Operation:
        """Fetch the latest state of a video operation."""
        try:
            updated = await self._client.aio.operations.get(
                operation=types.GenerateVideosOperation(name=operation.id)
            )
        except Exception as e:
            error = classify_provider_error(e)
            logger.error(
                "Operation status request failed",
                operation_id=operation.id,
                error=str(e),
                kind=type(error).__name__,
            )
            raise error from e
        return operation_from_provider(updated)
