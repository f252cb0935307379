"""OpenAI provider adapters for turn_router.

This module provides the OpenAI chat completion adapter and the
image generation adapter.
"""

from collections.abc import Callable
from typing import Any

import openai
from openai import AsyncOpenAI

from turn_router.config import ProviderSettings
from turn_router.errors import (
    EmptyCompletionError,
    MissingCredentialError,
    NoImageReturnedError,
    ProviderError,
    ProviderErrorKind,
)
from turn_router.interfaces.provider import ProviderAdapterInterface
from turn_router.logging import get_logger
from turn_router.models.capability import ModelCapability
from turn_router.models.context import AssembledContext, ContextEntry, MultiPartContent, TextPart
from turn_router.models.turn import AssistantReply

__all__ = [
    "OpenAIChatAdapter",
    "OpenAIImageAdapter",
]

logger = get_logger(__name__)

ClientFactory = Callable[[str], AsyncOpenAI]


def _translate_error(exc: Exception) -> ProviderError:
    """Map an OpenAI SDK exception to a ProviderError."""
    if isinstance(exc, openai.APITimeoutError):
        return ProviderError(ProviderErrorKind.TIMEOUT, "OpenAI request timed out")
    if isinstance(exc, openai.APIConnectionError):
        return ProviderError(ProviderErrorKind.CONNECTION, f"OpenAI connection failed: {exc}")
    if isinstance(exc, openai.APIStatusError):
        return ProviderError(
            ProviderErrorKind.STATUS,
            f"OpenAI returned status {exc.status_code}: {exc.message}",
        )
    return ProviderError(ProviderErrorKind.MALFORMED, f"OpenAI request failed: {exc}")


class _OpenAIAdapter:
    """Shared client handling for OpenAI adapters."""

    def __init__(
        self,
        settings: ProviderSettings,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            settings: Provider settings (timeouts, sampling and image defaults)
            client_factory: Builds a client for an API key (default: AsyncOpenAI)
        """
        self._settings = settings
        self._client_factory = client_factory or self._default_client

    def _default_client(self, api_key: str) -> AsyncOpenAI:
        # One client per call: the key belongs to the request, not the process
        return AsyncOpenAI(
            api_key=api_key,
            timeout=self._settings.request_timeout_seconds,
            max_retries=0,
        )

    def _client(self, credential: str | None, message: str | None = None) -> AsyncOpenAI:
        if not credential:
            raise MissingCredentialError("OpenAI", message)
        return self._client_factory(credential)


class OpenAIChatAdapter(_OpenAIAdapter, ProviderAdapterInterface):
    """OpenAI chat completion adapter.

    Sampling parameters are sent only to models whose capability allows
    them; reasoning models get neither temperature nor max_tokens.
    """

    async def invoke(
        self,
        context: AssembledContext,
        capability: ModelCapability,
        credential: str | None,
    ) -> AssistantReply:
        """Send the context as a chat completion request."""
        client = self._client(credential)
        kwargs: dict[str, Any] = {
            "model": capability.model_id,
            "messages": [self._to_message(e) for e in context.entries],
        }
        if capability.supports_sampling_params:
            kwargs["max_tokens"] = self._settings.max_tokens
            kwargs["temperature"] = self._settings.temperature

        try:
            completion = await client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise _translate_error(e) from e

        content = self._completion_text(completion)
        if not content:
            raise EmptyCompletionError()

        logger.debug(
            "openai_completion_received",
            model_id=capability.model_id,
            content_length=len(content),
        )
        return AssistantReply(content=content, model_id=capability.model_id)

    @staticmethod
    def _completion_text(completion: Any) -> str | None:
        """Return the first choice's text, or None when there are no choices.

        Raises:
            ProviderError: If a choice is present but carries no message
        """
        choices = getattr(completion, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        if message is None:
            raise ProviderError(ProviderErrorKind.MALFORMED, "OpenAI reply had no message")
        content = getattr(message, "content", None)
        return content if isinstance(content, str) else None

    @staticmethod
    def _to_message(entry: ContextEntry) -> dict[str, Any]:
        if isinstance(entry.content, MultiPartContent):
            parts: list[dict[str, Any]] = []
            for part in entry.content.parts:
                if isinstance(part, TextPart):
                    parts.append({"type": "text", "text": part.text})
                else:
                    parts.append(
                        {
                            "type": "image_url",
                            "image_url": {"url": part.data_uri, "detail": "high"},
                        }
                    )
            return {"role": entry.role.value, "content": parts}
        return {"role": entry.role.value, "content": entry.content.text}


class OpenAIImageAdapter(_OpenAIAdapter, ProviderAdapterInterface):
    """OpenAI image generation adapter.

    Sends only the text of the final user entry as the prompt and
    returns the image as markdown.
    """

    async def invoke(
        self,
        context: AssembledContext,
        capability: ModelCapability,
        credential: str | None,
    ) -> AssistantReply:
        """Generate one image for the prompt in the final context entry."""
        client = self._client(credential, "OpenAI API key not configured for image generation")
        prompt = context.last.content.text

        try:
            response = await client.images.generate(
                model=capability.model_id,
                prompt=prompt,
                n=1,
                size=self._settings.image_size,
                quality=self._settings.image_quality,
                response_format="url",
            )
        except openai.OpenAIError as e:
            raise _translate_error(e) from e

        image_ref = self._image_reference(response)
        if image_ref is None:
            raise NoImageReturnedError()

        logger.debug("openai_image_received", model_id=capability.model_id)
        return AssistantReply(
            content=f"![Generated Image]({image_ref})",
            model_id=capability.model_id,
        )

    @staticmethod
    def _image_reference(response: Any) -> str | None:
        """Return a URL or data URI from an images response."""
        data = getattr(response, "data", None) or []
        if data:
            first = data[0]
            if getattr(first, "url", None):
                return first.url
            if getattr(first, "b64_json", None):
                return f"data:image/png;base64,{first.b64_json}"
        return getattr(response, "url", None)
