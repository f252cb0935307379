"""Anthropic provider adapter for turn_router.

This module provides the Anthropic implementation of the chat adapter.
Note: the Messages API takes system text as a separate parameter and
always requires max_tokens.
"""

from collections.abc import Callable
from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from turn_router.config import ProviderSettings
from turn_router.errors import (
    EmptyCompletionError,
    MissingCredentialError,
    ProviderError,
    ProviderErrorKind,
)
from turn_router.interfaces.provider import ProviderAdapterInterface
from turn_router.logging import get_logger
from turn_router.models.capability import ModelCapability
from turn_router.models.chat import Role
from turn_router.models.context import AssembledContext, ContextEntry, MultiPartContent, TextPart
from turn_router.models.turn import AssistantReply

__all__ = [
    "AnthropicChatAdapter",
]

logger = get_logger(__name__)

ClientFactory = Callable[[str], AsyncAnthropic]


def _translate_error(exc: Exception) -> ProviderError:
    """Map an Anthropic SDK exception to a ProviderError."""
    if isinstance(exc, anthropic.APITimeoutError):
        return ProviderError(ProviderErrorKind.TIMEOUT, "Anthropic request timed out")
    if isinstance(exc, anthropic.APIConnectionError):
        return ProviderError(ProviderErrorKind.CONNECTION, f"Anthropic connection failed: {exc}")
    if isinstance(exc, anthropic.APIStatusError):
        return ProviderError(
            ProviderErrorKind.STATUS,
            f"Anthropic returned status {exc.status_code}: {exc.message}",
        )
    return ProviderError(ProviderErrorKind.MALFORMED, f"Anthropic request failed: {exc}")


class AnthropicChatAdapter(ProviderAdapterInterface):
    """Anthropic implementation of the chat adapter.

    System entries of the context are joined into the ``system``
    parameter; the remaining entries become ``messages``.
    """

    def __init__(
        self,
        settings: ProviderSettings,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize Anthropic adapter.

        Args:
            settings: Provider settings
            client_factory: Builds a client for an API key (default: AsyncAnthropic)
        """
        self._settings = settings
        self._client_factory = client_factory or self._default_client

    def _default_client(self, api_key: str) -> AsyncAnthropic:
        return AsyncAnthropic(
            api_key=api_key,
            timeout=self._settings.request_timeout_seconds,
            max_retries=0,
        )

    async def invoke(
        self,
        context: AssembledContext,
        capability: ModelCapability,
        credential: str | None,
    ) -> AssistantReply:
        """Send the context to the Messages API."""
        if not credential:
            raise MissingCredentialError("Anthropic")
        client = self._client_factory(credential)

        kwargs: dict[str, Any] = {
            "model": capability.model_id,
            "max_tokens": self._settings.max_tokens,
            "messages": [self._to_message(e) for e in context.without_role(Role.SYSTEM)],
        }
        system_text = "\n\n".join(e.content.text for e in context.with_role(Role.SYSTEM))
        if system_text and capability.supports_system_message:
            kwargs["system"] = system_text
        if capability.supports_sampling_params:
            kwargs["temperature"] = self._settings.temperature

        try:
            response = await client.messages.create(**kwargs)
        except anthropic.AnthropicError as e:
            raise _translate_error(e) from e

        blocks = getattr(response, "content", None)
        if blocks is None:
            raise ProviderError(ProviderErrorKind.MALFORMED, "Anthropic reply had no content")
        content = next(
            (
                getattr(b, "text", None)
                for b in blocks
                if getattr(b, "type", None) == "text"
            ),
            None,
        )
        if not content:
            raise EmptyCompletionError()

        logger.debug(
            "anthropic_completion_received",
            model_id=capability.model_id,
            content_length=len(content),
        )
        return AssistantReply(content=content, model_id=capability.model_id)

    @staticmethod
    def _to_message(entry: ContextEntry) -> dict[str, Any]:
        if isinstance(entry.content, MultiPartContent):
            blocks: list[dict[str, Any]] = []
            for part in entry.content.parts:
                if isinstance(part, TextPart):
                    blocks.append({"type": "text", "text": part.text})
                else:
                    blocks.append(
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": part.mime_type,
                                "data": part.data_b64,
                            },
                        }
                    )
            return {"role": entry.role.value, "content": blocks}
        return {"role": entry.role.value, "content": entry.content.text}
