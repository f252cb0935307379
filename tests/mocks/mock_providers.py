"""Mock provider adapters and SDK responses for testing."""

import asyncio
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from turn_router.models.capability import ModelCapability
from turn_router.models.context import AssembledContext
from turn_router.models.turn import AssistantReply


class StubAdapter:
    """Adapter returning a fixed reply and recording its calls."""

    def __init__(
        self,
        content: str = "Hello from the model",
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._content = content
        self._error = error
        self._delay = delay
        self.calls: list[tuple[AssembledContext, ModelCapability, str | None]] = []
        self.invoked = asyncio.Event()

    async def invoke(
        self,
        context: AssembledContext,
        capability: ModelCapability,
        credential: str | None,
    ) -> AssistantReply:
        self.calls.append((context, capability, credential))
        self.invoked.set()
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return AssistantReply(content=self._content, model_id=capability.model_id)


def openai_chat_client(content: str | None = "Hi there!") -> MagicMock:
    """Mock AsyncOpenAI client for chat completions."""
    client = MagicMock()
    choices = [] if content is None else [SimpleNamespace(message=SimpleNamespace(content=content))]
    client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=choices))
    return client


def openai_image_client(url: str | None = None, b64_json: str | None = None) -> MagicMock:
    """Mock AsyncOpenAI client for image generation."""
    client = MagicMock()
    data: list[Any] = []
    if url is not None or b64_json is not None:
        data = [SimpleNamespace(url=url, b64_json=b64_json)]
    client.images.generate = AsyncMock(return_value=SimpleNamespace(data=data))
    return client


def anthropic_client(text: str | None = "Hello from Claude") -> MagicMock:
    """Mock AsyncAnthropic client for messages."""
    client = MagicMock()
    content = [] if text is None else [SimpleNamespace(type="text", text=text)]
    client.messages.create = AsyncMock(return_value=SimpleNamespace(content=content))
    return client
