"""Unit tests for provider adapters."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from tests.mocks.mock_providers import anthropic_client, openai_chat_client, openai_image_client
from turn_router.capabilities import CapabilityRegistry
from turn_router.config import ProviderSettings
from turn_router.errors import (
    EmptyCompletionError,
    MissingCredentialError,
    NoImageReturnedError,
    ProviderError,
    ProviderErrorKind,
)
from turn_router.infra.llm.anthropic_provider import AnthropicChatAdapter
from turn_router.infra.llm.openai_provider import OpenAIChatAdapter, OpenAIImageAdapter
from turn_router.infra.llm.registry import AdapterRegistry
from turn_router.models.capability import ModelCapability, Provider, RequestKind
from turn_router.models.chat import Role
from turn_router.models.context import (
    AssembledContext,
    ContextEntry,
    ImagePart,
    MultiPartContent,
    TextPart,
)


def _context(*entries: ContextEntry) -> AssembledContext:
    return AssembledContext(entries=entries)


def _factory(client: MagicMock) -> MagicMock:
    return MagicMock(return_value=client)


class TestOpenAIChatAdapter:
    """Tests for OpenAIChatAdapter."""

    @pytest.mark.asyncio
    async def test_sends_sampling_params(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client("Hi there!")
        factory = _factory(client)
        adapter = OpenAIChatAdapter(provider_settings, client_factory=factory)

        reply = await adapter.invoke(
            _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, "sk-test"
        )

        assert reply.content == "Hi there!"
        assert reply.model_id == "gpt-4o"
        factory.assert_called_once_with("sk-test")
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_reasoning_model_omits_sampling(
        self,
        provider_settings: ProviderSettings,
        reasoning_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client()
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(client))

        await adapter.invoke(
            _context(ContextEntry.text(Role.USER, "Hello")), reasoning_capability, "sk-test"
        )

        kwargs = client.chat.completions.create.call_args.kwargs
        assert "max_tokens" not in kwargs
        assert "temperature" not in kwargs

    @pytest.mark.asyncio
    async def test_multipart_becomes_image_url(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client()
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(client))
        entry = ContextEntry(
            role=Role.USER,
            content=MultiPartContent(
                parts=[TextPart(text="What is this?"), ImagePart(mime_type="image/png", data_b64="YWJj")]
            ),
        )

        await adapter.invoke(_context(entry), vision_capability, "sk-test")

        message = client.chat.completions.create.call_args.kwargs["messages"][0]
        assert message["content"] == [
            {"type": "text", "text": "What is this?"},
            {
                "type": "image_url",
                "image_url": {"url": "data:image/png;base64,YWJj", "detail": "high"},
            },
        ]

    @pytest.mark.asyncio
    async def test_empty_completion(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(openai_chat_client(None)))

        with pytest.raises(EmptyCompletionError):
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, "sk-test"
            )

    @pytest.mark.asyncio
    async def test_choice_without_message_is_malformed(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client()
        client.chat.completions.create = AsyncMock(
            return_value=SimpleNamespace(choices=[SimpleNamespace(message=None)])
        )
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(client))

        with pytest.raises(ProviderError) as exc_info:
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, "sk-test"
            )

        assert exc_info.value.kind == ProviderErrorKind.MALFORMED
        assert exc_info.value.message == "OpenAI reply had no message"

    @pytest.mark.asyncio
    async def test_completion_without_choices_is_empty(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client()
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace())
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(client))

        with pytest.raises(EmptyCompletionError):
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, "sk-test"
            )

    @pytest.mark.asyncio
    async def test_missing_credential(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(openai_chat_client()))

        with pytest.raises(MissingCredentialError, match="OpenAI API key not configured"):
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, None
            )

    @pytest.mark.asyncio
    async def test_sdk_errors_translated(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client()
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client.chat.completions.create.side_effect = openai.APITimeoutError(request=request)
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(client))

        with pytest.raises(ProviderError) as exc_info:
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, "sk-test"
            )

        assert exc_info.value.kind == ProviderErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_status_errors_translated(
        self,
        provider_settings: ProviderSettings,
        vision_capability: ModelCapability,
    ) -> None:
        client = openai_chat_client()
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(429, request=request)
        client.chat.completions.create.side_effect = openai.RateLimitError(
            "Rate limit reached", response=response, body=None
        )
        adapter = OpenAIChatAdapter(provider_settings, client_factory=_factory(client))

        with pytest.raises(ProviderError) as exc_info:
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hello")), vision_capability, "sk-test"
            )

        assert exc_info.value.kind == ProviderErrorKind.STATUS
        assert "429" in exc_info.value.message


class TestOpenAIImageAdapter:
    """Tests for OpenAIImageAdapter."""

    @pytest.mark.asyncio
    async def test_url_reply(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = openai_image_client(url="https://images.example.com/bike.png")
        adapter = OpenAIImageAdapter(provider_settings, client_factory=_factory(client))

        reply = await adapter.invoke(
            _context(ContextEntry.text(Role.USER, "a red bicycle")),
            capabilities.lookup("dall-e-3"),
            "sk-test",
        )

        assert reply.content == "![Generated Image](https://images.example.com/bike.png)"
        kwargs = client.images.generate.call_args.kwargs
        assert kwargs["prompt"] == "a red bicycle"
        assert kwargs["model"] == "dall-e-3"
        assert kwargs["n"] == 1
        assert kwargs["size"] == "1024x1024"

    @pytest.mark.asyncio
    async def test_base64_reply(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = openai_image_client(b64_json="iVBORw0")
        adapter = OpenAIImageAdapter(provider_settings, client_factory=_factory(client))

        reply = await adapter.invoke(
            _context(ContextEntry.text(Role.USER, "a cat")),
            capabilities.lookup("dall-e-3"),
            "sk-test",
        )

        assert reply.content == "![Generated Image](data:image/png;base64,iVBORw0)"

    @pytest.mark.asyncio
    async def test_no_image(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = openai_image_client()
        adapter = OpenAIImageAdapter(provider_settings, client_factory=_factory(client))

        with pytest.raises(NoImageReturnedError):
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "a cat")),
                capabilities.lookup("dall-e-3"),
                "sk-test",
            )

    @pytest.mark.asyncio
    async def test_missing_credential_message(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        adapter = OpenAIImageAdapter(provider_settings, client_factory=_factory(openai_image_client()))

        with pytest.raises(MissingCredentialError) as exc_info:
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "a cat")),
                capabilities.lookup("dall-e-3"),
                "",
            )

        assert exc_info.value.message == "OpenAI API key not configured for image generation"


class TestAnthropicChatAdapter:
    """Tests for AnthropicChatAdapter."""

    @pytest.mark.asyncio
    async def test_system_hoisted(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = anthropic_client("Hello from Claude")
        adapter = AnthropicChatAdapter(provider_settings, client_factory=_factory(client))
        context = _context(
            ContextEntry.text(Role.SYSTEM, "Context about the user:\nlikes: hiking"),
            ContextEntry.text(Role.USER, "Hi"),
        )

        reply = await adapter.invoke(context, capabilities.lookup("claude-3-5-sonnet"), "sk-ant")

        assert reply.content == "Hello from Claude"
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == "Context about the user:\nlikes: hiking"
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_no_system_param_without_system_entries(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = anthropic_client()
        adapter = AnthropicChatAdapter(provider_settings, client_factory=_factory(client))

        await adapter.invoke(
            _context(ContextEntry.text(Role.USER, "Hi")),
            capabilities.lookup("claude-3-haiku"),
            "sk-ant",
        )

        assert "system" not in client.messages.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_image_blocks(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = anthropic_client()
        adapter = AnthropicChatAdapter(provider_settings, client_factory=_factory(client))
        entry = ContextEntry(
            role=Role.USER,
            content=MultiPartContent(
                parts=[TextPart(text="Describe"), ImagePart(mime_type="image/jpeg", data_b64="YWJj")]
            ),
        )

        await adapter.invoke(_context(entry), capabilities.lookup("claude-4-sonnet"), "sk-ant")

        blocks = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert blocks[1] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/jpeg", "data": "YWJj"},
        }

    @pytest.mark.asyncio
    async def test_empty_reply(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        adapter = AnthropicChatAdapter(provider_settings, client_factory=_factory(anthropic_client(None)))

        with pytest.raises(EmptyCompletionError):
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hi")),
                capabilities.lookup("claude-3-opus"),
                "sk-ant",
            )

    @pytest.mark.asyncio
    async def test_reply_without_content_is_malformed(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        client = anthropic_client()
        client.messages.create = AsyncMock(return_value=SimpleNamespace())
        adapter = AnthropicChatAdapter(provider_settings, client_factory=_factory(client))

        with pytest.raises(ProviderError) as exc_info:
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hi")),
                capabilities.lookup("claude-3-opus"),
                "sk-ant",
            )

        assert exc_info.value.kind == ProviderErrorKind.MALFORMED
        assert exc_info.value.message == "Anthropic reply had no content"

    @pytest.mark.asyncio
    async def test_missing_credential(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        adapter = AnthropicChatAdapter(provider_settings)

        with pytest.raises(MissingCredentialError, match="Anthropic API key not configured"):
            await adapter.invoke(
                _context(ContextEntry.text(Role.USER, "Hi")),
                capabilities.lookup("claude-3-opus"),
                None,
            )


class TestAdapterRegistry:
    """Tests for AdapterRegistry."""

    def test_default_registry(
        self,
        provider_settings: ProviderSettings,
        capabilities: CapabilityRegistry,
    ) -> None:
        registry = AdapterRegistry.default(provider_settings)

        assert isinstance(registry.get(capabilities.lookup("gpt-4o")), OpenAIChatAdapter)
        assert isinstance(registry.get(capabilities.lookup("dall-e-3")), OpenAIImageAdapter)
        assert isinstance(
            registry.get(capabilities.lookup("claude-3-opus")), AnthropicChatAdapter
        )

    def test_missing_adapter(self) -> None:
        capability = ModelCapability(
            model_id="claude-image",
            provider=Provider.ANTHROPIC,
            request_kind=RequestKind.IMAGE_GENERATION,
        )

        with pytest.raises(KeyError):
            AdapterRegistry().get(capability)
