"""Provider adapter registry for turn_router.

Maps (provider, request kind) pairs to adapter instances so new
providers plug in without orchestrator changes.
"""

from turn_router.config import ProviderSettings
from turn_router.infra.llm.anthropic_provider import AnthropicChatAdapter
from turn_router.infra.llm.openai_provider import OpenAIChatAdapter, OpenAIImageAdapter
from turn_router.interfaces.provider import ProviderAdapterInterface
from turn_router.models.capability import ModelCapability, Provider, RequestKind

__all__ = [
    "AdapterRegistry",
]


class AdapterRegistry:
    """Registry of provider adapters.

    Example:
        adapters = AdapterRegistry.default(settings.provider)
        adapter = adapters.get(capability)
    """

    def __init__(self) -> None:
        self._adapters: dict[tuple[Provider, RequestKind], ProviderAdapterInterface] = {}

    @classmethod
    def default(cls, settings: ProviderSettings) -> "AdapterRegistry":
        """Create a registry with the built-in OpenAI and Anthropic adapters."""
        registry = cls()
        registry.register(Provider.OPENAI, RequestKind.CHAT, OpenAIChatAdapter(settings))
        registry.register(
            Provider.OPENAI, RequestKind.IMAGE_GENERATION, OpenAIImageAdapter(settings)
        )
        registry.register(Provider.ANTHROPIC, RequestKind.CHAT, AnthropicChatAdapter(settings))
        return registry

    def register(
        self,
        provider: Provider,
        request_kind: RequestKind,
        adapter: ProviderAdapterInterface,
    ) -> None:
        """Register (or replace) the adapter for a provider and request kind."""
        self._adapters[(provider, request_kind)] = adapter

    def get(self, capability: ModelCapability) -> ProviderAdapterInterface:
        """Get the adapter serving a model capability.

        Raises:
            KeyError: If no adapter is registered for the pair
        """
        key = (capability.provider, capability.request_kind)
        if key not in self._adapters:
            raise KeyError(
                f"No adapter registered for {capability.provider.value}/"
                f"{capability.request_kind.value}"
            )
        return self._adapters[key]
