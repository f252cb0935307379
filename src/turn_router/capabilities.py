"""Model capability registry for turn_router.

This module provides the static model-id -> capability table used to
resolve a provider and request shape for every turn.
"""

from collections.abc import Iterable

from turn_router.errors import UnknownModelError
from turn_router.models.capability import ModelCapability, Provider, RequestKind

__all__ = [
    "DEFAULT_CAPABILITIES",
    "CapabilityRegistry",
]


def _openai_chat(model_id: str, *, vision: bool) -> ModelCapability:
    return ModelCapability(model_id=model_id, provider=Provider.OPENAI, supports_vision=vision)


def _openai_reasoning(model_id: str) -> ModelCapability:
    # Reasoning models reject system messages, temperature and max_tokens
    return ModelCapability(
        model_id=model_id,
        provider=Provider.OPENAI,
        supports_vision=False,
        supports_system_message=False,
        supports_sampling_params=False,
    )


def _anthropic_chat(model_id: str, *, vision: bool) -> ModelCapability:
    return ModelCapability(model_id=model_id, provider=Provider.ANTHROPIC, supports_vision=vision)


DEFAULT_CAPABILITIES: tuple[ModelCapability, ...] = (
    _openai_chat("gpt-4", vision=True),
    _openai_chat("gpt-4o", vision=True),
    _openai_chat("gpt-4o-mini", vision=True),
    _openai_chat("gpt-4-turbo", vision=True),
    _openai_chat("gpt-3.5-turbo", vision=False),
    _openai_reasoning("o1"),
    _openai_reasoning("o1-mini"),
    _openai_reasoning("o3"),
    _openai_reasoning("o3-mini"),
    _openai_reasoning("o4-mini"),
    ModelCapability(
        model_id="dall-e-3",
        provider=Provider.OPENAI,
        supports_vision=False,
        supports_system_message=False,
        supports_sampling_params=False,
        request_kind=RequestKind.IMAGE_GENERATION,
    ),
    _anthropic_chat("claude-4-opus", vision=True),
    _anthropic_chat("claude-4-sonnet", vision=True),
    _anthropic_chat("claude-4-haiku", vision=True),
    _anthropic_chat("claude-3-5-sonnet", vision=True),
    _anthropic_chat("claude-3-opus", vision=False),
    _anthropic_chat("claude-3-haiku", vision=False),
)


class CapabilityRegistry:
    """Registry of model capabilities.

    Lookups are pure. New models are added through ``register`` without
    touching the assembler, adapters or orchestrator.

    Example:
        registry = CapabilityRegistry.default()
        registry.register(ModelCapability(model_id="gpt-5", provider=Provider.OPENAI))
        capability = registry.lookup("gpt-5")
    """

    def __init__(self, capabilities: Iterable[ModelCapability] = ()) -> None:
        self._capabilities: dict[str, ModelCapability] = {}
        for capability in capabilities:
            self.register(capability)

    @classmethod
    def default(cls) -> "CapabilityRegistry":
        """Create a registry holding the built-in model table."""
        return cls(DEFAULT_CAPABILITIES)

    def register(self, capability: ModelCapability) -> ModelCapability:
        """Register a model capability.

        Args:
            capability: Capability descriptor to add

        Returns:
            The registered capability

        Raises:
            ValueError: If the model id is already registered
        """
        if capability.model_id in self._capabilities:
            raise ValueError(f"Model already registered: {capability.model_id}")
        self._capabilities[capability.model_id] = capability
        return capability

    def lookup(self, model_id: str) -> ModelCapability:
        """Resolve a model id to its capability.

        Args:
            model_id: Model identifier from the request

        Returns:
            Capability descriptor

        Raises:
            UnknownModelError: If the model is not registered
        """
        try:
            return self._capabilities[model_id]
        except KeyError:
            raise UnknownModelError(model_id) from None

    def is_registered(self, model_id: str) -> bool:
        return model_id in self._capabilities

    def list_models(self, provider: Provider | None = None) -> list[str]:
        """List registered model ids, optionally for one provider."""
        return [
            c.model_id
            for c in self._capabilities.values()
            if provider is None or c.provider == provider
        ]
