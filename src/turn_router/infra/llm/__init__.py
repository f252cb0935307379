"""LLM provider adapters for turn_router."""

from turn_router.infra.llm.anthropic_provider import AnthropicChatAdapter
from turn_router.infra.llm.openai_provider import OpenAIChatAdapter, OpenAIImageAdapter
from turn_router.infra.llm.registry import AdapterRegistry

__all__ = ["AdapterRegistry", "AnthropicChatAdapter", "OpenAIChatAdapter", "OpenAIImageAdapter"]
