"""turn_router - Turn orchestration engine for multi-provider chat.

This package provides tools for:
- Classifying user messages as chat or image-generation requests
- Resolving models to providers and capabilities (vision, system messages, sampling)
- Assembling provider-native requests from conversation history and attachments
- Normalizing OpenAI and Anthropic replies into markdown
- Extracting durable user memories and injecting them into later turns

Example usage:
    from turn_router import Principal, TurnOrchestrator

    # Simple usage - config loaded from .env automatically
    async with await TurnOrchestrator.from_config() as orchestrator:
        status, body = await orchestrator.handle(
            Principal(user_id="user-1"),
            {"chatId": "chat-1", "message": "Hello!", "modelId": "gpt-4o"},
        )
"""

__version__ = "0.1.0"

from turn_router.capabilities import CapabilityRegistry
from turn_router.config import TurnRouterConfig
from turn_router.credentials import RequestCredentialProvider
from turn_router.errors import (
    ChatNotFoundError,
    MissingCredentialError,
    ProviderError,
    TurnRouterError,
    UnknownModelError,
)
from turn_router.infra.llm import (
    AdapterRegistry,
    AnthropicChatAdapter,
    OpenAIChatAdapter,
    OpenAIImageAdapter,
)
from turn_router.infra.mongo import MongoFileRepository, MongoStorageRepository
from turn_router.interfaces.classifier import IntentClassifierInterface
from turn_router.interfaces.credentials import CredentialProviderInterface
from turn_router.interfaces.files import FileStoreInterface
from turn_router.interfaces.provider import ProviderAdapterInterface
from turn_router.interfaces.storage import StorageInterface
from turn_router.models.turn import Principal, TurnRequest, TurnResponse
from turn_router.orchestrator import TurnOrchestrator, TurnOutcome, TurnState

__all__ = [  # noqa: RUF022
    # Orchestrator
    "TurnOrchestrator",
    "TurnOutcome",
    "TurnState",
    "TurnRouterConfig",
    # Boundary models
    "Principal",
    "TurnRequest",
    "TurnResponse",
    # Registries
    "AdapterRegistry",
    "CapabilityRegistry",
    "RequestCredentialProvider",
    # Implementations
    "AnthropicChatAdapter",
    "MongoFileRepository",
    "MongoStorageRepository",
    "OpenAIChatAdapter",
    "OpenAIImageAdapter",
    # Interfaces
    "CredentialProviderInterface",
    "FileStoreInterface",
    "IntentClassifierInterface",
    "ProviderAdapterInterface",
    "StorageInterface",
    # Errors
    "ChatNotFoundError",
    "MissingCredentialError",
    "ProviderError",
    "TurnRouterError",
    "UnknownModelError",
]
