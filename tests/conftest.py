"""Shared test fixtures for turn_router.

This module provides pytest fixtures used across all tests.
"""

from datetime import UTC, datetime
from pathlib import Path

import pytest
import pytest_asyncio

from tests.mocks.mock_mongo import MockMongoClient
from tests.mocks.mock_providers import StubAdapter
from turn_router.capabilities import CapabilityRegistry
from turn_router.config import ProviderSettings, TurnRouterConfig
from turn_router.infra.llm.registry import AdapterRegistry
from turn_router.infra.mongo.file_repository import MongoFileRepository
from turn_router.infra.mongo.repositories import MongoStorageRepository
from turn_router.models.capability import ModelCapability, Provider, RequestKind
from turn_router.models.chat import ChatDTO, MessageDTO, Role
from turn_router.models.memory import MemoryDTO, MemoryType
from turn_router.models.turn import Principal
from turn_router.orchestrator import TurnOrchestrator

OWNER_ID = "user-1"
CHAT_ID = "chat-1"


# Storage fixtures
@pytest.fixture
def mongo_client() -> MockMongoClient:
    """Create in-memory mongo client."""
    return MockMongoClient()


@pytest.fixture
def storage(mongo_client: MockMongoClient) -> MongoStorageRepository:
    """Create storage repository over the in-memory client."""
    return MongoStorageRepository(mongo_client)  # type: ignore[arg-type]


@pytest.fixture
def file_store(mongo_client: MockMongoClient, tmp_path: Path) -> MongoFileRepository:
    """Create file repository rooted at a temp directory."""
    return MongoFileRepository(mongo_client, base_dir=tmp_path)  # type: ignore[arg-type]


@pytest_asyncio.fixture
async def chat(mongo_client: MockMongoClient) -> ChatDTO:
    """Insert an empty, untitled chat owned by OWNER_ID."""
    now = datetime.now(UTC)
    await mongo_client.chats.insert_one(
        {
            "id": CHAT_ID,
            "owner_id": OWNER_ID,
            "title": "New Chat",
            "created_at": now,
            "updated_at": now,
        }
    )
    return ChatDTO(id=CHAT_ID, owner_id=OWNER_ID, created_at=now, updated_at=now)


# Model fixtures
@pytest.fixture
def principal() -> Principal:
    """Create the authenticated test user."""
    return Principal(user_id=OWNER_ID, email="user@example.com")


@pytest.fixture
def provider_settings() -> ProviderSettings:
    """Create provider settings without server-side keys."""
    return ProviderSettings(
        openai_api_key=None,
        anthropic_api_key=None,
        request_timeout_seconds=1.0,
    )


@pytest.fixture
def config(provider_settings: ProviderSettings) -> TurnRouterConfig:
    """Create configuration for tests."""
    return TurnRouterConfig(provider=provider_settings)


@pytest.fixture
def capabilities() -> CapabilityRegistry:
    """Create the built-in capability registry."""
    return CapabilityRegistry.default()


@pytest.fixture
def chat_adapter() -> StubAdapter:
    """Create a stub chat adapter."""
    return StubAdapter(content="Hello! How can I help?")


@pytest.fixture
def image_adapter() -> StubAdapter:
    """Create a stub image adapter."""
    return StubAdapter(content="![Generated Image](https://images.example.com/stub.png)")


@pytest.fixture
def adapters(chat_adapter: StubAdapter, image_adapter: StubAdapter) -> AdapterRegistry:
    """Create an adapter registry wired to stub adapters."""
    registry = AdapterRegistry()
    registry.register(Provider.OPENAI, RequestKind.CHAT, chat_adapter)
    registry.register(Provider.ANTHROPIC, RequestKind.CHAT, chat_adapter)
    registry.register(Provider.OPENAI, RequestKind.IMAGE_GENERATION, image_adapter)
    return registry


@pytest.fixture
def orchestrator(
    storage: MongoStorageRepository,
    file_store: MongoFileRepository,
    config: TurnRouterConfig,
    capabilities: CapabilityRegistry,
    adapters: AdapterRegistry,
) -> TurnOrchestrator:
    """Create an orchestrator over in-memory storage and stub adapters."""
    return TurnOrchestrator(
        storage,
        file_store,
        config=config,
        capabilities=capabilities,
        adapters=adapters,
    )


@pytest.fixture
def vision_capability() -> ModelCapability:
    return ModelCapability(model_id="gpt-4o", provider=Provider.OPENAI, supports_vision=True)


@pytest.fixture
def text_capability() -> ModelCapability:
    return ModelCapability(model_id="gpt-3.5-turbo", provider=Provider.OPENAI)


@pytest.fixture
def reasoning_capability() -> ModelCapability:
    return ModelCapability(
        model_id="o1",
        provider=Provider.OPENAI,
        supports_system_message=False,
        supports_sampling_params=False,
    )


@pytest.fixture
def sample_history() -> list[MessageDTO]:
    """Create a two-message chat history."""
    return [
        MessageDTO(
            message_id="m1",
            chat_id=CHAT_ID,
            role=Role.USER,
            content="Hi there",
            created_at=datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        ),
        MessageDTO(
            message_id="m2",
            chat_id=CHAT_ID,
            role=Role.ASSISTANT,
            content="Hello! How can I help?",
            model_id="gpt-4o",
            created_at=datetime(2024, 1, 1, 12, 1, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def sample_memories() -> list[MemoryDTO]:
    """Create two memories, most important first."""
    now = datetime.now(UTC)
    return [
        MemoryDTO(
            owner_id=OWNER_ID,
            type=MemoryType.PREFERENCE,
            key="likes",
            value="hiking",
            confidence=0.7,
            importance=0.6,
            updated_at=now,
        ),
        MemoryDTO(
            owner_id=OWNER_ID,
            type=MemoryType.FACT,
            key="name",
            value="alice",
            confidence=0.6,
            importance=0.5,
            updated_at=now,
        ),
    ]
