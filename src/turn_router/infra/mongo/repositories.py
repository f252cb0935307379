"""MongoDB repositories for turn_router.

This module provides the MongoDB implementation of StorageInterface.
Every chat and memory query carries an owner filter.
"""

from datetime import UTC, datetime
from typing import Any, Self

from turn_router.config import MongoSettings
from turn_router.infra.mongo.client import MongoClient
from turn_router.interfaces.storage import StorageInterface
from turn_router.logging import get_logger
from turn_router.models.chat import ChatDTO, MessageDTO, Role
from turn_router.models.memory import MemoryDTO, MemoryType

__all__ = [
    "MongoStorageRepository",
]

logger = get_logger(__name__)


class MongoStorageRepository(StorageInterface):
    """MongoDB implementation of StorageInterface.

    Provides owner-scoped reads of chats and memories and appends
    of conversation messages.
    """

    def __init__(self, client: MongoClient) -> None:
        """Initialize repository with MongoDB client.

        Args:
            client: Connected MongoClient instance
        """
        self._client = client
        self._owns_client = False

    @classmethod
    async def from_config(cls, config: MongoSettings) -> Self:
        """Create a repository that owns its client.

        Connects, creates indexes, and disconnects again on close().
        """
        client = MongoClient(config)
        await client.connect()
        await client.create_indexes()
        instance = cls(client)
        instance._owns_client = True
        return instance

    @property
    def client(self) -> MongoClient:
        return self._client

    async def close(self) -> None:
        """Close owned resources."""
        if self._owns_client:
            await self._client.disconnect()

    # Chat operations
    async def get_chat(self, chat_id: str, owner_id: str) -> ChatDTO | None:
        """Get a chat by ID, only if owned by owner_id."""
        doc = await self._client.chats.find_one({"id": chat_id, "owner_id": owner_id})
        return self._doc_to_chat(doc) if doc else None

    async def update_chat_title(self, chat_id: str, owner_id: str, title: str) -> None:
        """Set the title of an owned chat and bump updated_at."""
        await self._client.chats.update_one(
            {"id": chat_id, "owner_id": owner_id},
            {"$set": {"title": title, "updated_at": datetime.now(UTC)}},
        )
        logger.debug("chat_title_updated", chat_id=chat_id)

    # Message operations
    async def save_message(self, message: MessageDTO) -> str:
        """Insert a message (messages are never updated)."""
        await self._client.messages.insert_one(self._message_to_doc(message))
        return message.message_id

    async def get_messages_for_chat(self, chat_id: str) -> list[MessageDTO]:
        """Get all messages for a chat, oldest first."""
        cursor = self._client.messages.find({"chat_id": chat_id}).sort("created_at", 1)
        return [self._doc_to_message(doc) async for doc in cursor]

    # Memory operations
    async def get_memory(
        self,
        owner_id: str,
        memory_type: MemoryType,
        key: str,
    ) -> MemoryDTO | None:
        """Get a memory by (owner, type, key)."""
        doc = await self._client.memories.find_one(
            {"owner_id": owner_id, "type": memory_type.value, "key": key}
        )
        return self._doc_to_memory(doc) if doc else None

    async def save_memory(self, memory: MemoryDTO) -> None:
        """Upsert a memory by (owner, type, key)."""
        await self._client.memories.replace_one(
            {"owner_id": memory.owner_id, "type": memory.type.value, "key": memory.key},
            self._memory_to_doc(memory),
            upsert=True,
        )

    async def get_top_memories(self, owner_id: str, limit: int = 10) -> list[MemoryDTO]:
        """Get an owner's memories by importance, highest first."""
        cursor = (
            self._client.memories.find({"owner_id": owner_id})
            .sort("importance", -1)
            .limit(limit)
        )
        return [self._doc_to_memory(doc) async for doc in cursor]

    # Document conversion helpers
    @staticmethod
    def _doc_to_chat(doc: dict[str, Any]) -> ChatDTO:
        return ChatDTO(
            id=doc["id"],
            owner_id=doc["owner_id"],
            title=doc.get("title") or "New Chat",
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at", doc["created_at"]),
        )

    @staticmethod
    def _message_to_doc(message: MessageDTO) -> dict[str, Any]:
        return {
            "message_id": message.message_id,
            "chat_id": message.chat_id,
            "role": message.role.value,
            "content": message.content,
            "model_id": message.model_id,
            "attachment_ids": message.attachment_ids,
            "created_at": message.created_at,
        }

    @staticmethod
    def _doc_to_message(doc: dict[str, Any]) -> MessageDTO:
        return MessageDTO(
            message_id=doc["message_id"],
            chat_id=doc["chat_id"],
            role=Role(doc["role"]),
            content=doc.get("content", ""),
            model_id=doc.get("model_id"),
            attachment_ids=doc.get("attachment_ids", []),
            created_at=doc["created_at"],
        )

    @staticmethod
    def _memory_to_doc(memory: MemoryDTO) -> dict[str, Any]:
        return {
            "owner_id": memory.owner_id,
            "type": memory.type.value,
            "key": memory.key,
            "value": memory.value,
            "confidence": memory.confidence,
            "importance": memory.importance,
            "updated_at": memory.updated_at,
        }

    @staticmethod
    def _doc_to_memory(doc: dict[str, Any]) -> MemoryDTO:
        return MemoryDTO(
            owner_id=doc["owner_id"],
            type=MemoryType(doc["type"]),
            key=doc["key"],
            value=doc["value"],
            confidence=doc["confidence"],
            importance=doc["importance"],
            updated_at=doc["updated_at"],
        )
