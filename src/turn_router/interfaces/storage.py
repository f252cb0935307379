"""Storage interface for turn_router.

This module defines the Protocol for the external datastore holding
chats, messages and user memories.
"""

from typing import Protocol, runtime_checkable

from turn_router.models.chat import ChatDTO, MessageDTO
from turn_router.models.memory import MemoryDTO, MemoryType

__all__ = [
    "StorageInterface",
]


@runtime_checkable
class StorageInterface(Protocol):
    """Contract for persistent storage operations.

    Every chat and memory query is scoped by owner. Implementations must
    treat a chat owned by someone else exactly like a missing chat.
    """

    # Chat operations
    async def get_chat(self, chat_id: str, owner_id: str) -> ChatDTO | None:
        """Get a chat by ID if it belongs to the owner.

        Args:
            chat_id: Chat ID to retrieve
            owner_id: ID of the requesting user

        Returns:
            ChatDTO if found and owned, None otherwise
        """
        ...

    async def update_chat_title(self, chat_id: str, owner_id: str, title: str) -> None:
        """Set the title of an owned chat.

        Args:
            chat_id: Chat ID to update
            owner_id: ID of the requesting user
            title: New title
        """
        ...

    # Message operations
    async def get_messages_for_chat(self, chat_id: str) -> list[MessageDTO]:
        """Get all messages for a chat.

        Args:
            chat_id: Chat ID to query

        Returns:
            List of messages, ordered by creation time
        """
        ...

    async def save_message(self, message: MessageDTO) -> str:
        """Save a message to storage.

        Args:
            message: Message data to save

        Returns:
            Message ID
        """
        ...

    # Memory operations
    async def get_memory(
        self,
        owner_id: str,
        memory_type: MemoryType,
        key: str,
    ) -> MemoryDTO | None:
        """Get a memory by its unique (owner, type, key) triple."""
        ...

    async def save_memory(self, memory: MemoryDTO) -> None:
        """Insert or replace the memory with the same (owner, type, key)."""
        ...

    async def get_top_memories(self, owner_id: str, limit: int = 10) -> list[MemoryDTO]:
        """Get an owner's memories ordered by importance, highest first.

        Args:
            owner_id: ID of the user
            limit: Maximum number of memories

        Returns:
            List of memories
        """
        ...
