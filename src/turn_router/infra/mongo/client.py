"""MongoDB client for turn_router.

This module provides an async MongoDB client wrapper using Motor.
"""

from typing import TYPE_CHECKING, Any

from turn_router.config import MongoSettings
from turn_router.logging import get_logger
from turn_router.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

__all__ = [
    "MongoClient",
]

logger = get_logger(__name__)

get_async_motor = lazy_import(
    "motor.motor_asyncio", "AsyncIOMotorClient", purpose="the MongoDB datastore"
)


class MongoClient:
    """Async MongoDB client wrapper.

    Provides a connection manager and collection accessors for the
    chats, messages, memories and files collections.

    Example:
        async with MongoClient(settings) as client:
            await client.chats.find_one({"id": chat_id, "owner_id": user_id})
    """

    def __init__(self, settings: MongoSettings) -> None:
        """Initialize client with settings.

        Args:
            settings: MongoDB connection settings
        """
        self._settings = settings
        self._client = None
        self._db = None

    async def connect(self) -> None:
        """Initialize connection to MongoDB."""
        if self._client is not None:
            return
        AsyncIOMotorClient = get_async_motor()  # noqa: N806

        self._client = AsyncIOMotorClient(self._settings.uri.get_secret_value())
        self._db = self._client[self._settings.database]

        await self._client.admin.command("ping")
        logger.info("connected_to_mongodb", database=self._settings.database)

    async def disconnect(self) -> None:
        """Close connection to MongoDB."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("disconnected_from_mongodb")

    @property
    def db(self) -> "AsyncIOMotorDatabase[dict[str, Any]]":
        """Get database instance.

        Raises:
            RuntimeError: If not connected
        """
        if self._db is None:
            raise RuntimeError("MongoClient not connected. Call connect() first.")
        return self._db

    def _collection(self, name: str) -> "AsyncIOMotorCollection[dict[str, Any]]":
        """Get collection with optional prefix."""
        return self.db[f"{self._settings.collection_prefix}{name}"]

    @property
    def chats(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("chats")

    @property
    def messages(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("messages")

    @property
    def memories(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("memories")

    @property
    def files(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self._collection("files")

    async def create_indexes(self) -> None:
        """Create indexes for all collections."""
        await self.chats.create_index("id", unique=True)
        await self.chats.create_index("owner_id")

        await self.messages.create_index("message_id", unique=True)
        await self.messages.create_index([("chat_id", 1), ("created_at", 1)])

        # One row per (owner, type, key): upserts must never duplicate
        await self.memories.create_index(
            [("owner_id", 1), ("type", 1), ("key", 1)],
            unique=True,
        )
        await self.memories.create_index([("owner_id", 1), ("importance", -1)])

        await self.files.create_index("id", unique=True)
        await self.files.create_index("owner_id")

        logger.info("created_mongodb_indexes")

    async def __aenter__(self) -> "MongoClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.disconnect()
