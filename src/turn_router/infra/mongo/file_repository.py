"""MongoDB-backed file store for turn_router.

File metadata and extracted text live in the ``files`` collection;
binary content stays on disk at the stored path.
"""

import asyncio
from pathlib import Path
from typing import Any

from turn_router.infra.mongo.client import MongoClient
from turn_router.interfaces.files import FileStoreInterface
from turn_router.logging import get_logger
from turn_router.models.chat import Attachment

__all__ = [
    "MongoFileRepository",
]

logger = get_logger(__name__)


class MongoFileRepository(FileStoreInterface):
    """FileStoreInterface implementation over MongoDB metadata and local files."""

    def __init__(self, client: MongoClient, base_dir: Path | str | None = None) -> None:
        """Initialize repository.

        Args:
            client: Connected MongoClient instance
            base_dir: Directory relative file paths are resolved against
        """
        self._client = client
        self._base_dir = Path(base_dir) if base_dir else None

    async def get_attachment(self, file_id: str, owner_id: str) -> Attachment | None:
        """Get attachment metadata for an owned file."""
        doc = await self._client.files.find_one({"id": file_id, "owner_id": owner_id})
        if doc is None:
            return None
        return self._doc_to_attachment(doc)

    async def read_bytes(self, attachment: Attachment) -> bytes:
        """Read file bytes without blocking the event loop.

        Raises:
            FileNotFoundError: If the attachment has no stored path or the file is missing
        """
        if not attachment.path:
            raise FileNotFoundError(f"No stored path for file {attachment.id}")
        data = await asyncio.to_thread(Path(attachment.path).read_bytes)
        logger.debug("file_bytes_read", file_id=attachment.id, size=len(data))
        return data

    def _resolve_path(self, doc: dict[str, Any]) -> str | None:
        if not doc.get("path"):
            return None
        path = Path(doc["path"])
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        return str(path)

    def _doc_to_attachment(self, doc: dict[str, Any]) -> Attachment:
        return Attachment(
            id=doc["id"],
            filename=doc.get("original_name") or doc.get("filename", doc["id"]),
            mime_type=doc.get("mime_type", "application/octet-stream"),
            text=doc.get("content"),
            path=self._resolve_path(doc),
        )
