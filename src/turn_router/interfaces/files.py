"""File store interface for turn_router.

This module defines the Protocol for the external file collaborator
that owns uploaded attachments.
"""

from typing import Protocol, runtime_checkable

from turn_router.models.chat import Attachment

__all__ = [
    "FileStoreInterface",
]


@runtime_checkable
class FileStoreInterface(Protocol):
    """Contract for reading uploaded files."""

    async def get_attachment(self, file_id: str, owner_id: str) -> Attachment | None:
        """Get attachment metadata and extracted text.

        Args:
            file_id: File ID
            owner_id: ID of the requesting user

        Returns:
            Attachment without binary data, or None if missing or not owned
        """
        ...

    async def read_bytes(self, attachment: Attachment) -> bytes:
        """Read the binary content of an attachment."""
        ...
