"""Chat and message models for turn_router.

These models mirror the records owned by the external datastore.
The turn engine only reads chats and appends messages.
"""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

__all__ = [
    "Attachment",
    "ChatDTO",
    "MessageDTO",
    "Role",
]

DEFAULT_CHAT_TITLE = "New Chat"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Role(StrEnum):
    """Author role of a conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatDTO(BaseModel, frozen=True):
    """Chat owned by exactly one user.

    Attributes:
        id: Chat ID assigned by the datastore
        owner_id: ID of the owning user
        title: Display title ("New Chat" until derived from the first turn)
        created_at: Creation timestamp
        updated_at: Last modification timestamp
    """

    id: str
    owner_id: str
    title: str = DEFAULT_CHAT_TITLE
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class MessageDTO(BaseModel, frozen=True):
    """Single conversation message.

    Messages are immutable once stored. Their order within a chat is
    the order of ``created_at``.

    Attributes:
        message_id: Message ID
        chat_id: Parent chat ID
        role: Author role
        content: Text/markdown content
        model_id: Model that produced the message (assistant messages only)
        attachment_ids: Files linked at creation time
        created_at: Creation timestamp
    """

    message_id: str
    chat_id: str
    role: Role
    content: str
    model_id: str | None = None
    attachment_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)


class Attachment(BaseModel, frozen=True):
    """File attached to a user turn.

    Binary data stays with the file collaborator; ``data`` is only
    populated when an image is going to be sent to a vision model.

    Attributes:
        id: File ID
        filename: Original file name
        mime_type: MIME type reported at upload
        text: Extracted text content, if any
        data: Raw bytes, loaded on demand
        path: Location of the stored bytes, set by the file collaborator
    """

    id: str
    filename: str
    mime_type: str
    text: str | None = None
    data: bytes | None = Field(default=None, repr=False)
    path: str | None = Field(default=None, repr=False)

    @property
    def is_image(self) -> bool:
        """Check if this attachment is an image."""
        return self.mime_type.startswith("image/")
