"""Memory models for turn_router.

A memory is a durable, confidence-scored fact or preference about a
user, keyed by (owner_id, type, key).
"""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

__all__ = [
    "ExtractedMemories",
    "MemoryDTO",
    "MemoryType",
]


class MemoryType(StrEnum):
    """Kinds of user memory."""

    PREFERENCE = "preference"
    FACT = "fact"


class MemoryDTO(BaseModel, frozen=True):
    """Stored user memory.

    Attributes:
        owner_id: ID of the user the memory is about
        type: Preference or fact
        key: Memory key (e.g. "likes", "name")
        value: Free-text value
        confidence: How sure we are the memory is correct (0.0-1.0)
        importance: Ranking weight for context injection (0.0-1.0)
        updated_at: Last observation timestamp
    """

    owner_id: str
    type: MemoryType
    key: str
    value: str
    confidence: float = Field(ge=0.0, le=1.0)
    importance: float = Field(ge=0.0, le=1.0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ExtractedMemories(BaseModel, frozen=True):
    """Key/value pairs extracted from one user message."""

    preferences: list[tuple[str, str]] = Field(default_factory=list)
    facts: list[tuple[str, str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check if nothing was extracted."""
        return not self.preferences and not self.facts
