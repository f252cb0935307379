"""User memory extraction and persistence for turn_router.

Extraction is pattern-based and pure. Persistence upserts each item by
(owner_id, type, key); repeated observations only ever strengthen a
memory.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime

from turn_router.interfaces.storage import StorageInterface
from turn_router.logging import get_logger
from turn_router.models.memory import ExtractedMemories, MemoryDTO, MemoryType

__all__ = [
    "MemoryExtractor",
    "MemoryScores",
    "MemoryService",
    "SCORES",
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class MemoryScores:
    """Confidence/importance for first and repeated observations."""

    confidence: float
    importance: float
    reinforced_confidence: float
    reinforced_importance: float


SCORES: dict[MemoryType, MemoryScores] = {
    MemoryType.PREFERENCE: MemoryScores(0.7, 0.6, 0.8, 0.7),
    MemoryType.FACT: MemoryScores(0.6, 0.5, 0.7, 0.6),
}

_PREFERENCE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("likes", re.compile(r"\bi (?:like|love) ([^.!?]+)")),
    ("preferences", re.compile(r"\bi (?:prefer|would rather) ([^.!?]+)")),
)

_FACT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("name", re.compile(r"(?:\bmy name is|\bi'm) ([a-z]+)")),
    ("occupation", re.compile(r"(?:\bi work (?:as|at)|\bmy job (?:is|at)) ([^.!?]+)")),
)


class MemoryExtractor:
    """Extracts preferences and facts from a user message.

    Matching runs on the lower-cased message, so extracted values are
    lower-case.
    """

    def extract(self, message_text: str) -> ExtractedMemories:
        """Extract memory candidates from a message.

        Args:
            message_text: Raw user message

        Returns:
            ExtractedMemories with (key, value) pairs in message order
        """
        lower = message_text.lower()
        return ExtractedMemories(
            preferences=self._match(lower, _PREFERENCE_PATTERNS),
            facts=self._match(lower, _FACT_PATTERNS),
        )

    @staticmethod
    def _match(
        text: str,
        patterns: tuple[tuple[str, re.Pattern[str]], ...],
    ) -> list[tuple[str, str]]:
        found: list[tuple[str, str]] = []
        for key, pattern in patterns:
            for match in pattern.finditer(text):
                value = match.group(1).strip()
                if value:
                    found.append((key, value))
        return found


class MemoryService:
    """Service for reading and strengthening user memories.

    Example:
        service = MemoryService(storage)
        stored = await service.remember(user_id, "I like hiking.")
        context = await service.top_memories(user_id)
    """

    def __init__(
        self,
        storage: StorageInterface,
        extractor: MemoryExtractor | None = None,
        context_limit: int = 10,
    ) -> None:
        """Initialize service with dependencies.

        Args:
            storage: Storage interface for persistence
            extractor: Memory extractor (default: MemoryExtractor)
            context_limit: Default number of memories injected per turn
        """
        self._storage = storage
        self._extractor = extractor or MemoryExtractor()
        self._context_limit = context_limit

    def extract(self, message_text: str) -> ExtractedMemories:
        return self._extractor.extract(message_text)

    async def top_memories(self, owner_id: str, n: int | None = None) -> list[MemoryDTO]:
        """Get the owner's most important memories, highest first."""
        limit = self._context_limit if n is None else n
        memories = await self._storage.get_top_memories(owner_id, limit)
        ranked = sorted(memories, key=lambda m: m.importance, reverse=True)
        return ranked[:limit]

    async def persist(self, owner_id: str, extracted: ExtractedMemories) -> list[MemoryDTO]:
        """Upsert extracted items for an owner.

        Args:
            owner_id: ID of the user
            extracted: Items to store

        Returns:
            The stored memories, in extraction order
        """
        stored: list[MemoryDTO] = []
        for key, value in extracted.preferences:
            stored.append(await self._upsert(owner_id, MemoryType.PREFERENCE, key, value))
        for key, value in extracted.facts:
            stored.append(await self._upsert(owner_id, MemoryType.FACT, key, value))
        return stored

    async def remember(self, owner_id: str, message_text: str) -> list[MemoryDTO]:
        """Extract memories from a message and persist them."""
        extracted = self.extract(message_text)
        if extracted.is_empty:
            return []
        stored = await self.persist(owner_id, extracted)
        logger.info(
            "memories_stored",
            preferences=len(extracted.preferences),
            facts=len(extracted.facts),
        )
        return stored

    async def _upsert(
        self,
        owner_id: str,
        memory_type: MemoryType,
        key: str,
        value: str,
    ) -> MemoryDTO:
        scores = SCORES[memory_type]
        existing = await self._storage.get_memory(owner_id, memory_type, key)

        if existing is None:
            confidence, importance = scores.confidence, scores.importance
        else:
            # Saturates at the reinforced level; never lowers a stronger memory
            confidence = max(existing.confidence, scores.reinforced_confidence)
            importance = max(existing.importance, scores.reinforced_importance)

        memory = MemoryDTO(
            owner_id=owner_id,
            type=memory_type,
            key=key,
            value=value,
            confidence=confidence,
            importance=importance,
            updated_at=datetime.now(UTC),
        )
        await self._storage.save_memory(memory)
        logger.debug(
            "memory_upserted",
            memory_type=memory_type.value,
            key=key,
            reinforced=existing is not None,
        )
        return memory
