"""Service layer for turn_router.

This module exports the main service entry points.
"""

from turn_router.services.chat_titles import derive_title, needs_title
from turn_router.services.context_assembler import ContextAssembler
from turn_router.services.intent_classifier import IMAGE_TRIGGER_PHRASES, KeywordIntentClassifier
from turn_router.services.memory_service import MemoryExtractor, MemoryService

__all__ = [
    "IMAGE_TRIGGER_PHRASES",
    "ContextAssembler",
    "KeywordIntentClassifier",
    "MemoryExtractor",
    "MemoryService",
    "derive_title",
    "needs_title",
]
