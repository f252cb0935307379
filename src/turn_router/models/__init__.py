"""Public DTO models for turn_router.

This module exports all public data transfer objects.
"""

from turn_router.models.capability import ModelCapability, Provider, RequestKind
from turn_router.models.chat import Attachment, ChatDTO, MessageDTO, Role
from turn_router.models.context import (
    AssembledContext,
    ContextEntry,
    ImagePart,
    MultiPartContent,
    TextContent,
    TextPart,
)
from turn_router.models.memory import ExtractedMemories, MemoryDTO, MemoryType
from turn_router.models.turn import (
    AssistantReply,
    ErrorResponse,
    IntentResult,
    Principal,
    ProviderKeys,
    TurnRequest,
    TurnResponse,
)

__all__ = [
    "AssembledContext",
    "AssistantReply",
    "Attachment",
    "ChatDTO",
    "ContextEntry",
    "ErrorResponse",
    "ExtractedMemories",
    "ImagePart",
    "IntentResult",
    "MemoryDTO",
    "MemoryType",
    "MessageDTO",
    "ModelCapability",
    "MultiPartContent",
    "Principal",
    "Provider",
    "ProviderKeys",
    "RequestKind",
    "Role",
    "TextContent",
    "TextPart",
    "TurnRequest",
    "TurnResponse",
]
