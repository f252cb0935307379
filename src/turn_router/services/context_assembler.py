"""Context assembly for turn_router.

This module builds the ordered role/content sequence sent to a provider:
memory context first, prior turns in chronological order, the current
user turn last.
"""

import base64
from collections.abc import Sequence

from turn_router.logging import get_logger
from turn_router.models.capability import ModelCapability
from turn_router.models.chat import Attachment, MessageDTO, Role
from turn_router.models.context import (
    AssembledContext,
    ContextEntry,
    ImagePart,
    MultiPartContent,
    TextPart,
)
from turn_router.models.memory import MemoryDTO

__all__ = [
    "ContextAssembler",
]

logger = get_logger(__name__)

MEMORY_CONTEXT_HEADER = "Context about the user:"
ATTACHED_FILES_HEADER = "Attached files:"


class ContextAssembler:
    """Builds an AssembledContext for one turn.

    Honors the model capability: image attachments become inline image
    parts only for vision models, and system entries are dropped for
    models that reject them.

    Example:
        assembler = ContextAssembler()
        context = assembler.assemble(history, memories, "Hi", [], capability)
    """

    def assemble(
        self,
        prior_messages: Sequence[MessageDTO],
        memories: Sequence[MemoryDTO],
        current_message: str,
        attachments: Sequence[Attachment],
        capability: ModelCapability,
    ) -> AssembledContext:
        """Assemble the context for a provider call.

        Args:
            prior_messages: Stored chat history, oldest first
            memories: Owner memories, most important first (already capped)
            current_message: Raw text of the user turn
            attachments: Resolved attachments of the user turn
            capability: Capability of the target model

        Returns:
            AssembledContext ending with the current user entry
        """
        entries: list[ContextEntry] = []

        if memories:
            entries.append(ContextEntry.text(Role.SYSTEM, self.format_memories(memories)))

        entries.extend(ContextEntry.text(m.role, m.content) for m in prior_messages)

        images = [a for a in attachments if a.is_image]
        text = self.compose_message_text(current_message, attachments)

        if images and capability.supports_vision:
            entries.append(self._vision_entry(text, images))
        else:
            if images:
                logger.debug(
                    "image_attachments_dropped",
                    model_id=capability.model_id,
                    dropped=len(images),
                )
            entries.append(ContextEntry.text(Role.USER, text))

        if not capability.supports_system_message:
            entries = [e for e in entries if e.role != Role.SYSTEM]

        return AssembledContext(entries=tuple(entries))

    @staticmethod
    def format_memories(memories: Sequence[MemoryDTO]) -> str:
        """Render memories as "key: value" lines under a header."""
        lines = "\n".join(f"{m.key}: {m.value}" for m in memories)
        return f"{MEMORY_CONTEXT_HEADER}\n{lines}"

    @staticmethod
    def compose_message_text(message: str, attachments: Sequence[Attachment]) -> str:
        """Append non-image attachment blocks to the message text.

        Files with extracted text contribute their content; files without
        it contribute a one-line placeholder with their MIME type.
        """
        blocks = []
        for attachment in attachments:
            if attachment.is_image:
                continue
            if attachment.text:
                blocks.append(f"File: {attachment.filename}\nContent: {attachment.text}")
            else:
                blocks.append(f"File: {attachment.filename} ({attachment.mime_type})")

        if not blocks:
            return message
        return f"{message}\n\n{ATTACHED_FILES_HEADER}\n" + "\n\n".join(blocks)

    @staticmethod
    def _vision_entry(text: str, images: Sequence[Attachment]) -> ContextEntry:
        parts: list[TextPart | ImagePart] = [TextPart(text=text)]
        for image in images:
            if image.data is None:
                # Bytes were not loaded by the caller
                logger.warning("image_attachment_without_data", attachment_id=image.id)
                continue
            parts.append(
                ImagePart(
                    mime_type=image.mime_type,
                    data_b64=base64.b64encode(image.data).decode("ascii"),
                )
            )
        return ContextEntry(role=Role.USER, content=MultiPartContent(parts=parts))
