"""Assembled context models for turn_router.

An AssembledContext is the ordered role/content sequence sent to a
provider for one turn. Content is a closed union: plain text, or a
multi-part payload of text and images for vision models.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from turn_router.models.chat import Role

__all__ = [
    "AssembledContext",
    "ContextEntry",
    "ContentPart",
    "ImagePart",
    "MultiPartContent",
    "TextContent",
    "TextPart",
]


class TextPart(BaseModel, frozen=True):
    """Text segment of a multi-part message."""

    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel, frozen=True):
    """Inline base64 image of a multi-part message."""

    type: Literal["image"] = "image"
    mime_type: str
    data_b64: str = Field(repr=False)

    @property
    def data_uri(self) -> str:
        """Return the image as a data URI."""
        return f"data:{self.mime_type};base64,{self.data_b64}"


ContentPart = Annotated[TextPart | ImagePart, Field(discriminator="type")]


class TextContent(BaseModel, frozen=True):
    """Plain text message content."""

    kind: Literal["text"] = "text"
    text: str


class MultiPartContent(BaseModel, frozen=True):
    """Text followed by one or more images."""

    kind: Literal["multipart"] = "multipart"
    parts: list[ContentPart]

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "\n".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def images(self) -> list[ImagePart]:
        return [p for p in self.parts if isinstance(p, ImagePart)]


class ContextEntry(BaseModel, frozen=True):
    """One role/content entry of an assembled context."""

    role: Role
    content: Annotated[TextContent | MultiPartContent, Field(discriminator="kind")]

    @classmethod
    def text(cls, role: Role, text: str) -> "ContextEntry":
        return cls(role=role, content=TextContent(text=text))

    @property
    def is_multipart(self) -> bool:
        return isinstance(self.content, MultiPartContent)


class AssembledContext(BaseModel, frozen=True):
    """Ordered context for a single provider call. Never persisted."""

    entries: tuple[ContextEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def last(self) -> ContextEntry:
        return self.entries[-1]

    def with_role(self, role: Role) -> list[ContextEntry]:
        """Entries with the given role, in order."""
        return [e for e in self.entries if e.role == role]

    def without_role(self, role: Role) -> list[ContextEntry]:
        """Entries without the given role, in order."""
        return [e for e in self.entries if e.role != role]
