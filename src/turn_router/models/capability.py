"""Model capability descriptors for turn_router."""

from enum import StrEnum

from pydantic import BaseModel

__all__ = [
    "ModelCapability",
    "Provider",
    "RequestKind",
]


class Provider(StrEnum):
    """AI providers a model can belong to."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"

    @property
    def display_name(self) -> str:
        return {Provider.OPENAI: "OpenAI", Provider.ANTHROPIC: "Anthropic"}[self]


class RequestKind(StrEnum):
    """Shape of the request a model accepts."""

    CHAT = "chat"
    IMAGE_GENERATION = "image_generation"


class ModelCapability(BaseModel, frozen=True):
    """Supported request features of one model.

    Consulted by the context assembler and the provider adapters so
    per-model rules live in data, not in adapter branches.

    Attributes:
        model_id: Model identifier sent to the provider
        provider: Owning provider
        supports_vision: Accepts inline image parts
        supports_system_message: Accepts system-role entries
        supports_sampling_params: Accepts temperature/max-token parameters
        request_kind: Chat completion or image generation
    """

    model_id: str
    provider: Provider
    supports_vision: bool = False
    supports_system_message: bool = True
    supports_sampling_params: bool = True
    request_kind: RequestKind = RequestKind.CHAT
