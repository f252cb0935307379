"""Inbound/outbound boundary models for a single turn.

These frozen Pydantic models define the contract between the transport
layer and the turn orchestrator. They are validated at creation.
"""

from pydantic import BaseModel, ConfigDict, Field, SecretStr

__all__ = [
    "AssistantReply",
    "ErrorResponse",
    "IntentResult",
    "Principal",
    "ProviderKeys",
    "TurnRequest",
    "TurnResponse",
]


class Principal(BaseModel, frozen=True):
    """Authenticated caller, produced by the auth boundary."""

    user_id: str = Field(min_length=1)
    email: str | None = None


class ProviderKeys(BaseModel, frozen=True):
    """Per-request provider credentials supplied by the caller."""

    openai: SecretStr | None = None
    anthropic: SecretStr | None = None


class TurnRequest(BaseModel, frozen=True):
    """One user message to be routed to a model.

    Attributes:
        chat_id: Target chat
        message: Raw user message text
        model_id: Requested model
        attachment_ids: IDs of previously uploaded files, in order
        provider_keys: Optional per-provider API keys
    """

    model_config = ConfigDict(populate_by_name=True)

    chat_id: str = Field(min_length=1, alias="chatId")
    message: str
    model_id: str = Field(min_length=1, alias="modelId")
    attachment_ids: list[str] = Field(default_factory=list, alias="attachmentIds")
    provider_keys: ProviderKeys = Field(default_factory=ProviderKeys, alias="providerKeys")


class IntentResult(BaseModel, frozen=True):
    """Outcome of intent classification."""

    is_image_request: bool
    image_prompt: str


class AssistantReply(BaseModel, frozen=True):
    """Normalized provider reply (text or image markdown)."""

    content: str
    model_id: str


class TurnResponse(BaseModel, frozen=True):
    """Successful turn result."""

    model_config = ConfigDict(populate_by_name=True)

    content: str
    model_id: str = Field(alias="modelId")


class ErrorResponse(BaseModel, frozen=True):
    """Failed turn result."""

    error: str
