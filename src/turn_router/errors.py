"""Error taxonomy for turn_router.

Every error carries the HTTP-style status code it maps to at the
inbound boundary. Provider errors are operational conditions that the
orchestrator downgrades to a stored assistant message; everything else
aborts the turn before any write.
"""

from enum import StrEnum

__all__ = [
    "BadRequestError",
    "ChatNotFoundError",
    "EmptyCompletionError",
    "InternalError",
    "MissingCredentialError",
    "NoImageReturnedError",
    "ProviderError",
    "ProviderErrorKind",
    "TurnRouterError",
    "UnknownModelError",
]


class TurnRouterError(Exception):
    """Base class for all turn_router errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(TurnRouterError):
    """Malformed inbound request."""

    status_code = 400


class UnknownModelError(BadRequestError):
    """Model id is not present in the capability registry."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Unsupported model: {model_id}")
        self.model_id = model_id


class MissingCredentialError(BadRequestError):
    """No API key available for the resolved provider."""

    def __init__(self, provider: str, message: str | None = None) -> None:
        super().__init__(message or f"{provider} API key not configured")
        self.provider = provider


class ChatNotFoundError(TurnRouterError):
    """Chat does not exist or belongs to another owner.

    Both cases produce the same error so that the existence of another
    owner's chat is never revealed.
    """

    status_code = 404

    def __init__(self, chat_id: str) -> None:
        super().__init__("Chat not found")
        self.chat_id = chat_id


class InternalError(TurnRouterError):
    """Unexpected failure; surfaced as an opaque 500."""

    status_code = 500


class ProviderErrorKind(StrEnum):
    """Failure categories for provider calls."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    STATUS = "status"
    MALFORMED = "malformed"
    EMPTY_COMPLETION = "empty_completion"
    NO_IMAGE = "no_image"


class ProviderError(TurnRouterError):
    """A provider call failed or returned nothing usable."""

    status_code = 500

    def __init__(self, kind: ProviderErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class EmptyCompletionError(ProviderError):
    """Chat completion contained no text."""

    def __init__(self, message: str = "No response generated") -> None:
        super().__init__(ProviderErrorKind.EMPTY_COMPLETION, message)


class NoImageReturnedError(ProviderError):
    """Image endpoint returned neither a URL nor base64 data."""

    def __init__(self, message: str = "Image response contained no URL or data") -> None:
        super().__init__(ProviderErrorKind.NO_IMAGE, message)
