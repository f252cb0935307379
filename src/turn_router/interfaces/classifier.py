"""Intent classifier interface for turn_router."""

from typing import Protocol, runtime_checkable

from turn_router.models.turn import IntentResult

__all__ = [
    "IntentClassifierInterface",
]


@runtime_checkable
class IntentClassifierInterface(Protocol):
    """Contract for deciding whether a message asks for an image.

    Implementations must be total: they never raise for any input
    string and always return a usable prompt.
    """

    def classify(self, message_text: str) -> IntentResult:
        """Classify a user message.

        Args:
            message_text: Raw user message

        Returns:
            IntentResult with the image flag and generation prompt
        """
        ...
