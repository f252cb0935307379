"""Provider adapter interface for turn_router.

This module defines the Protocol implemented by every provider adapter.
"""

from typing import Protocol, runtime_checkable

from turn_router.models.capability import ModelCapability
from turn_router.models.context import AssembledContext
from turn_router.models.turn import AssistantReply

__all__ = [
    "ProviderAdapterInterface",
]


@runtime_checkable
class ProviderAdapterInterface(Protocol):
    """Contract for translating an assembled context into a provider call.

    Chat adapters consume the whole context. Image adapters read only
    the text of the final user entry, which the orchestrator sets to the
    extracted image prompt.
    """

    async def invoke(
        self,
        context: AssembledContext,
        capability: ModelCapability,
        credential: str | None,
    ) -> AssistantReply:
        """Call the provider and normalize its reply.

        Args:
            context: Assembled context for this turn
            capability: Capability of the model to call
            credential: API key for the provider

        Returns:
            AssistantReply with text or image markdown

        Raises:
            MissingCredentialError: If credential is empty (before any network call)
            ProviderError: On transport failure or unusable reply
        """
        ...
