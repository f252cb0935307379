"""Credential provider interface for turn_router."""

from typing import Protocol, runtime_checkable

from turn_router.models.capability import Provider

__all__ = [
    "CredentialProviderInterface",
]


@runtime_checkable
class CredentialProviderInterface(Protocol):
    """Contract for resolving a provider API key for one turn.

    A credential provider is built per request and passed to the
    orchestrator, so keys of concurrent turns never mix.
    """

    def get(self, provider: Provider) -> str | None:
        """Return the API key for a provider, or None if unavailable."""
        ...
