"""Per-request credential resolution for turn_router.

Keys supplied with the request win; server-wide defaults from
ProviderSettings are the fallback.
"""

from pydantic import SecretStr

from turn_router.config import ProviderSettings
from turn_router.interfaces.credentials import CredentialProviderInterface
from turn_router.models.capability import Provider
from turn_router.models.turn import ProviderKeys

__all__ = [
    "RequestCredentialProvider",
]


def _reveal(secret: SecretStr | None) -> str | None:
    if secret is None:
        return None
    value = secret.get_secret_value().strip()
    return value or None


class RequestCredentialProvider(CredentialProviderInterface):
    """Credential provider for a single turn.

    Example:
        credentials = RequestCredentialProvider(request.provider_keys, settings.provider)
        api_key = credentials.get(Provider.OPENAI)
    """

    def __init__(
        self,
        request_keys: ProviderKeys | None = None,
        defaults: ProviderSettings | None = None,
    ) -> None:
        self._request_keys = request_keys or ProviderKeys()
        self._defaults = defaults

    def get(self, provider: Provider) -> str | None:
        """Return the request key for a provider, else the server default."""
        match provider:
            case Provider.OPENAI:
                own = self._request_keys.openai
                fallback = self._defaults.openai_api_key if self._defaults else None
            case Provider.ANTHROPIC:
                own = self._request_keys.anthropic
                fallback = self._defaults.anthropic_api_key if self._defaults else None
            case _:
                raise ValueError(f"Unknown provider: {provider}")
        return _reveal(own) or _reveal(fallback)
