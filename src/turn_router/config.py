"""Configuration management for turn_router.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "MongoSettings",
    "ProviderSettings",
    "TurnRouterConfig",
]


class MongoSettings(BaseSettings):
    """MongoDB connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="TURN_ROUTER_MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "turn_router"
    collection_prefix: str = ""


class ProviderSettings(BaseSettings):
    """AI provider settings.

    API keys configured here are server-wide defaults, used only when
    a request does not carry its own key for the provider.
    """

    model_config = SettingsConfigDict(
        env_prefix="TURN_ROUTER_PROVIDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr | None = None
    anthropic_api_key: SecretStr | None = None
    request_timeout_seconds: float = 60.0

    # Sampling defaults for models that accept them
    max_tokens: int = 1000
    temperature: float = 0.7

    # Image generation
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_quality: str = "standard"


class TurnRouterConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = TurnRouterConfig()
        timeout = config.provider.request_timeout_seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="TURN_ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Component settings (nested)
    mongo: MongoSettings = MongoSettings()
    provider: ProviderSettings = ProviderSettings()

    # Memory context
    memory_context_limit: int = 10

    # Chat titles
    default_chat_title: str = "New Chat"
    title_max_words: int = 6
    title_max_length: int = 50
