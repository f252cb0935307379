"""Interface contracts for turn_router.

This module exports all Protocol-based interfaces for dependency injection.
"""

from turn_router.interfaces.classifier import IntentClassifierInterface
from turn_router.interfaces.credentials import CredentialProviderInterface
from turn_router.interfaces.files import FileStoreInterface
from turn_router.interfaces.provider import ProviderAdapterInterface
from turn_router.interfaces.storage import StorageInterface

__all__ = [
    "CredentialProviderInterface",
    "FileStoreInterface",
    "IntentClassifierInterface",
    "ProviderAdapterInterface",
    "StorageInterface",
]
