"""MongoDB infrastructure for turn_router."""

from turn_router.infra.mongo.client import MongoClient
from turn_router.infra.mongo.file_repository import MongoFileRepository
from turn_router.infra.mongo.repositories import MongoStorageRepository

__all__ = ["MongoClient", "MongoFileRepository", "MongoStorageRepository"]
