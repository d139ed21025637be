"""
Key-value store adapters.

The roadmap persists everything as string values under string keys, the same
shape a browser's local storage offers. Adapters here only move strings; JSON
encoding and the tolerance rules live in the repository.
"""

import logging
from typing import Dict, Optional

from pymongo.errors import PyMongoError

from .config import STORE_BACKEND, MONGO_URI, STATE_COLLECTION
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """String-keyed, string-valued synchronous store."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)

    def __len__(self):
        return len(self._data)


class MongoKeyValueStore(KeyValueStore):
    """One document per key: {"_id": key, "value": "<string>"}."""

    def __init__(self, collection):
        self.collection = collection

    def get(self, key: str) -> Optional[str]:
        try:
            doc = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e
        if not doc:
            return None
        return doc.get("value")

    def set(self, key: str, value: str) -> None:
        try:
            self.collection.update_one({"_id": key}, {"$set": {"value": value}}, upsert=True)
        except PyMongoError as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete {key!r}: {e}") from e


def get_store(backend: Optional[str] = None) -> KeyValueStore:
    """Build the configured store, falling back to memory when Mongo is unusable."""
    backend = (backend or STORE_BACKEND).lower()
    if backend == "mongo":
        if not MONGO_URI:
            logger.warning("STORE_BACKEND=mongo but MONGO_URI is not set; using in-memory store")
            return InMemoryStore()
        from .database import DatabaseConnection
        try:
            collection = DatabaseConnection().get_collection(STATE_COLLECTION)
        except StorageError as e:
            logger.error(f"MongoDB unavailable, using in-memory store: {e}")
            return InMemoryStore()
        return MongoKeyValueStore(collection)
    if backend != "memory":
        logger.warning(f"Unknown STORE_BACKEND {backend!r}; using in-memory store")
    return InMemoryStore()
