import logging
import time

import pymongo
from pymongo import MongoClient

from .config import MONGO_URI, DB_NAME
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class DatabaseConnection:
    _instance = None
    _client = None
    _db = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(DatabaseConnection, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._client:
            self._initialize_connection()

    def _initialize_connection(self, max_retries: int = 3) -> None:
        """Initialize MongoDB connection with retry logic."""
        for attempt in range(max_retries):
            try:
                self._client = MongoClient(MONGO_URI)
                # Test the connection
                self._client.admin.command('ping')
                self._db = self._client[DB_NAME]
                logger.info("MongoDB connection successful.")
                return
            except pymongo.errors.ConnectionFailure as e:
                logger.warning(f"Attempt {attempt + 1} failed: {e}")
                self._client = None
                if attempt < max_retries - 1:
                    time.sleep(2 ** attempt)  # Exponential backoff
                else:
                    raise StorageError("Failed to connect to MongoDB after multiple retries") from e

    @property
    def db(self):
        """Get the database instance."""
        if not self._client:
            self._initialize_connection()
        return self._db

    def get_collection(self, collection_name: str):
        """Get a specific collection."""
        return self.db[collection_name]

    def close(self):
        """Close the database connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
