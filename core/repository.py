import json
import logging
from typing import Any, Dict, Optional

from .exceptions import StorageError
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class StateRepository:
    """Typed access to the key-value store.

    Every read failure (missing key, malformed JSON, unavailable backend) is a
    cache miss: callers get ``None`` or ``False`` and fall back to defaults.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except StorageError as e:
            logger.error(f"Store read failed for {key}: {e}")
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
            return True
        except StorageError as e:
            logger.error(f"Store write failed for {key}: {e}")
            return False

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            record = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Ignoring malformed value stored under {key}: {e}")
            return None
        if not isinstance(record, dict):
            logger.warning(f"Ignoring non-object value stored under {key}")
            return None
        return record

    def save(self, key: str, record: Dict[str, Any]) -> bool:
        logger.debug(f"Saving {key}")
        return self._write(key, json.dumps(record))

    def load_flag(self, key: str) -> bool:
        return self._read(key) == "true"

    def save_flag(self, key: str, value: bool) -> bool:
        return self._write(key, "true" if value else "false")

    def delete(self, key: str) -> None:
        try:
            self.store.delete(key)
        except StorageError as e:
            logger.error(f"Store delete failed for {key}: {e}")
