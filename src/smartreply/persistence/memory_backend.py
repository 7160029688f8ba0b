"""In-memory storage backend for SmartReply.

Provides a simple in-memory storage implementation for testing and development.
"""

import copy
import json
from threading import Lock
from typing import Any, Dict, List, Optional

from smartreply.errors import PersistenceError
from smartreply.persistence.interface import KeyValueBackend


class InMemoryBackend(KeyValueBackend):
    """Dictionary-backed storage. Data is not persisted.

    Values are checked for JSON compatibility on write so the backend
    behaves like the durable ones.
    """

    name = "memory"

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            value = self._data.get(key)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        try:
            json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value is not JSON-serializable: {e}", operation="set", key=key) from e
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))

    def close(self) -> None:
        with self._lock:
            self._data.clear()
