"""Abstract key-value storage interface for SmartReply persistence.

Memory state is stored as JSON-serializable values under string keys.
Every backend reports failures as PersistenceError so callers handle a
single exception type regardless of the storage engine.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from smartreply.config import StorageConfig


class KeyValueBackend(ABC):
    """Abstract base class for storage backends.

    Values passed to :meth:`set` must be JSON-serializable.
    """

    name = "abstract"

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Retrieve a value.

        Args:
            key: Storage key.

        Returns:
            The stored value, or None if the key is absent.

        Raises:
            PersistenceError: On storage failure.
        """

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one.

        Raises:
            PersistenceError: On storage failure.
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            True if deleted, False if not found.

        Raises:
            PersistenceError: On storage failure.
        """

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with prefix, sorted."""

    def close(self) -> None:
        """Release resources held by the backend."""

    def __enter__(self) -> "KeyValueBackend":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def create_backend(config: Optional[StorageConfig] = None) -> KeyValueBackend:
    """Build the backend selected by a StorageConfig.

    Args:
        config: Storage configuration; defaults to the in-memory backend.

    Returns:
        A ready-to-use backend instance.

    Raises:
        ConfigurationError: If a required setting is missing.
    """
    from smartreply.errors import ConfigurationError
    from smartreply.persistence.file_backend import FileBackend
    from smartreply.persistence.memory_backend import InMemoryBackend
    from smartreply.persistence.sqlite_backend import SQLiteBackend

    config = config or StorageConfig()

    if config.backend == "memory":
        return InMemoryBackend()

    if config.backend == "file":
        if config.path is None:
            raise ConfigurationError("storage.path is required for the file backend")
        return FileBackend(config.path)

    if config.backend == "sqlite":
        if config.path is None:
            raise ConfigurationError("storage.path is required for the sqlite backend")
        return SQLiteBackend(config.path)

    if config.backend == "redis":
        from smartreply.persistence.redis_backend import RedisBackend

        return RedisBackend(config.redis_url or "redis://localhost:6379/0")

    raise ConfigurationError(f"Unknown storage backend: {config.backend}")
