"""Persistence layer for SmartReply.

Provides a key-value storage interface and implementations for:
- In-process dictionaries (tests, development)
- JSON files on disk
- SQLite
- Redis
"""

from smartreply.persistence.file_backend import FileBackend
from smartreply.persistence.interface import KeyValueBackend, create_backend
from smartreply.persistence.memory_backend import InMemoryBackend
from smartreply.persistence.redis_backend import RedisBackend
from smartreply.persistence.sqlite_backend import SQLiteBackend

__all__ = [
    "KeyValueBackend",
    "create_backend",
    "InMemoryBackend",
    "FileBackend",
    "SQLiteBackend",
    "RedisBackend",
]
