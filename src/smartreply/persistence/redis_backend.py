"""Redis storage backend for SmartReply.

Stores JSON strings under plain Redis keys. Suitable when several
processes serve the same sessions.
"""

import json
from typing import Any, List, Optional

from redis import Redis
from redis.exceptions import RedisError

from smartreply.errors import PersistenceError
from smartreply.logging import get_logger
from smartreply.persistence.interface import KeyValueBackend

logger = get_logger(__name__, component="redis_backend")


class RedisBackend(KeyValueBackend):
    """Redis-based key-value storage.

    Args:
        redis_url: Connection URL, e.g. ``redis://localhost:6379/0``.
        client: Pre-built client; takes precedence over ``redis_url``.
        ttl_seconds: Optional expiry applied on every write.
    """

    name = "redis"

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        client: Optional[Redis] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self.ttl_seconds = ttl_seconds
        if client is None:
            logger.info("initializing_redis_single", url=redis_url)
            client = Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
                health_check_interval=30,
            )
        self._redis = client

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._redis.get(key)
        except RedisError as e:
            raise PersistenceError(str(e), operation="get", key=key) from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"Corrupt value: {e}", operation="get", key=key) from e

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value is not JSON-serializable: {e}", operation="set", key=key) from e
        try:
            self._redis.set(key, payload, ex=self.ttl_seconds)
        except RedisError as e:
            raise PersistenceError(str(e), operation="set", key=key) from e

    def delete(self, key: str) -> bool:
        try:
            return bool(self._redis.delete(key))
        except RedisError as e:
            raise PersistenceError(str(e), operation="delete", key=key) from e

    def keys(self, prefix: str = "") -> List[str]:
        try:
            return sorted(self._redis.scan_iter(match=f"{prefix}*"))
        except RedisError as e:
            raise PersistenceError(str(e), operation="keys") from e

    def close(self) -> None:
        logger.info("closing_redis_connection")
        try:
            self._redis.close()
        except RedisError as e:
            logger.warning("redis_close_failed", error=str(e))
