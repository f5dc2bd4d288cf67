"""
Key-value storage for snapshots, summaries and the summary queue.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import redis
import structlog

from ..core.config import settings
from ..core.exceptions import StorageError

logger = structlog.get_logger(__name__)


class KeyValueStore(ABC):
    """String-keyed storage with get/put/list semantics."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any prior value."""

    @abstractmethod
    def list_keys(self, prefix: str = "") -> List[str]:
        """List keys starting with ``prefix``."""

    def health_check(self) -> bool:
        return True


class RedisStore(KeyValueStore):
    """Redis-backed store."""

    def __init__(self,
                 host: Optional[str] = None,
                 port: Optional[int] = None,
                 password: Optional[str] = None,
                 db: Optional[int] = None,
                 client: Optional[redis.Redis] = None):
        if client is None:
            client = redis.Redis(
                host=host or settings.redis_host,
                port=port or settings.redis_port,
                password=password or settings.redis_password,
                db=db if db is not None else settings.redis_db,
                decode_responses=True
            )
        self.redis_client = client

    def get(self, key: str) -> Optional[str]:
        try:
            return self.redis_client.get(key)
        except redis.RedisError as e:
            logger.error("Failed to read key", key=key, error=str(e))
            raise StorageError(f"Failed to read {key}: {e}") from e

    def put(self, key: str, value: str) -> None:
        try:
            self.redis_client.set(key, value)
        except redis.RedisError as e:
            logger.error("Failed to write key", key=key, error=str(e))
            raise StorageError(f"Failed to write {key}: {e}") from e

    def list_keys(self, prefix: str = "") -> List[str]:
        try:
            return sorted(self.redis_client.scan_iter(match=f"{prefix}*", count=100))
        except redis.RedisError as e:
            logger.error("Failed to list keys", prefix=prefix, error=str(e))
            raise StorageError(f"Failed to list keys under {prefix!r}: {e}") from e

    def health_check(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            logger.error("Redis health check failed", error=str(e))
            return False


class MemoryStore(KeyValueStore):
    """In-process store for local runs and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def list_keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))


def build_store(config=None) -> KeyValueStore:
    """Create the store named by ``config.store_backend``."""
    config = config or settings
    backend = config.store_backend.lower()
    if backend == "redis":
        return RedisStore(
            host=config.redis_host,
            port=config.redis_port,
            password=config.redis_password,
            db=config.redis_db,
        )
    if backend == "memory":
        logger.warning("Using in-memory store, data will not survive restarts")
        return MemoryStore()
    raise ValueError(f"Unknown store backend: {config.store_backend}")
