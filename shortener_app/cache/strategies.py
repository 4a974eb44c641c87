"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

Only redirect lookups (short name -> target URL) are cached. Links never
change after creation, so entries only go stale when a user deletion
removes links, and the link service invalidates those explicitly.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis

logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    Cache failures never fail a request: implementations log and report a
    miss (or False) instead of raising.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (default: 1 hour)

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if deleted, False if key didn't exist
        """
        pass

    def close(self) -> None:
        """Release backend resources (no-op by default)"""


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Shared between all server processes, so invalidation after a user
    deletion is seen everywhere.
    """

    def __init__(self, redis_client: redis.Redis):
        """
        Initialize Redis cache.

        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            return value.decode("utf-8") if value else None
        except redis.RedisError as e:
            logger.warning("Redis get error: %s", e)
            return None

    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except redis.RedisError as e:
            logger.warning("Redis set error: %s", e)
            return False

    def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(key))
        except redis.RedisError as e:
            logger.warning("Redis delete error: %s", e)
            return False

    def close(self) -> None:
        self.redis.close()


class InMemoryCache(CacheStrategy):
    """
    In-memory cache implementation using Python dict.

    Per-process only, and TTL is ignored. Fine for development and a single
    server process.
    """

    def __init__(self):
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._cache.get(key)

    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        with self._lock:
            self._cache[key] = value
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    The default: every redirect goes to the store.
    """

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True

    def delete(self, key: str) -> bool:
        return True
