"""
Factory for creating cache instances.
"""

import logging
from enum import Enum

import redis

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from shortener_app.config import Settings

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """Simple factory for creating cache instances."""

    @staticmethod
    def create(backend: CacheBackend, settings: Settings) -> CacheStrategy:
        """
        Create a cache instance.

        An unreachable Redis falls back to the in-memory cache so the
        service still starts.

        Args:
            backend: Type of cache backend (from enum)
            settings: Application settings (Redis URL)

        Returns:
            Cache instance
        """
        if backend == CacheBackend.REDIS:
            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )

                # Test connection immediately
                redis_client.ping()

                logger.info("Redis cache initialized")
                return RedisCache(redis_client)

            except redis.RedisError as e:
                logger.warning("Redis connection failed (%s), falling back to in-memory cache", e)
                return InMemoryCache()

        elif backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache()

        elif backend == CacheBackend.NULL:
            logger.info("Null cache initialized")
            return NullCache()

        raise ValueError(f"Unknown cache backend: {backend}")
