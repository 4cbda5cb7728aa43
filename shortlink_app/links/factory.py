"""
Factory for creating link store instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum

import redis
import structlog

from .strategies import LinkStore, RedisLinkStore, InMemoryLinkStore
from shortlink_app.config import settings

log = structlog.get_logger()


class LinkStoreBackend(Enum):
    """Available link store backends"""
    REDIS = "redis"
    MEMORY = "memory"


class LinkStoreFactory:
    """
    Simple factory for creating link store instances.

    Uses Singleton Pattern - creates instance once, reuses it.
    Gets configuration from settings (not passed as parameters).
    """

    _instance: LinkStore = None  # Single cached instance

    @classmethod
    def create(cls, backend: LinkStoreBackend) -> LinkStore:
        """
        Create or return cached link store instance.

        Args:
            backend: Type of link store backend (from enum)

        Returns:
            Singleton link store instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance

        if backend == LinkStoreBackend.REDIS:
            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )

                # Test connection immediately
                redis_client.ping()

                cls._instance = RedisLinkStore(redis_client)
                log.info("Redis link store initialized")

            except redis.RedisError as e:
                log.warning("Redis connection failed, falling back to in-memory link store", error=str(e))
                cls._instance = InMemoryLinkStore()

        elif backend == LinkStoreBackend.MEMORY:
            cls._instance = InMemoryLinkStore()
            log.info("In-memory link store initialized")

        else:
            raise ValueError(f"Unknown link store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
