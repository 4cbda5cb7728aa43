"""
Link store strategies using Strategy Pattern.
Allows switching between link store backends (Redis, In-Memory).

The store only resolves slugs to links; slug generation is not its job.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis
import structlog
from pydantic import ValidationError

from shortlink_app.schemas.link import Link

log = structlog.get_logger()


class LinkStore(ABC):
    """
    Abstract base class for link stores.

    All methods are async because lookups involve I/O (network for Redis).
    """

    @abstractmethod
    async def get(self, slug: str) -> Optional[Link]:
        """
        Resolve a slug.

        Args:
            slug: Short link path segment

        Returns:
            The stored link or None if not found
        """
        pass

    @abstractmethod
    async def add(self, link: Link) -> bool:
        """
        Store a new link.

        Returns:
            True if stored, False if the slug is already taken
        """
        pass

    @abstractmethod
    async def delete(self, slug: str) -> bool:
        """
        Remove a link.

        Returns:
            True if deleted, False if the slug didn't exist
        """
        pass


class RedisLinkStore(LinkStore):
    """
    Redis link store.

    Links are JSON values under "link:<slug>". New links are written with
    SET NX so two concurrent creates cannot claim the same slug.
    """

    def __init__(self, redis_client):
        """
        Initialize Redis link store.

        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    @staticmethod
    def _key(slug: str) -> str:
        return f"link:{slug}"

    async def get(self, slug: str) -> Optional[Link]:
        try:
            value = self.redis.get(self._key(slug))
        except redis.RedisError as e:
            log.error("Redis get error", slug=slug, error=str(e))
            return None
        if not value:
            return None
        try:
            return Link.model_validate_json(value)
        except ValidationError as e:
            log.error("Stored link is corrupt", slug=slug, error=str(e))
            return None

    async def add(self, link: Link) -> bool:
        try:
            return bool(self.redis.set(self._key(link.slug), link.model_dump_json(), nx=True))
        except redis.RedisError as e:
            log.error("Redis set error", slug=link.slug, error=str(e))
            return False

    async def delete(self, slug: str) -> bool:
        try:
            return bool(self.redis.delete(self._key(slug)))
        except redis.RedisError as e:
            log.error("Redis delete error", slug=slug, error=str(e))
            return False


class InMemoryLinkStore(LinkStore):
    """
    In-memory link store using a dict.

    Not shared between processes and lost on restart.
    Used in development/testing environments.
    """

    def __init__(self):
        self._links: Dict[str, Link] = {}

    async def get(self, slug: str) -> Optional[Link]:
        return self._links.get(slug)

    async def add(self, link: Link) -> bool:
        if link.slug in self._links:
            return False
        self._links[link.slug] = link
        return True

    async def delete(self, slug: str) -> bool:
        return self._links.pop(slug, None) is not None
