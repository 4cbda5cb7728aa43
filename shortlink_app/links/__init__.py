"""
Link store module.
Implements Strategy Pattern for resolving slugs to links.
"""

from .strategies import LinkStore, RedisLinkStore, InMemoryLinkStore
from .factory import LinkStoreFactory, LinkStoreBackend

__all__ = [
    "LinkStore",
    "RedisLinkStore",
    "InMemoryLinkStore",
    "LinkStoreFactory",
    "LinkStoreBackend",
]
