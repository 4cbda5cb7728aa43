"""
Tests for the link store strategies.
"""
import asyncio
from unittest.mock import MagicMock

import redis

from shortlink_app.links.factory import LinkStoreBackend, LinkStoreFactory
from shortlink_app.links.strategies import InMemoryLinkStore, RedisLinkStore
from shortlink_app.schemas.link import Link


class TestInMemoryLinkStore:

    def test_add_and_get(self):
        store = InMemoryLinkStore()
        link = Link(slug="abc12", url="https://example.com/")

        assert asyncio.run(store.add(link)) is True
        assert asyncio.run(store.get("abc12")) == link

    def test_slug_taken(self):
        store = InMemoryLinkStore()
        asyncio.run(store.add(Link(slug="abc12", url="https://example.com/")))

        assert asyncio.run(store.add(Link(slug="abc12", url="https://python.org/"))) is False

    def test_delete(self):
        store = InMemoryLinkStore()
        asyncio.run(store.add(Link(slug="abc12", url="https://example.com/")))

        assert asyncio.run(store.delete("abc12")) is True
        assert asyncio.run(store.delete("abc12")) is False
        assert asyncio.run(store.get("abc12")) is None


class TestRedisLinkStore:
    """Test the Redis strategy against a mocked client"""

    def test_get(self):
        link = Link(slug="abc12", url="https://example.com/")
        client = MagicMock()
        client.get.return_value = link.model_dump_json().encode("utf-8")

        result = asyncio.run(RedisLinkStore(client).get("abc12"))

        client.get.assert_called_once_with("link:abc12")
        assert result.id == link.id
        assert result.url == "https://example.com/"

    def test_add_uses_set_nx(self):
        client = MagicMock()
        client.set.return_value = None

        added = asyncio.run(RedisLinkStore(client).add(Link(slug="abc12", url="https://example.com/")))

        assert added is False
        assert client.set.call_args.kwargs["nx"] is True

    def test_redis_error(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")

        assert asyncio.run(RedisLinkStore(client).get("abc12")) is None

    def test_corrupt_value(self):
        client = MagicMock()
        client.get.return_value = b"{not json"

        assert asyncio.run(RedisLinkStore(client).get("abc12")) is None


class TestLinkStoreFactory:

    def setup_method(self):
        LinkStoreFactory.clear_instance()

    def teardown_method(self):
        LinkStoreFactory.clear_instance()

    def test_memory_backend(self):
        assert isinstance(LinkStoreFactory.create(LinkStoreBackend.MEMORY), InMemoryLinkStore)

    def test_redis_unavailable_falls_back(self, monkeypatch):
        """Test the in-memory fallback when Redis can't be reached"""
        client = MagicMock()
        client.ping.side_effect = redis.ConnectionError("refused")
        monkeypatch.setattr(redis, "from_url", lambda *args, **kwargs: client)

        assert isinstance(LinkStoreFactory.create(LinkStoreBackend.REDIS), InMemoryLinkStore)
