"""
Test configuration and fixtures for the shortlink app.
This centralizes all test setup, making individual tests clean.
"""

from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient
from fastapi import Request

from main import app
from shortlink_app.config import Settings, get_settings
from shortlink_app.dependencies import get_link_store, get_sink
from shortlink_app.links.strategies import InMemoryLinkStore
from shortlink_app.sink.strategies import InMemoryAnalyticsSink


def make_request(
    headers: Optional[Dict[str, str]] = None,
    client: Optional[tuple] = ("198.51.100.23", 51234),
    cf: Optional[dict] = None,
    path: str = "/abc",
) -> Request:
    """
    Build a bare Starlette request from an ASGI scope.

    `cf` is attached as request.state.cf, the way an edge platform
    middleware would.
    """
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [(key.lower().encode("latin-1"), value.encode("latin-1")) for key, value in (headers or {}).items()],
        "client": client,
        "state": {},
    }
    if cf is not None:
        scope["state"]["cf"] = cf
    return Request(scope)


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture(scope="function")
def dev_settings():
    return Settings(environment="development", disable_bot_access_log=False)


@pytest.fixture(scope="function")
def prod_settings():
    return Settings(environment="production", disable_bot_access_log=False)


@pytest.fixture(scope="function")
def sink():
    """Fresh in-memory sink; written points are inspectable via sink.points"""
    return InMemoryAnalyticsSink()


@pytest.fixture(scope="function")
def link_store():
    return InMemoryLinkStore()


@pytest.fixture(scope="function")
def app_settings(prod_settings):
    """Settings served to the app; production so sink writes happen"""
    return prod_settings


@pytest.fixture(scope="function")
def client(sink, link_store, app_settings):
    """
    Create a test client with the sink, link store and settings overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_sink] = lambda: sink
    app.dependency_overrides[get_link_store] = lambda: link_store
    app.dependency_overrides[get_settings] = lambda: app_settings

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
