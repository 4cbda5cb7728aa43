"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the analytics sink and link
store, and the event logger built on top of them.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override with in-memory strategies)
- Flexible (swap implementations via config)
"""

from functools import lru_cache

from fastapi import Depends

from shortlink_app.config import Settings, get_settings, settings
from shortlink_app.links.factory import LinkStoreFactory, LinkStoreBackend
from shortlink_app.links.strategies import LinkStore
from shortlink_app.sink.factory import AnalyticsSinkFactory, AnalyticsSinkBackend
from shortlink_app.sink.strategies import AnalyticsSink
from shortlink_app.telemetry.event_logger import EventLogger


@lru_cache()
def get_sink() -> AnalyticsSink:
    """
    Get analytics sink instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = AnalyticsSinkBackend(settings.analytics_backend)
    return AnalyticsSinkFactory.create(backend)


@lru_cache()
def get_link_store() -> LinkStore:
    """Get link store instance (singleton)"""
    backend = LinkStoreBackend(settings.link_store_backend)
    return LinkStoreFactory.create(backend)


def get_event_logger(
    sink: AnalyticsSink = Depends(get_sink),
    app_settings: Settings = Depends(get_settings),
) -> EventLogger:
    """
    Get EventLogger with its sink and settings injected.

    Cheap to build per request: it holds no state of its own.
    """
    return EventLogger(sink=sink, settings=app_settings)
