"""
Factory for creating analytics sink instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum

import structlog

from .strategies import AnalyticsSink, InMemoryAnalyticsSink, SQLiteAnalyticsSink, ClickHouseAnalyticsSink
from shortlink_app.config import settings

log = structlog.get_logger()


class AnalyticsSinkBackend(Enum):
    """Available analytics sink backends"""
    MEMORY = "memory"
    SQLITE = "sqlite"
    CLICKHOUSE = "clickhouse"


class AnalyticsSinkFactory:
    """
    Simple factory for creating analytics sink instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: AnalyticsSink = None  # Single cached instance

    @classmethod
    def create(cls, backend: AnalyticsSinkBackend) -> AnalyticsSink:
        """
        Create or return cached analytics sink instance.

        Args:
            backend: Type of sink backend (from enum)

        Returns:
            Singleton analytics sink instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance

        if backend == AnalyticsSinkBackend.MEMORY:
            cls._instance = InMemoryAnalyticsSink()

        elif backend == AnalyticsSinkBackend.SQLITE:
            cls._instance = SQLiteAnalyticsSink(db_path=settings.analytics_sqlite_path)

        elif backend == AnalyticsSinkBackend.CLICKHOUSE:
            cls._instance = ClickHouseAnalyticsSink(
                url=settings.analytics_clickhouse_url,
                table=settings.analytics_clickhouse_table,
            )

        else:
            raise ValueError(f"Unknown analytics sink backend: {backend}")

        log.info("Analytics sink initialized", backend=backend.value)
        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
