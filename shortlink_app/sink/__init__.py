"""
Analytics sink module.

Implements the Strategy Pattern for the sink that receives positional
data points (one index, blob slots, double slots).
"""

from .strategies import AnalyticsSink, InMemoryAnalyticsSink, SQLiteAnalyticsSink, ClickHouseAnalyticsSink
from .factory import AnalyticsSinkFactory, AnalyticsSinkBackend

__all__ = [
    "AnalyticsSink",
    "InMemoryAnalyticsSink",
    "SQLiteAnalyticsSink",
    "ClickHouseAnalyticsSink",
    "AnalyticsSinkFactory",
    "AnalyticsSinkBackend",
]
