"""
Analytics sink strategies using Strategy Pattern.

A sink stores data points in the positional layout: one index (the link
id), the blob1..N text slots and the double1..M numeric slots.

- InMemory: Development/testing
- SQLite: Single-node deployments and demos
- ClickHouse: Production (columnar, built for this shape of data)
"""

import asyncio
import json
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List

import requests
import structlog

from shortlink_app.exceptions import UnknownFieldError
from shortlink_app.telemetry.models import DataPoint, StoredDataPoint
from shortlink_app.telemetry.schema import Channel, DEFAULT_REGISTRY, SchemaRegistry

log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalyticsSink(ABC):
    """
    Abstract base class for analytics sinks.

    `write_data_point` is the only call on the request path. Errors are not
    swallowed: a failed write raises out of the caller's task, and
    durability is the sink's own concern.
    """

    def __init__(self, registry: SchemaRegistry = DEFAULT_REGISTRY):
        self.registry = registry

    @abstractmethod
    async def write_data_point(self, point: DataPoint) -> None:
        """
        Store one data point.

        Args:
            point: indexes (single link id), blobs and doubles
        """
        pass

    @abstractmethod
    async def read_data_points(self, index: str, limit: int = 100) -> List[StoredDataPoint]:
        """
        Read back the most recent data points for one index.

        Args:
            index: Link id the points were written under
            limit: Maximum number of points (newest first)
        """
        pass

    @abstractmethod
    async def count_by(self, index: str, slot: str) -> Dict[str, int]:
        """
        Count data points of one index grouped by a blob slot.

        Empty values are reported as "unknown".
        """
        pass

    def _check_blob_slot(self, slot: str) -> str:
        # Slot ids end up in SQL text, so only registered ones pass
        if slot not in self.registry.slots(Channel.BLOB):
            raise UnknownFieldError(Channel.BLOB.value, slot)
        return slot


class InMemoryAnalyticsSink(AnalyticsSink):
    """
    In-memory sink backed by a list.

    Not persistent and not shared between processes. Used in development
    and tests, where `points` can be inspected directly.
    """

    def __init__(self, registry: SchemaRegistry = DEFAULT_REGISTRY):
        super().__init__(registry)
        self.points: List[StoredDataPoint] = []

    async def write_data_point(self, point: DataPoint) -> None:
        self.points.append(
            StoredDataPoint(
                timestamp=_utcnow(),
                index=point.indexes[0],
                blobs=list(point.blobs),
                doubles=list(point.doubles),
            )
        )

    async def read_data_points(self, index: str, limit: int = 100) -> List[StoredDataPoint]:
        matching = [point for point in reversed(self.points) if point.index == index]
        return matching[:limit]

    async def count_by(self, index: str, slot: str) -> Dict[str, int]:
        position = self.registry.slots(Channel.BLOB).index(self._check_blob_slot(slot))
        counts: Dict[str, int] = {}
        for point in self.points:
            if point.index != index:
                continue
            value = point.blobs[position] if position < len(point.blobs) else ""
            key = value or "unknown"
            counts[key] = counts.get(key, 0) + 1
        return dict(sorted(counts.items(), key=lambda item: item[1], reverse=True))


class SQLiteAnalyticsSink(AnalyticsSink):
    """
    SQLite implementation of the sink.

    One `data_points` table with a column per slot. Columns for slots the
    table does not have yet are added on start-up, so appending a slot to
    the schema never touches rows already written.
    """

    def __init__(self, db_path: str = "analytics.db", registry: SchemaRegistry = DEFAULT_REGISTRY):
        """
        Initialize SQLite sink.

        Args:
            db_path: Path to SQLite database file
            registry: Slot schema defining the columns
        """
        super().__init__(registry)
        self.db_path = db_path
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_database(self):
        """Create the table and add any slot columns it is missing"""
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS data_points (
                    timestamp TEXT NOT NULL,
                    index1 TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_data_points_index1 ON data_points (index1, timestamp)")

            existing = {row[1] for row in conn.execute("PRAGMA table_info(data_points)")}
            added = []
            for slot in self.registry.slots(Channel.BLOB):
                if slot not in existing:
                    conn.execute(f"ALTER TABLE data_points ADD COLUMN {slot} TEXT NOT NULL DEFAULT ''")
                    added.append(slot)
            for slot in self.registry.slots(Channel.DOUBLE):
                if slot not in existing:
                    conn.execute(f"ALTER TABLE data_points ADD COLUMN {slot} REAL NOT NULL DEFAULT 0")
                    added.append(slot)

            conn.commit()
        finally:
            conn.close()

        if added:
            log.info("SQLite analytics columns added", db_path=self.db_path, columns=added)

    def _insert(self, point: DataPoint):
        blob_slots = self.registry.slots(Channel.BLOB)[:len(point.blobs)]
        double_slots = self.registry.slots(Channel.DOUBLE)[:len(point.doubles)]
        columns = ["timestamp", "index1", *blob_slots, *double_slots]
        values = [
            _utcnow().isoformat(),
            point.indexes[0],
            *point.blobs[:len(blob_slots)],
            *point.doubles[:len(double_slots)],
        ]

        conn = self._connect()
        try:
            conn.execute(
                f"INSERT INTO data_points ({', '.join(columns)}) VALUES ({', '.join('?' for _ in columns)})",
                values,
            )
            conn.commit()
        finally:
            conn.close()

    async def write_data_point(self, point: DataPoint) -> None:
        await asyncio.to_thread(self._insert, point)

    def _select(self, index: str, limit: int) -> List[StoredDataPoint]:
        blob_slots = self.registry.slots(Channel.BLOB)
        double_slots = self.registry.slots(Channel.DOUBLE)

        conn = self._connect()
        try:
            rows = conn.execute(
                f"""
                SELECT timestamp, index1, {', '.join(blob_slots + double_slots)}
                FROM data_points
                WHERE index1 = ?
                ORDER BY timestamp DESC, rowid DESC
                LIMIT ?
                """,
                (index, limit),
            ).fetchall()
        finally:
            conn.close()

        split = 2 + len(blob_slots)
        return [
            StoredDataPoint(
                timestamp=datetime.fromisoformat(row[0]),
                index=row[1],
                blobs=list(row[2:split]),
                doubles=list(row[split:]),
            )
            for row in rows
        ]

    async def read_data_points(self, index: str, limit: int = 100) -> List[StoredDataPoint]:
        return await asyncio.to_thread(self._select, index, limit)

    def _group(self, index: str, slot: str) -> Dict[str, int]:
        conn = self._connect()
        try:
            rows = conn.execute(
                f"""
                SELECT {slot}, COUNT(*) AS count
                FROM data_points
                WHERE index1 = ?
                GROUP BY {slot}
                ORDER BY count DESC
                """,
                (index,),
            ).fetchall()
        finally:
            conn.close()
        return {row[0] or "unknown": row[1] for row in rows}

    async def count_by(self, index: str, slot: str) -> Dict[str, int]:
        return await asyncio.to_thread(self._group, index, self._check_blob_slot(slot))


class ClickHouseAnalyticsSink(AnalyticsSink):
    """
    ClickHouse implementation using its HTTP interface.

    Table design:
    - MergeTree engine, partitioned by month
    - Ordered by (index1, timestamp) so per-link reads are range scans
    - One String column per blob slot, one Float64 column per double slot
    """

    def __init__(
        self,
        url: str = "http://localhost:8123",
        table: str = "shortlink.data_points",
        registry: SchemaRegistry = DEFAULT_REGISTRY,
        timeout: float = 5.0,
    ):
        """
        Initialize ClickHouse sink.

        Args:
            url: ClickHouse HTTP endpoint
            table: Fully qualified table name (database.table)
            registry: Slot schema defining the columns
            timeout: HTTP timeout in seconds
        """
        super().__init__(registry)
        self.url = url.rstrip("/")
        self.table = table
        self.timeout = timeout
        self._init_database()

    def _execute(self, query: str, data: str = None, params: Dict[str, str] = None) -> requests.Response:
        response = requests.post(
            f"{self.url}/",
            params={"query": query, **(params or {})},
            data=data.encode("utf-8") if data is not None else None,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def _init_database(self):
        """
        Create database and table if they don't exist.

        Slot columns missing from an existing table are added, the same
        schema evolution the SQLite sink does.
        """
        database = self.table.partition(".")[0] if "." in self.table else None
        slot_columns = (
            [f"{slot} String" for slot in self.registry.slots(Channel.BLOB)]
            + [f"{slot} Float64" for slot in self.registry.slots(Channel.DOUBLE)]
        )
        columns = ",\n".join(slot_columns)
        add_columns = ",\n".join(f"ADD COLUMN IF NOT EXISTS {column}" for column in slot_columns)

        try:
            if database:
                self._execute(f"CREATE DATABASE IF NOT EXISTS {database}")
            self._execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    timestamp DateTime,
                    index1 String,
                    {columns}
                )
                ENGINE = MergeTree()
                PARTITION BY toYYYYMM(timestamp)
                ORDER BY (index1, timestamp)
            """)
            self._execute(f"ALTER TABLE {self.table}\n{add_columns}")
            log.info("ClickHouse analytics sink initialized", table=self.table)

        except requests.RequestException as e:
            log.warning("ClickHouse initialization failed", table=self.table, error=str(e))

    def _insert(self, point: DataPoint):
        row = {
            "timestamp": _utcnow().strftime("%Y-%m-%d %H:%M:%S"),
            "index1": point.indexes[0],
            **dict(zip(self.registry.slots(Channel.BLOB), point.blobs)),
            **dict(zip(self.registry.slots(Channel.DOUBLE), point.doubles)),
        }
        self._execute(f"INSERT INTO {self.table} FORMAT JSONEachRow", data=json.dumps(row))

    async def write_data_point(self, point: DataPoint) -> None:
        await asyncio.to_thread(self._insert, point)

    def _select(self, index: str, limit: int) -> List[StoredDataPoint]:
        blob_slots = self.registry.slots(Channel.BLOB)
        double_slots = self.registry.slots(Channel.DOUBLE)
        response = self._execute(
            f"""
                SELECT timestamp, index1, {', '.join(blob_slots + double_slots)}
                FROM {self.table}
                WHERE index1 = {{index:String}}
                ORDER BY timestamp DESC
                LIMIT {{limit:UInt32}}
                FORMAT JSON
            """,
            params={"param_index": index, "param_limit": str(limit)},
        )

        return [
            StoredDataPoint(
                timestamp=datetime.fromisoformat(row["timestamp"]),
                index=row["index1"],
                blobs=[row[slot] for slot in blob_slots],
                doubles=[float(row[slot]) for slot in double_slots],
            )
            for row in response.json().get("data", [])
        ]

    async def read_data_points(self, index: str, limit: int = 100) -> List[StoredDataPoint]:
        return await asyncio.to_thread(self._select, index, limit)

    def _group(self, index: str, slot: str) -> Dict[str, int]:
        response = self._execute(
            f"""
                SELECT {slot} AS value, count() AS count
                FROM {self.table}
                WHERE index1 = {{index:String}}
                GROUP BY value
                ORDER BY count DESC
                FORMAT JSON
            """,
            params={"param_index": index},
        )
        return {
            row["value"] or "unknown": int(row["count"])
            for row in response.json().get("data", [])
        }

    async def count_by(self, index: str, slot: str) -> Dict[str, int]:
        return await asyncio.to_thread(self._group, index, self._check_blob_slot(slot))
