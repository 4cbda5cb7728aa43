"""
Access/create event logging.

Turns a request plus link metadata into one analytics data point:

1. Extract the request context
2. Apply the bot policy (access events only)
3. Assemble the named event record
4. Encode it into blobs/doubles and write it to the sink

In production the sink write runs as a detached task: the request path
never waits for it and nothing here catches or retries a failed write.
Outside production nothing is written; the record, its encoded arrays and
their decoded round-trip go to the log instead.
"""

import asyncio
from typing import TYPE_CHECKING, Optional, Set

import structlog
from fastapi import Request

from shortlink_app.config import Settings
from shortlink_app.telemetry.codec import decode, encode_blobs, encode_doubles
from shortlink_app.telemetry.context import build_event_record, extract_request_context
from shortlink_app.telemetry.models import DataPoint, EventRecord, EventType, LinkContext
from shortlink_app.telemetry.schema import DEFAULT_REGISTRY, SchemaRegistry

if TYPE_CHECKING:
    from shortlink_app.sink.strategies import AnalyticsSink

log = structlog.get_logger()

# Strong references to in-flight writes; the event loop only keeps weak ones.
_pending_writes: Set[asyncio.Task] = set()


class EventLogger:
    """
    Logs access and create events to the analytics sink.

    Stateless apart from its collaborators, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(
        self,
        sink: "AnalyticsSink",
        settings: Settings,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
    ):
        """
        Args:
            sink: Analytics sink receiving the data points
            settings: Runtime settings (environment, bot policy, locale)
            registry: Slot schema used for encoding
        """
        self.sink = sink
        self.settings = settings
        self.registry = registry

    def log_access(self, request: Request, link: LinkContext) -> Optional[asyncio.Task]:
        """
        Log a visit/redirect of a short link.

        Returns the pending sink write, or None when nothing was written
        (bot suppressed, or not running in production).
        """
        context = extract_request_context(request, self.settings)

        if context.is_bot and self.settings.disable_bot_access_log:
            log.info("bot access log disabled", user_agent=context.user_agent)
            return None

        record = build_event_record(context, link, EventType.ACCESS, self.settings.display_locale)
        return self._dispatch(link, record)

    def log_create(self, request: Request, link: LinkContext) -> Optional[asyncio.Task]:
        """Log the creation of a short link; never bot-suppressed"""
        context = extract_request_context(request, self.settings)
        record = build_event_record(context, link, EventType.CREATE, self.settings.display_locale)
        return self._dispatch(link, record)

    def _dispatch(self, link: LinkContext, record: EventRecord) -> Optional[asyncio.Task]:
        blobs = encode_blobs(record, self.registry)
        doubles = encode_doubles(record, self.registry)

        if self.settings.is_production:
            point = DataPoint(indexes=[link.id or ""], blobs=blobs, doubles=doubles)
            return self._spawn(self.sink.write_data_point(point))

        log.info(
            f"{record.event_type.value} logs",
            record=record.model_dump(mode="json"),
            blobs=blobs,
            doubles=doubles,
            decoded=decode(blobs, doubles, self.registry),
        )
        return None

    @staticmethod
    def _spawn(write) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(write)
        _pending_writes.add(task)
        task.add_done_callback(_pending_writes.discard)
        return task
