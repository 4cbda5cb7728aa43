"""
Access/create telemetry pipeline.

Request context extraction, positional slot schema, record codec and the
event logger that writes to the analytics sink.
"""

from .schema import Channel, SchemaRegistry, DEFAULT_REGISTRY, slot_ordinal
from .codec import encode_blobs, encode_doubles, decode_blobs, decode_doubles, encode, decode
from .models import EventType, EventRecord, LinkContext, DataPoint, StoredDataPoint
from .useragent import UserAgentInfo, parse_user_agent
from .context import RequestContext, ConnectionProperties, extract_request_context, build_event_record
from .event_logger import EventLogger

__all__ = [
    "Channel",
    "SchemaRegistry",
    "DEFAULT_REGISTRY",
    "slot_ordinal",
    "encode_blobs",
    "encode_doubles",
    "decode_blobs",
    "decode_doubles",
    "encode",
    "decode",
    "EventType",
    "EventRecord",
    "LinkContext",
    "DataPoint",
    "StoredDataPoint",
    "UserAgentInfo",
    "parse_user_agent",
    "RequestContext",
    "ConnectionProperties",
    "extract_request_context",
    "build_event_record",
    "EventLogger",
]
