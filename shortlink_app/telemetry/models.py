"""
Data models for telemetry events and sink payloads.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Event kind discriminator stored in the event_type slot"""
    ACCESS = "access"
    CREATE = "create"


class LinkContext(BaseModel):
    """
    Link metadata from the link-resolution collaborator.

    `id` is only used as the sink's partition key, never stored as a slot.
    """

    id: Optional[str] = None
    slug: Optional[str] = None
    url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EventRecord(BaseModel):
    """
    Named record handed to the encoder.

    One field per blob/double slot. Text fields stay None when the request
    did not provide them; the encoder turns those into "".
    """

    slug: Optional[str] = None
    url: Optional[str] = None
    ua: Optional[str] = None
    ip: Optional[str] = None
    referer: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    timezone: Optional[str] = None
    language: Optional[str] = None
    os: Optional[str] = None
    browser: Optional[str] = None
    browser_type: Optional[str] = None
    device: Optional[str] = None
    device_type: Optional[str] = None
    colo: Optional[str] = None
    event_type: EventType

    # For the realtime globe
    latitude: float = 0.0
    longitude: float = 0.0

    model_config = ConfigDict(frozen=True)


class DataPoint(BaseModel):
    """Payload of one analytics sink write"""

    indexes: List[str] = Field(..., min_length=1, max_length=1, description="Partition key (link id)")
    blobs: List[str] = Field(default_factory=list)
    doubles: List[float] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "indexes": ["q3v9x0tbd1f5"],
                "blobs": ["abc12", "https://example.com/", "Mozilla/5.0", "203.0.113.7"],
                "doubles": [35.6895, 139.6917],
            }
        }
    )


class StoredDataPoint(BaseModel):
    """A data point read back from a sink"""

    timestamp: datetime
    index: str
    blobs: List[str]
    doubles: List[float]
