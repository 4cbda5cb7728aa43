from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4

from pydantic import BaseModel, HttpUrl, Field, computed_field, ConfigDict
from shortlink_app.config import settings

SLUG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$"


class LinkCreate(BaseModel):
    """Request body for registering a short link (slug chosen by the client)"""
    url: HttpUrl = Field(..., description="The destination URL")
    slug: str = Field(..., pattern=SLUG_PATTERN, description="Path segment of the short link")


class Link(BaseModel):
    """Stored short link, also used as the API response

    `id` is the analytics partition key for every event of this link.
    """
    id: str = Field(default_factory=lambda: uuid4().hex)
    slug: str
    url: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field
    @property
    def short_url(self) -> str:
        return f"{settings.base_url}/{self.slug}"

    model_config = ConfigDict(from_attributes=True)


class LinkEvent(BaseModel):
    """One analytics event decoded back into named fields"""
    timestamp: datetime
    data: Dict[str, Any]


class LinkEvents(BaseModel):
    slug: str
    events: List[LinkEvent]


class LinkMetrics(BaseModel):
    slug: str
    field: str
    counts: Dict[str, int]
