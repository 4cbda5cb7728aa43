"""
Request context extraction.

Derives everything the event record needs from one inbound request:
client IP, referrer host, preferred language, parsed user agent and the
geolocation bundle the edge platform attached to the connection.

Every step has a fallback chain and degrades to None instead of raising,
so telemetry can never break the request it describes.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional
from urllib.parse import urlsplit

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from fastapi import Request

from shortlink_app.config import Settings
from shortlink_app.telemetry.geo import place_label
from shortlink_app.telemetry.models import EventRecord, EventType, LinkContext
from shortlink_app.telemetry.useragent import CRAWLER, FETCHER, UserAgentInfo, parse_user_agent

log = structlog.get_logger()

_BOT_BROWSER_TYPES = (CRAWLER, FETCHER)
_BOT_NAME_MARKERS = ("spider", "bot")

_LANGUAGE_TAG = re.compile(r"^[A-Za-z]{1,8}(?:-[A-Za-z0-9]{1,8})*$")


class ConnectionProperties(BaseModel):
    """
    Geolocation and bot signal attached by the edge platform.

    Accepts the Cloudflare `request.cf` shape, including the nested
    `botManagement.verifiedBot` flag.
    """

    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    timezone: Optional[str] = None
    colo: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    verified_bot: bool = False

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @classmethod
    def from_platform(cls, data: Mapping[str, Any]) -> "ConnectionProperties":
        """Validate a platform `cf` object, lifting botManagement.verifiedBot"""
        bot_management = data.get("botManagement")
        if "verified_bot" not in data and isinstance(bot_management, dict):
            data = {**data, "verified_bot": bool(bot_management.get("verifiedBot"))}
        return cls.model_validate(data)

    @classmethod
    def from_headers(cls, request: Request) -> "ConnectionProperties":
        """Build the bundle from Cloudflare visitor-location headers"""
        headers = request.headers
        # cf-ray ends with the colo id, e.g. "8a1b2c3d4e5f6a7b-SJC"
        ray_id, _, colo = (headers.get("cf-ray") or "").rpartition("-")
        return cls(
            country=headers.get("cf-ipcountry"),
            region=headers.get("cf-region"),
            city=headers.get("cf-ipcity"),
            timezone=headers.get("cf-timezone"),
            colo=colo if ray_id and colo else None,
        )


@dataclass
class RequestContext:
    """Normalized, per-request view used to assemble an event record"""

    user_agent: str = ""
    ip: Optional[str] = None
    referer: Optional[str] = None
    language: Optional[str] = None
    ua: UserAgentInfo = field(default_factory=UserAgentInfo)
    cf: ConnectionProperties = field(default_factory=ConnectionProperties)
    latitude: float = 0.0
    longitude: float = 0.0

    @property
    def is_bot(self) -> bool:
        """
        Bot verdict.

        True when the platform verified a bot, the browser is classified as
        a crawler/fetcher, or its name contains a spider/bot marker.
        """
        if self.cf.verified_bot:
            return True
        if self.ua.browser_type in _BOT_BROWSER_TYPES:
            return True
        name = (self.ua.browser or "").lower()
        return any(marker in name for marker in _BOT_NAME_MARKERS)


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def get_client_ip(request: Request, trust_forwarded_for: bool = True) -> Optional[str]:
    """Platform connecting IP, then X-Real-IP, then the transport peer"""
    headers = request.headers
    ip = headers.get("cf-connecting-ip") or headers.get("x-real-ip")
    if ip:
        return ip.strip()

    if trust_forwarded_for:
        forwarded = headers.get("x-forwarded-for", "").split(",")[0].strip()
        if forwarded:
            return forwarded

    return request.client.host if request.client else None


def get_referer_host(referer: Optional[str]) -> Optional[str]:
    """
    Host (with port, without credentials) of a Referer header.

    Examples:
        >>> get_referer_host("https://news.ycombinator.com/item?id=1")
        'news.ycombinator.com'
        >>> get_referer_host(None) is None
        True
    """
    if not referer:
        return None
    try:
        netloc = urlsplit(referer.strip()).netloc
    except ValueError:
        return None
    host = netloc.rpartition("@")[2]
    return host or None


def _canonical_tag(tag: str) -> str:
    parts = tag.split("-")
    canonical = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 2:
            canonical.append(part.upper())
        elif len(part) == 4:
            canonical.append(part.title())
        else:
            canonical.append(part.lower())
    return "-".join(canonical)


def parse_accept_language(header: Optional[str]) -> List[str]:
    """
    Rank the tags of an Accept-Language header by quality weight.

    Ties keep header order. Wildcards, q=0 entries, malformed tags and
    weights outside 0..1 (including nan and inf) are dropped.

    Examples:
        >>> parse_accept_language("fr;q=0.8, en-us, *;q=0.1")
        ['en-US', 'fr']
    """
    if not header:
        return []

    ranked = []
    for position, item in enumerate(header.split(",")):
        tag, _, params = item.strip().partition(";")
        tag = tag.strip().replace("_", "-")
        if not tag or tag == "*" or not _LANGUAGE_TAG.match(tag):
            continue

        quality = 1.0
        for param in params.split(";"):
            key, _, value = param.strip().partition("=")
            if key.strip().lower() == "q":
                weight = _to_float(value.strip())
                quality = weight if weight is not None and 0 <= weight <= 1 else 0.0
        if quality <= 0:
            continue

        ranked.append((-quality, position, _canonical_tag(tag)))

    ranked.sort()
    return [tag for _, _, tag in ranked]


def get_connection_properties(request: Request) -> ConnectionProperties:
    """Platform-attached bundle from request.state.cf, else geo headers"""
    cf = getattr(request.state, "cf", None)
    if cf is None:
        return ConnectionProperties.from_headers(request)
    if isinstance(cf, ConnectionProperties):
        return cf
    try:
        if isinstance(cf, Mapping):
            return ConnectionProperties.from_platform(cf)
        return ConnectionProperties.model_validate(cf)
    except ValidationError as e:
        log.warning("Malformed connection properties ignored", error=str(e))
        return ConnectionProperties()


def extract_request_context(request: Request, settings: Settings) -> RequestContext:
    """
    Build the normalized context for one request.

    Never raises: missing headers, malformed values and absent platform
    data all degrade to None (or 0.0 for coordinates).
    """
    headers = request.headers
    user_agent = headers.get("user-agent") or ""
    languages = parse_accept_language(headers.get("accept-language"))
    cf = get_connection_properties(request)

    latitude = _to_float(cf.latitude)
    if latitude is None:
        latitude = _to_float(headers.get("cf-iplatitude"))
    longitude = _to_float(cf.longitude)
    if longitude is None:
        longitude = _to_float(headers.get("cf-iplongitude"))

    return RequestContext(
        user_agent=user_agent,
        ip=get_client_ip(request, settings.trust_forwarded_for),
        referer=get_referer_host(headers.get("referer")),
        language=languages[0] if languages else None,
        ua=parse_user_agent(user_agent),
        cf=cf,
        latitude=latitude or 0.0,
        longitude=longitude or 0.0,
    )


def build_event_record(
    context: RequestContext,
    link: LinkContext,
    event_type: EventType,
    locale: str = "en",
) -> EventRecord:
    """Combine link metadata and request context into one event record"""
    cf = context.cf
    return EventRecord(
        slug=link.slug,
        url=link.url,
        ua=context.user_agent,
        ip=context.ip,
        referer=context.referer,
        country=cf.country,
        region=place_label(cf.country, cf.region, locale),
        city=place_label(cf.country, cf.city, locale),
        timezone=cf.timezone,
        language=context.language,
        os=context.ua.os,
        browser=context.ua.browser,
        browser_type=context.ua.browser_type,
        device=context.ua.device,
        device_type=context.ua.device_type,
        colo=cf.colo,
        event_type=event_type,
        latitude=context.latitude,
        longitude=context.longitude,
    )
