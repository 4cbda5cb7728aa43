from fastapi import APIRouter, Depends, HTTPException, Query, status
from shortlink_app.schemas.link import Link, LinkEvent, LinkEvents, LinkMetrics
from shortlink_app.dependencies import get_link_store, get_sink
from shortlink_app.links.strategies import LinkStore
from shortlink_app.sink.strategies import AnalyticsSink
from shortlink_app.telemetry.codec import decode
from shortlink_app.telemetry.schema import Channel

router = APIRouter(prefix="/stats", tags=["stats"])


async def _resolve(slug: str, link_store: LinkStore) -> Link:
    link = await link_store.get(slug)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )
    return link


@router.get("/{slug}/events", response_model=LinkEvents)
async def get_link_events(
    slug: str,
    limit: int = Query(100, ge=1, le=1000),
    link_store: LinkStore = Depends(get_link_store),
    sink: AnalyticsSink = Depends(get_sink)
):
    """Recent events of a link, decoded from the positional slots"""
    link = await _resolve(slug, link_store)
    points = await sink.read_data_points(link.id, limit=limit)

    return LinkEvents(
        slug=slug,
        events=[
            LinkEvent(timestamp=point.timestamp, data=decode(point.blobs, point.doubles, sink.registry))
            for point in points
        ]
    )


@router.get("/{slug}/metrics", response_model=LinkMetrics)
async def get_link_metrics(
    slug: str,
    field: str = Query("country", description="Text field to group by, e.g. country, browser, os"),
    link_store: LinkStore = Depends(get_link_store),
    sink: AnalyticsSink = Depends(get_sink)
):
    """Event counts of a link grouped by one text field"""
    if not sink.registry.has_field(Channel.BLOB, field):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown field: {field}"
        )

    link = await _resolve(slug, link_store)
    slot = sink.registry.field_to_slot(Channel.BLOB, field)
    counts = await sink.count_by(link.id, slot)

    return LinkMetrics(slug=slug, field=field, counts=counts)
