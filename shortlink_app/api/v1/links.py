from fastapi import APIRouter, Depends, HTTPException, status, Request
from shortlink_app.schemas.link import Link, LinkCreate
from shortlink_app.dependencies import get_link_store, get_event_logger
from shortlink_app.links.strategies import LinkStore
from shortlink_app.telemetry.event_logger import EventLogger
from shortlink_app.telemetry.models import LinkContext

router = APIRouter(prefix="/links", tags=["links"])


@router.post("/", response_model=Link, status_code=status.HTTP_201_CREATED)
async def create_link(
    link_data: LinkCreate,
    request: Request,
    link_store: LinkStore = Depends(get_link_store),
    event_logger: EventLogger = Depends(get_event_logger)
):
    """Register a short link and log the create event"""
    link = Link(slug=link_data.slug, url=str(link_data.url))

    if not await link_store.add(link):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Slug already exists"
        )

    event_logger.log_create(request, LinkContext(id=link.id, slug=link.slug, url=link.url))
    return link


@router.get("/{slug}", response_model=Link)
async def get_link(
    slug: str,
    link_store: LinkStore = Depends(get_link_store)
):
    """Get information about a short link"""
    link = await link_store.get(slug)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )
    return link
