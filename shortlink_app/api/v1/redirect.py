from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import RedirectResponse
from shortlink_app.config import Settings, get_settings
from shortlink_app.dependencies import get_link_store, get_event_logger
from shortlink_app.links.strategies import LinkStore
from shortlink_app.telemetry.event_logger import EventLogger
from shortlink_app.telemetry.models import LinkContext

router = APIRouter(tags=["redirect"])


@router.get("/{slug}")
async def redirect_to_url(
    slug: str,
    request: Request,
    link_store: LinkStore = Depends(get_link_store),
    event_logger: EventLogger = Depends(get_event_logger),
    app_settings: Settings = Depends(get_settings)
):
    """
    Redirect a short link to its destination.

    Flow:
    1. Resolve the slug from the link store
    2. Log the access event (detached sink write, not awaited)
    3. Redirect immediately
    """
    link = await link_store.get(slug)

    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )

    # Fire and forget - the redirect never waits for the analytics sink
    event_logger.log_access(request, LinkContext(id=link.id, slug=link.slug, url=link.url))

    return RedirectResponse(url=link.url, status_code=app_settings.redirect_status_code)
