"""FastAPI routes for event endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from portal.errors import PortalError, portal_error_to_http
from portal.models import Event, EventDraft, EventUpdate, Occurrence

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/events", tags=["events"])

# Global handler reference - set during startup
_event_handler = None


def set_event_handler(handler):
    """Set the event handler instance (called during startup)."""
    global _event_handler
    _event_handler = handler
    logger.info("[EventRouter] Handler injected successfully")


def get_handler():
    """Get the event handler, raising error if not initialized."""
    if _event_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _event_handler


def _to_http(e: Exception, operation: str) -> HTTPException:
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, PortalError):
        return portal_error_to_http(e)
    logger.error(f"[EventRouter] Error in {operation}: {e}")
    return HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "",
    response_model=list[Event],
    status_code=201,
    summary="Create event",
    description="Create a single event or a weekly-recurring series",
)
def create_events(
    draft: EventDraft,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> list[Event]:
    try:
        return get_handler().create_events(admin_email, venue_id, draft)
    except Exception as e:
        raise _to_http(e, "create_events")


@router.post(
    "/preview-occurrences",
    response_model=list[Occurrence],
    summary="Preview occurrences",
    description="Expand a weekly recurrence without creating events",
)
def preview_occurrences(
    draft: EventDraft,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> list[Occurrence]:
    try:
        return get_handler().preview_occurrences(admin_email, venue_id, draft)
    except Exception as e:
        raise _to_http(e, "preview_occurrences")


@router.get(
    "",
    response_model=list[Event],
    summary="List events",
    description="List events of the active venue in start order",
)
def list_events(
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> list[Event]:
    try:
        return get_handler().list_events(admin_email, venue_id)
    except Exception as e:
        raise _to_http(e, "list_events")


@router.get("/{event_id}", response_model=Event, summary="Get event")
def get_event(
    event_id: str,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> Event:
    try:
        return get_handler().get_event(admin_email, venue_id, event_id)
    except Exception as e:
        raise _to_http(e, "get_event")


@router.patch(
    "/{event_id}",
    response_model=Event,
    summary="Edit event occurrence",
    description="Edit a single occurrence; recurrence fields are not changed",
)
def update_event(
    event_id: str,
    update: EventUpdate,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> Event:
    try:
        return get_handler().update_event(admin_email, venue_id, event_id, update)
    except Exception as e:
        raise _to_http(e, "update_event")
