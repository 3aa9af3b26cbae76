"""FastAPI routes for the active venue's profile."""
import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from portal.errors import PortalError, portal_error_to_http
from portal.models import VenueDetailsUpdate, VenueHoursUpdate, VenueProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/venue", tags=["venue"])

# Global handler reference - set during startup
_venue_handler = None


def set_venue_handler(handler):
    """Set the venue handler instance (called during startup)."""
    global _venue_handler
    _venue_handler = handler
    logger.info("[VenueRouter] Handler injected successfully")


def get_handler():
    """Get the venue handler, raising error if not initialized."""
    if _venue_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _venue_handler


def _to_http(e: Exception, operation: str) -> HTTPException:
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, PortalError):
        return portal_error_to_http(e)
    logger.error(f"[VenueRouter] Error in {operation}: {e}")
    return HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=VenueProfile, summary="Get venue profile")
def get_venue(
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> VenueProfile:
    try:
        return get_handler().get_venue(admin_email, venue_id)
    except Exception as e:
        raise _to_http(e, "get_venue")


@router.patch(
    "",
    response_model=VenueProfile,
    summary="Edit venue details",
    description="Update address, contact links and listing details; values are trimmed",
)
def update_details(
    update: VenueDetailsUpdate,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> VenueProfile:
    try:
        return get_handler().update_details(admin_email, venue_id, update)
    except Exception as e:
        raise _to_http(e, "update_details")


@router.put(
    "/hours",
    response_model=VenueProfile,
    summary="Set venue hours",
    description="Replace opening hours; blank lines are dropped",
)
def update_hours(
    update: VenueHoursUpdate,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
    venue_id: Optional[str] = Header(None, alias="X-Venue-Id"),
) -> VenueProfile:
    try:
        return get_handler().update_hours(admin_email, venue_id, update)
    except Exception as e:
        raise _to_http(e, "update_hours")
