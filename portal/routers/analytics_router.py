"""FastAPI routes for venue analytics endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from portal.errors import PortalError, portal_error_to_http
from portal.models import VenueAnalytics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analytics"])

# Global handler reference - set during startup
_analytics_handler = None


def set_analytics_handler(handler):
    """Set the analytics handler instance (called during startup)."""
    global _analytics_handler
    _analytics_handler = handler
    logger.info("[AnalyticsRouter] Handler injected successfully")


def get_handler():
    """Get the analytics handler, raising error if not initialized."""
    if _analytics_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _analytics_handler


@router.get(
    "/v1/venues/{venue_id}/analytics",
    response_model=VenueAnalytics,
    summary="Get venue analytics",
    description="Attendance, vibe vote and review rollups for a venue",
)
def get_venue_analytics(
    venue_id: str,
    admin_email: Optional[str] = Header(None, alias="X-Admin-Email"),
) -> VenueAnalytics:
    """Get the analytics view of a venue."""
    try:
        handler = get_handler()
        return handler.get_venue_analytics(admin_email, venue_id)
    except HTTPException:
        raise
    except PortalError as e:
        raise portal_error_to_http(e)
    except Exception as e:
        logger.error(f"[AnalyticsRouter] Error in get_venue_analytics: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/ping",
    summary="Health check",
    description="Health check endpoint",
)
def ping() -> dict[str, str]:
    """Health check endpoint."""
    handler = get_handler()
    return handler.ping()
