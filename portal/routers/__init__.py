"""Routers package."""
from portal.routers.analytics_router import router as analytics_router, set_analytics_handler
from portal.routers.event_router import router as event_router, set_event_handler
from portal.routers.venue_router import router as venue_router, set_venue_handler

__all__ = [
    "analytics_router",
    "set_analytics_handler",
    "event_router",
    "set_event_handler",
    "venue_router",
    "set_venue_handler",
]
