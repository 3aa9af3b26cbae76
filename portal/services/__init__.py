"""Services package."""
from portal.services.analytics_service import AnalyticsService
from portal.services.event_service import EventService
from portal.services.session_service import SessionService
from portal.services.venue_service import VenueService

__all__ = ["AnalyticsService", "EventService", "SessionService", "VenueService"]
