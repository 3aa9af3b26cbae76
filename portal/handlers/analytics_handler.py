"""Analytics handler for HTTP requests."""
import logging

from portal.models import AdminSession, VenueAnalytics
from portal.services import AnalyticsService, SessionService

logger = logging.getLogger(__name__)


class AnalyticsHandler:
    """Handler for venue analytics requests."""

    def __init__(self, session_service: SessionService, analytics_service: AnalyticsService):
        """Initialize analytics handler.

        Args:
            session_service: Resolves the admin session of a request
            analytics_service: Computes analytics views
        """
        self.session_service = session_service
        self.analytics_service = analytics_service

    def get_venue_analytics(self, admin_email: str, venue_id: str) -> VenueAnalytics:
        """Return the analytics view of a venue the admin manages.

        The venue in the path is the requested venue; an admin asking for a
        venue outside their assignment gets their first assigned venue.
        """
        session: AdminSession = self.session_service.resolve_session(admin_email, venue_id)
        logger.info(
            f"[AnalyticsHandler] GetVenueAnalytics: admin={session.admin_email}, "
            f"venue_id={session.venue_id}"
        )
        return self.analytics_service.get_venue_analytics(session)

    def ping(self) -> dict[str, str]:
        """Health check endpoint.

        Returns:
            {"status": "pong"}
        """
        logger.debug("[AnalyticsHandler] Ping")
        return {"status": "pong"}
