"""Venue profile handler for HTTP requests."""
import logging
from typing import Optional

from portal.models import VenueDetailsUpdate, VenueHoursUpdate, VenueProfile
from portal.services import SessionService, VenueService

logger = logging.getLogger(__name__)


class VenueHandler:
    """Handler for venue profile requests on the active venue."""

    def __init__(self, session_service: SessionService, venue_service: VenueService):
        self.session_service = session_service
        self.venue_service = venue_service

    def get_venue(self, admin_email: str, venue_id: Optional[str]) -> VenueProfile:
        session = self.session_service.resolve_session(admin_email, venue_id)
        return self.venue_service.get_venue(session)

    def update_details(
        self, admin_email: str, venue_id: Optional[str], update: VenueDetailsUpdate
    ) -> VenueProfile:
        session = self.session_service.resolve_session(admin_email, venue_id)
        logger.info(f"[VenueHandler] UpdateDetails: venue_id={session.venue_id}")
        return self.venue_service.update_details(session, update)

    def update_hours(
        self, admin_email: str, venue_id: Optional[str], update: VenueHoursUpdate
    ) -> VenueProfile:
        session = self.session_service.resolve_session(admin_email, venue_id)
        logger.info(f"[VenueHandler] UpdateHours: venue_id={session.venue_id}")
        return self.venue_service.update_hours(session, update)
