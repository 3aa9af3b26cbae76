"""Venue profile reads and dashboard edits."""
import logging

from portal.dao import RedisPortalDAO
from portal.errors import VenueNotFound
from portal.metrics import VENUE_UPDATES_TOTAL
from portal.models import AdminSession, VenueDetailsUpdate, VenueHoursUpdate, VenueProfile

logger = logging.getLogger(__name__)


class VenueService:
    """Reads and edits the profile of the session's venue."""

    def __init__(self, venue_dao: RedisPortalDAO):
        self.venue_dao = venue_dao

    def get_venue(self, session: AdminSession) -> VenueProfile:
        """Return the active venue's profile.

        Raises:
            VenueNotFound: no profile stored for the venue
        """
        venue = self.venue_dao.get_venue(session.venue_id)
        if venue is None:
            raise VenueNotFound(f"Venue {session.venue_id} not found.")
        return venue

    def update_details(self, session: AdminSession, update: VenueDetailsUpdate) -> VenueProfile:
        """Apply trimmed detail fields; fields left out keep their value."""
        venue = self.get_venue(session)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)

        updated = venue.model_copy(update=changes)
        self.venue_dao.set_venue(updated)

        VENUE_UPDATES_TOTAL.labels(section="details").inc()
        logger.info(
            f"[VenueService] Updated {sorted(changes)} for venue_id={session.venue_id} "
            f"by {session.admin_email}"
        )
        return updated

    def update_hours(self, session: AdminSession, update: VenueHoursUpdate) -> VenueProfile:
        """Replace the opening hours with the given non-blank lines."""
        venue = self.get_venue(session)

        updated = venue.model_copy(update={"hours": list(update.hours)})
        self.venue_dao.set_venue(updated)

        VENUE_UPDATES_TOTAL.labels(section="hours").inc()
        logger.info(
            f"[VenueService] Set {len(update.hours)} hours line(s) for venue_id={session.venue_id}"
        )
        return updated
