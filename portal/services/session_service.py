"""Resolve which venue an admin is acting on for a request."""
import logging
from typing import Optional

from portal.dao import RedisPortalDAO
from portal.errors import SessionError, VenueSelectionRequired
from portal.models import AdminSession

logger = logging.getLogger(__name__)


class SessionService:
    """Builds explicit AdminSession objects from request identity."""

    def __init__(self, venue_dao: RedisPortalDAO):
        self.venue_dao = venue_dao

    def resolve_session(
        self, admin_email: Optional[str], requested_venue_id: Optional[str] = None
    ) -> AdminSession:
        """Resolve the active venue for an admin.

        Rules:
        - no requested venue and a single assigned venue: use it
        - no requested venue and several assigned: the admin must choose
        - requested venue not assigned to the admin: use the first assigned

        Args:
            admin_email: Authenticated admin email
            requested_venue_id: Venue the client asked for, if any

        Returns:
            AdminSession for the request

        Raises:
            SessionError: unknown admin or admin without venues
            VenueSelectionRequired: several venues and none requested
        """
        email = (admin_email or "").strip().lower()
        if not email:
            raise SessionError("Missing admin email.")

        admin = self.venue_dao.get_venue_admin(email)
        if admin is None:
            raise SessionError("Admin record not found.")

        venue_ids = admin.assigned_venue_ids()
        if not venue_ids:
            raise SessionError("No venues assigned to this admin account.")

        venue_id = (requested_venue_id or "").strip() or None
        if venue_id is None:
            if len(venue_ids) > 1:
                raise VenueSelectionRequired(venue_ids)
            venue_id = venue_ids[0]

        if venue_id not in venue_ids:
            logger.warning(
                f"[SessionService] {email} requested unassigned venue {venue_id}; "
                f"falling back to {venue_ids[0]}"
            )
            venue_id = venue_ids[0]

        return AdminSession(admin_email=email, venue_id=venue_id, venue_ids=venue_ids)
