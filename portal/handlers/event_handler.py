"""Event handler for HTTP requests."""
import logging
from typing import Optional

from portal.models import Event, EventDraft, EventUpdate, Occurrence
from portal.services import EventService, SessionService

logger = logging.getLogger(__name__)


class EventHandler:
    """Handler for event requests.

    Every operation first resolves an explicit AdminSession from the
    request identity, then calls the event service with it.
    """

    def __init__(self, session_service: SessionService, event_service: EventService):
        self.session_service = session_service
        self.event_service = event_service

    def create_events(
        self, admin_email: str, venue_id: Optional[str], draft: EventDraft
    ) -> list[Event]:
        session = self.session_service.resolve_session(admin_email, venue_id)
        logger.info(
            f"[EventHandler] CreateEvents: venue_id={session.venue_id}, "
            f"recurring={draft.is_recurring}"
        )
        return self.event_service.create_events(session, draft)

    def preview_occurrences(
        self, admin_email: str, venue_id: Optional[str], draft: EventDraft
    ) -> list[Occurrence]:
        session = self.session_service.resolve_session(admin_email, venue_id)
        return self.event_service.preview_occurrences(session, draft)

    def list_events(self, admin_email: str, venue_id: Optional[str]) -> list[Event]:
        session = self.session_service.resolve_session(admin_email, venue_id)
        return self.event_service.list_events(session)

    def get_event(self, admin_email: str, venue_id: Optional[str], event_id: str) -> Event:
        session = self.session_service.resolve_session(admin_email, venue_id)
        return self.event_service.get_event(session, event_id)

    def update_event(
        self,
        admin_email: str,
        venue_id: Optional[str],
        event_id: str,
        update: EventUpdate,
    ) -> Event:
        session = self.session_service.resolve_session(admin_email, venue_id)
        logger.info(f"[EventHandler] UpdateEvent: event_id={event_id}, venue_id={session.venue_id}")
        return self.event_service.update_event(session, event_id, update)
