"""Unit tests for handlers."""
from unittest.mock import Mock

import pytest

from portal.errors import SessionError
from portal.handlers import AnalyticsHandler, EventHandler, VenueHandler
from portal.models import AdminSession, EventDraft, EventUpdate, VenueDetailsUpdate, VenueHoursUpdate


@pytest.fixture
def mock_session_service():
    """Create mock session service resolving to club-42."""
    service = Mock()
    service.resolve_session.return_value = AdminSession(
        admin_email="owner@club42.com", venue_id="club-42", venue_ids=["club-42"]
    )
    return service


@pytest.fixture
def mock_event_service():
    return Mock()


@pytest.fixture
def mock_analytics_service():
    return Mock()


@pytest.fixture
def event_handler(mock_session_service, mock_event_service):
    return EventHandler(mock_session_service, mock_event_service)


@pytest.fixture
def analytics_handler(mock_session_service, mock_analytics_service):
    return AnalyticsHandler(mock_session_service, mock_analytics_service)


@pytest.fixture
def mock_venue_service():
    return Mock()


@pytest.fixture
def venue_handler(mock_session_service, mock_venue_service):
    return VenueHandler(mock_session_service, mock_venue_service)


class TestEventHandler:
    """Test that every event operation runs under a resolved session."""

    def test_create_events_resolves_session(
        self, event_handler, mock_session_service, mock_event_service
    ):
        draft = EventDraft(name="Latin Night")

        event_handler.create_events("owner@club42.com", "club-42", draft)

        mock_session_service.resolve_session.assert_called_once_with("owner@club42.com", "club-42")
        session = mock_session_service.resolve_session.return_value
        mock_event_service.create_events.assert_called_once_with(session, draft)

    def test_update_event(self, event_handler, mock_session_service, mock_event_service):
        update = EventUpdate(name="Salsa")

        event_handler.update_event("owner@club42.com", None, "e1", update)

        session = mock_session_service.resolve_session.return_value
        mock_event_service.update_event.assert_called_once_with(session, "e1", update)

    def test_session_error_propagates(self, event_handler, mock_session_service, mock_event_service):
        mock_session_service.resolve_session.side_effect = SessionError("Admin record not found.")

        with pytest.raises(SessionError):
            event_handler.list_events("nobody@example.com", None)
        mock_event_service.list_events.assert_not_called()

    def test_preview_resolves_session(self, event_handler, mock_session_service, mock_event_service):
        draft = EventDraft(name="x")

        event_handler.preview_occurrences("owner@club42.com", "club-42", draft)

        session = mock_session_service.resolve_session.return_value
        mock_session_service.resolve_session.assert_called_once_with("owner@club42.com", "club-42")
        mock_event_service.preview_occurrences.assert_called_once_with(session, draft)


class TestAnalyticsHandler:
    def test_ping(self, analytics_handler):
        assert analytics_handler.ping() == {"status": "pong"}

    def test_get_venue_analytics(
        self, analytics_handler, mock_session_service, mock_analytics_service
    ):
        analytics_handler.get_venue_analytics("owner@club42.com", "club-42")

        session = mock_session_service.resolve_session.return_value
        mock_analytics_service.get_venue_analytics.assert_called_once_with(session)


class TestVenueHandler:
    """Test that venue profile operations run under a resolved session."""

    def test_get_venue(self, venue_handler, mock_session_service, mock_venue_service):
        venue_handler.get_venue("owner@club42.com", "club-42")

        session = mock_session_service.resolve_session.return_value
        mock_session_service.resolve_session.assert_called_once_with("owner@club42.com", "club-42")
        mock_venue_service.get_venue.assert_called_once_with(session)

    def test_update_details(self, venue_handler, mock_session_service, mock_venue_service):
        update = VenueDetailsUpdate(city="Tampa")

        venue_handler.update_details("owner@club42.com", None, update)

        session = mock_session_service.resolve_session.return_value
        mock_venue_service.update_details.assert_called_once_with(session, update)

    def test_update_hours(self, venue_handler, mock_session_service, mock_venue_service):
        update = VenueHoursUpdate(hours="Fri 10pm-4am")

        venue_handler.update_hours("owner@club42.com", None, update)

        session = mock_session_service.resolve_session.return_value
        mock_venue_service.update_hours.assert_called_once_with(session, update)

    def test_session_error_propagates(self, venue_handler, mock_session_service, mock_venue_service):
        mock_session_service.resolve_session.side_effect = SessionError("Admin record not found.")

        with pytest.raises(SessionError):
            venue_handler.get_venue("nobody@example.com", None)
        mock_venue_service.get_venue.assert_not_called()
