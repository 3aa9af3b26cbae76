"""Handlers package."""
from portal.handlers.analytics_handler import AnalyticsHandler
from portal.handlers.event_handler import EventHandler
from portal.handlers.venue_handler import VenueHandler

__all__ = ["AnalyticsHandler", "EventHandler", "VenueHandler"]
