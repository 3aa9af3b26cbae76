"""Data models package for the venue portal."""
from portal.models.event import (
    Occurrence,
    RecurrenceRequest,
    Recurrence,
    EventDraft,
    EventUpdate,
    Event,
    AGE_REQUIREMENTS,
)
from portal.models.analytics import (
    DailyGoingDay,
    VibeDailyDay,
    ReviewRecord,
    DailyGoingSummary,
    VibeDailySummary,
    VibeTagCount,
    ReviewsSummary,
    VenueAnalytics,
)
from portal.models.venue_admin import (
    VenueAdmin,
    VenueProfile,
    VenueDetailsUpdate,
    VenueHoursUpdate,
    AdminSession,
)

__all__ = [
    # Event models
    "Occurrence",
    "RecurrenceRequest",
    "Recurrence",
    "EventDraft",
    "EventUpdate",
    "Event",
    "AGE_REQUIREMENTS",
    # Analytics models
    "DailyGoingDay",
    "VibeDailyDay",
    "ReviewRecord",
    "DailyGoingSummary",
    "VibeDailySummary",
    "VibeTagCount",
    "ReviewsSummary",
    "VenueAnalytics",
    # Admin models
    "VenueAdmin",
    "VenueProfile",
    "VenueDetailsUpdate",
    "VenueHoursUpdate",
    "AdminSession",
]
