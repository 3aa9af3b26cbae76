"""Event creation and single-occurrence editing."""
import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from portal.dao import RedisPortalDAO
from portal.errors import EventNotFound, InvalidArgument
from portal.metrics import EVENT_UPDATES_TOTAL, EVENTS_CREATED_TOTAL
from portal.models import (
    AdminSession,
    Event,
    EventDraft,
    EventUpdate,
    Occurrence,
    Recurrence,
)
from portal.models.coercion import localize, resolve_timezone, utc_now
from portal.services.occurrence_generator import (
    DEFAULT_OCCURRENCES,
    MAX_OCCURRENCES,
    add_duration,
    clamp_occurrence_count,
    generate_weekly_occurrences,
    normalize_weekdays,
    overnight_duration,
)

logger = logging.getLogger(__name__)

# Tags whose "X" is replaced with a time the admin entered
TIMED_TAGS = (
    "Ladies Free Before X",
    "Free Entry Before X",
    "Ladies Drink Free Before X",
)


def apply_tag_times(tags: list[str], tag_times: dict[str, str]) -> list[str]:
    """Append the entered time to "... Before X" tags.

    "Ladies Free Before X" with time "10 PM" becomes
    "Ladies Free Before X (10 PM)". Tags without a time are left as is.
    """
    out = []
    for tag in tags:
        time_text = (tag_times.get(tag) or "").strip()
        if tag in TIMED_TAGS and time_text:
            out.append(f"{tag} ({time_text})")
        else:
            out.append(tag)
    return out


def _clean_list(values: list[str]) -> list[str]:
    return [v.strip() for v in values if v and v.strip()]


class EventService:
    """Creates, lists and edits venue events."""

    def __init__(
        self,
        venue_dao: RedisPortalDAO,
        *,
        default_timezone: str = "America/New_York",
        default_occurrences: int = DEFAULT_OCCURRENCES,
        max_occurrences: int = MAX_OCCURRENCES,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize event service.

        Args:
            venue_dao: Redis DAO for portal data access
            default_timezone: Timezone for naive dates and recurrence metadata
                when the venue has none
            default_occurrences: Occurrences generated when none requested
            max_occurrences: Upper bound on occurrences per series
            clock: Returns the current UTC time
        """
        self.venue_dao = venue_dao
        self.default_timezone = default_timezone
        self.default_occurrences = default_occurrences
        self.max_occurrences = max_occurrences
        self._clock = clock or utc_now

    def preview_occurrences(self, session: AdminSession, draft: EventDraft) -> list[Occurrence]:
        """Expand a recurring draft without persisting anything."""
        venue = self.venue_dao.get_venue(session.venue_id)
        start, end = self._require_dates(draft, self._venue_timezone(venue))
        count = clamp_occurrence_count(
            draft.occurrences, self.default_occurrences, self.max_occurrences
        )
        return generate_weekly_occurrences(start, end, draft.repeat_weekdays, count)

    def create_events(self, session: AdminSession, draft: EventDraft) -> list[Event]:
        """Create a single event or a weekly series for the session's venue.

        Every occurrence of a series shares one ``series_id`` and the same
        recurrence metadata.

        Args:
            session: Resolved admin session
            draft: Event fields entered by the admin

        Returns:
            Persisted events, in start order

        Raises:
            InvalidArgument: missing name/dates or empty recurrence weekdays
        """
        name = draft.name.strip()
        if not name:
            raise InvalidArgument("Event name is required.")
        venue = self.venue_dao.get_venue(session.venue_id)
        start, end = self._require_dates(draft, self._venue_timezone(venue))
        now = self._clock()

        base = dict(
            venue_id=session.venue_id,
            venue_name=venue.name if venue else "",
            name=name,
            description=draft.description.strip(),
            status=draft.status,
            cover_charge=draft.cover_charge.strip(),
            age_requirement=draft.age_requirement.strip(),
            music_genres=_clean_list(draft.music_genres),
            artists=_clean_list(draft.artists),
            tags=apply_tag_times(_clean_list(draft.tags), draft.tag_times),
            dress_code=draft.dress_code.strip(),
            event_type=draft.event_type.strip(),
            promoted=draft.promoted,
            images=_clean_list(draft.images),
            ticket_url=draft.ticket_url.strip(),
            created_at=now,
            updated_at=now,
            created_by_admin_email=session.admin_email,
        )

        if not draft.is_recurring:
            end = add_duration(start, overnight_duration(start, end))
            occurrences = [Occurrence(start=start, end=end)]
            series_id = None
            recurrence = None
        else:
            weekdays = normalize_weekdays(draft.repeat_weekdays)
            count = clamp_occurrence_count(
                draft.occurrences, self.default_occurrences, self.max_occurrences
            )
            occurrences = generate_weekly_occurrences(start, end, weekdays, count)
            series_id = str(uuid.uuid4())
            recurrence = Recurrence(
                by_weekday=weekdays,
                occurrences=count,
                timezone=self._recurrence_timezone(venue, start),
            )

        events = [
            Event(
                event_id=uuid.uuid4().hex,
                start_date=occ.start,
                end_date=occ.end,
                is_recurring=draft.is_recurring,
                series_id=series_id,
                recurrence=recurrence,
                **base,
            )
            for occ in occurrences
        ]

        for event in events:
            self.venue_dao.upsert_event(event)

        kind = "recurring" if draft.is_recurring else "single"
        EVENTS_CREATED_TOTAL.labels(kind=kind).inc(len(events))
        logger.info(
            f"[EventService] Created {len(events)} {kind} event(s) '{name}' "
            f"for venue_id={session.venue_id} by {session.admin_email}"
        )
        return events

    def list_events(self, session: AdminSession) -> list[Event]:
        """List the events of the session's venue in start order."""
        return self.venue_dao.list_venue_events(session.venue_id)

    def get_event(self, session: AdminSession, event_id: str) -> Event:
        """Return one event of the session's venue.

        Raises:
            EventNotFound: no such event for this venue
        """
        event = self.venue_dao.get_event(event_id)
        if event is None or event.venue_id != session.venue_id:
            raise EventNotFound(f"Event {event_id} not found.")
        return event

    def update_event(self, session: AdminSession, event_id: str, update: EventUpdate) -> Event:
        """Edit a single occurrence; series and recurrence stay untouched.

        Raises:
            EventNotFound: no such event for this venue
            InvalidArgument: empty name, or end not after start
        """
        event = self.get_event(session, event_id)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        tz = self._venue_timezone(self.venue_dao.get_venue(session.venue_id))

        start = localize(changes.pop("start", event.start_date), tz)
        end = localize(changes.pop("end", event.end_date), tz)
        if end <= start:
            raise InvalidArgument("End date/time must be after start date/time.")

        for key, value in changes.items():
            if isinstance(value, str):
                changes[key] = value.strip()
            elif isinstance(value, list):
                changes[key] = _clean_list(value)
        if "name" in changes and not changes["name"]:
            raise InvalidArgument("Event name is required.")

        updated = event.model_copy(
            update={**changes, "start_date": start, "end_date": end, "updated_at": self._clock()}
        )
        self.venue_dao.upsert_event(updated)

        EVENT_UPDATES_TOTAL.inc()
        logger.info(f"[EventService] Updated event {event_id} for venue_id={session.venue_id}")
        return updated

    def _venue_timezone(self, venue):
        return resolve_timezone(venue.timezone if venue else None, self.default_timezone)

    def _require_dates(self, draft: EventDraft, tz) -> tuple[datetime, datetime]:
        """Return the draft dates, reading naive values in the venue timezone."""
        if draft.start is None or draft.end is None:
            raise InvalidArgument("Start & end date required.")
        return localize(draft.start, tz), localize(draft.end, tz)

    def _recurrence_timezone(self, venue, start: datetime) -> str:
        if venue is not None and venue.timezone:
            return venue.timezone
        zone = getattr(start.tzinfo, "zone", None) or getattr(start.tzinfo, "key", None)
        return zone or self.default_timezone
