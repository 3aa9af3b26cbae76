"""Redis-based Data Access Object for portal operations."""
import json
import logging
from typing import Optional

import redis
from pydantic import ValidationError

from portal.db.redis_client import PortalRedisClient
from portal.models import (
    DailyGoingDay,
    Event,
    ReviewRecord,
    VenueAdmin,
    VenueProfile,
    VibeDailyDay,
)
from portal.models.coercion import utc_sort_key

logger = logging.getLogger(__name__)

EVENT_KEY_FORMAT = "event_v1:{}"
VENUE_EVENTS_KEY_FORMAT = "venue_events_v1:{}"
VENUE_KEY_FORMAT = "venue_v1:{}"
VENUE_ADMIN_KEY_FORMAT = "venue_admin_v1:{}"
DAILY_GOING_KEY_FORMAT = "daily_going_v1:{}:{}"
DAILY_GOING_DAYS_KEY_FORMAT = "daily_going_days_v1:{}"
VIBE_DAILY_KEY_FORMAT = "vibe_daily_v1:{}:{}"
VIBE_DAILY_DAYS_KEY_FORMAT = "vibe_daily_days_v1:{}"
REVIEW_KEY_FORMAT = "review_v1:{}:{}"


class RedisPortalDAO:
    """Data Access Object for events, analytics documents and admins."""

    def __init__(self, client: PortalRedisClient):
        """Initialize RedisPortalDAO.

        Args:
            client: PortalRedisClient instance
        """
        self.client = client

    # =========================================================================
    # VENUES AND ADMINS
    # =========================================================================

    def get_venue(self, venue_id: str) -> Optional[VenueProfile]:
        """Retrieve venue metadata, or None if not found."""
        key = VENUE_KEY_FORMAT.format(venue_id)
        try:
            json_str = self.client.get(key)
            if json_str is None:
                return None
            return VenueProfile.model_validate_json(json_str)
        except (redis.RedisError, ValidationError) as e:
            logger.error(f"[RedisPortalDAO] Failed to get venue {venue_id}: {e}")
            return None

    def set_venue(self, venue: VenueProfile) -> None:
        """Store venue metadata."""
        self.client.set_json(VENUE_KEY_FORMAT.format(venue.venue_id), venue)

    def get_venue_admin(self, email: str) -> Optional[VenueAdmin]:
        """Retrieve an admin record by email (case-insensitive).

        Args:
            email: Admin email

        Returns:
            VenueAdmin or None if not found
        """
        key = VENUE_ADMIN_KEY_FORMAT.format(email.strip().lower())
        try:
            json_str = self.client.get(key)
            if json_str is None:
                return None
            return VenueAdmin.model_validate_json(json_str)
        except (redis.RedisError, ValidationError) as e:
            logger.error(f"[RedisPortalDAO] Failed to get venue admin {email}: {e}")
            return None

    def set_venue_admin(self, admin: VenueAdmin) -> None:
        """Store an admin record under its normalized email."""
        self.client.set_json(VENUE_ADMIN_KEY_FORMAT.format(admin.email), admin)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def upsert_event(self, event: Event) -> None:
        """Store an event and index it under its venue.

        Args:
            event: Event occurrence to store
        """
        self.client.set_json(EVENT_KEY_FORMAT.format(event.event_id), event)
        self.client.sadd(VENUE_EVENTS_KEY_FORMAT.format(event.venue_id), event.event_id)
        logger.debug(f"[RedisPortalDAO] Stored event {event.event_id} for venue {event.venue_id}")

    def get_event(self, event_id: str) -> Optional[Event]:
        """Retrieve an event by its ID, or None if not found."""
        key = EVENT_KEY_FORMAT.format(event_id)
        try:
            json_str = self.client.get(key)
            if json_str is None:
                return None
            return Event.model_validate_json(json_str)
        except (redis.RedisError, ValidationError) as e:
            logger.error(f"[RedisPortalDAO] Failed to get event {event_id}: {e}")
            return None

    def list_venue_event_ids(self, venue_id: str) -> list[str]:
        """Return the IDs of all events indexed under a venue."""
        return sorted(self.client.smembers(VENUE_EVENTS_KEY_FORMAT.format(venue_id)))

    def list_venue_events(self, venue_id: str) -> list[Event]:
        """Return all events of a venue ordered by start date.

        Events that fail to parse are logged and skipped.
        """
        event_ids = self.list_venue_event_ids(venue_id)
        raw = self.client.mget([EVENT_KEY_FORMAT.format(eid) for eid in event_ids])

        events = []
        for event_id, json_str in zip(event_ids, raw):
            if json_str is None:
                continue
            try:
                events.append(Event.model_validate_json(json_str))
            except ValidationError as e:
                logger.error(f"[RedisPortalDAO] Failed to parse event {event_id}: {e}")
                continue

        events.sort(key=lambda e: utc_sort_key(e.start_date))
        return events

    # =========================================================================
    # DAILY GOING (ATTENDANCE)
    # =========================================================================

    def add_daily_going(self, venue_id: str, date_key: str, user_id: str) -> None:
        """Mark a user as going to a venue on a day."""
        self.client.sadd(DAILY_GOING_KEY_FORMAT.format(venue_id, date_key), user_id)
        self.client.sadd(DAILY_GOING_DAYS_KEY_FORMAT.format(venue_id), date_key)

    def list_daily_going_day_keys(self, venue_id: str) -> list[str]:
        """Return every day key with attendance data for a venue (unordered)."""
        return list(self.client.smembers(DAILY_GOING_DAYS_KEY_FORMAT.format(venue_id)))

    def get_daily_going(self, venue_id: str, date_key: str) -> DailyGoingDay:
        """Return the attendance bucket of one day.

        Raises:
            redis.RedisError: if the read fails (callers isolate per day)
        """
        count = self.client.scard(DAILY_GOING_KEY_FORMAT.format(venue_id, date_key))
        return DailyGoingDay(date_key=date_key, count=count)

    # =========================================================================
    # VIBE DAILY
    # =========================================================================

    def set_vibe_daily(self, venue_id: str, day: VibeDailyDay) -> None:
        """Store the vibe vote document of one day."""
        self.client.set_json(VIBE_DAILY_KEY_FORMAT.format(venue_id, day.date_key), day)
        self.client.sadd(VIBE_DAILY_DAYS_KEY_FORMAT.format(venue_id), day.date_key)

    def list_vibe_daily_day_keys(self, venue_id: str) -> list[str]:
        """Return every day key with vibe votes for a venue (unordered)."""
        return list(self.client.smembers(VIBE_DAILY_DAYS_KEY_FORMAT.format(venue_id)))

    def get_vibe_daily(self, venue_id: str, date_key: str) -> Optional[VibeDailyDay]:
        """Return the vibe document of one day, or None if it is missing.

        Raises:
            redis.RedisError: if the read fails
            ValueError: if the stored document is not valid JSON
        """
        json_str = self.client.get(VIBE_DAILY_KEY_FORMAT.format(venue_id, date_key))
        if json_str is None:
            return None
        raw = json.loads(json_str)
        if not isinstance(raw, dict):
            raise ValueError(f"vibe daily document for {date_key} is not an object")
        raw["date_key"] = date_key
        return VibeDailyDay.model_validate(raw)

    # =========================================================================
    # REVIEWS
    # =========================================================================

    def set_review(self, venue_id: str, review: ReviewRecord) -> None:
        """Store a review document."""
        self.client.set_json(REVIEW_KEY_FORMAT.format(venue_id, review.review_id), review)

    def list_reviews(self, venue_id: str) -> list[ReviewRecord]:
        """Return all review documents of a venue.

        A document that is not a JSON object still counts as a review; it is
        returned with only its ID so the aggregation can treat it as neutral.
        """
        prefix = REVIEW_KEY_FORMAT.format(venue_id, "")
        keys = sorted(self.client.keys(f"{prefix}*"))
        raw = self.client.mget(keys)

        reviews = []
        for key, json_str in zip(keys, raw):
            if json_str is None:
                continue
            review_id = key.replace(prefix, "", 1)
            try:
                data = json.loads(json_str)
            except json.JSONDecodeError as e:
                logger.warning(f"[RedisPortalDAO] Unreadable review {review_id}: {e}")
                data = None
            if not isinstance(data, dict):
                data = {}
            data["review_id"] = review_id
            reviews.append(ReviewRecord.model_validate(data))

        return reviews
