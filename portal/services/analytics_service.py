"""Analytics view: fetch bounded per-venue documents and aggregate them."""
import logging
import time
from datetime import datetime
from typing import Callable, Optional

import redis

from portal.dao import RedisPortalDAO
from portal.metrics import (
    ANALYTICS_COMPUTE_DURATION_SECONDS,
    ANALYTICS_DAY_FETCH_ERRORS_TOTAL,
    ANALYTICS_VIEWS_TOTAL,
    MALFORMED_RECORDS_SKIPPED_TOTAL,
)
from portal.models import (
    AdminSession,
    DailyGoingDay,
    VenueAnalytics,
    VibeDailyDay,
)
from portal.models.coercion import is_date_key, resolve_timezone, utc_now
from portal.services.analytics_aggregator import (
    summarize_daily_going,
    summarize_reviews,
    summarize_vibe_daily,
)

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Builds the analytics view of a venue from its stored documents."""

    def __init__(
        self,
        venue_dao: RedisPortalDAO,
        *,
        default_timezone: str = "America/New_York",
        day_window: int = 14,
        recent_days_window: int = 7,
        reviews_recent_days: int = 30,
        top_vibe_tags_limit: int = 4,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize analytics service.

        Args:
            venue_dao: Redis DAO for portal data access
            default_timezone: Timezone for "today" when the venue has none
            day_window: Most recent day keys read per collection
            recent_days_window: Size of the trailing "last N days" window
            reviews_recent_days: Size of the recent-reviews window in days
            top_vibe_tags_limit: Number of review vibe tags to rank
            clock: Returns the current UTC time (tests pass a fixed one)
        """
        self.venue_dao = venue_dao
        self.default_timezone = default_timezone
        self.day_window = day_window
        self.recent_days_window = recent_days_window
        self.reviews_recent_days = reviews_recent_days
        self.top_vibe_tags_limit = top_vibe_tags_limit
        self._clock = clock or utc_now

    def get_venue_analytics(self, session: AdminSession) -> VenueAnalytics:
        """Compute the full analytics view for the session's venue.

        Args:
            session: Resolved admin session

        Returns:
            VenueAnalytics with attendance, vibe and review summaries
        """
        venue_id = session.venue_id
        start_time = time.perf_counter()

        venue = self.venue_dao.get_venue(venue_id)
        tz = resolve_timezone(venue.timezone if venue else None, self.default_timezone)
        now = self._clock().astimezone(tz)
        today = now.date()

        logger.info(
            f"[AnalyticsService] Computing analytics for venue_id={venue_id} "
            f"(today={today.isoformat()}, tz={tz.zone})"
        )

        daily_going = summarize_daily_going(
            self.load_daily_going(venue_id, today.isoformat()),
            today,
            window=self.recent_days_window,
        )
        vibe_daily = summarize_vibe_daily(
            self.load_vibe_daily(venue_id, today.isoformat()),
            today,
            window=self.recent_days_window,
        )
        reviews = summarize_reviews(
            self.venue_dao.list_reviews(venue_id),
            now,
            recent_days_window=self.reviews_recent_days,
            top_tags_limit=self.top_vibe_tags_limit,
        )

        ANALYTICS_VIEWS_TOTAL.inc()
        ANALYTICS_COMPUTE_DURATION_SECONDS.observe(time.perf_counter() - start_time)

        return VenueAnalytics(
            venue_id=venue_id,
            venue_name=venue.name if venue else "",
            generated_at=now,
            daily_going=daily_going,
            vibe_daily=vibe_daily,
            reviews=reviews,
        )

    def _recent_day_keys(self, day_keys: list[str], today_key: str) -> list[str]:
        """Most recent valid day keys up to today, newest first, bounded."""
        valid = sorted(
            (k for k in day_keys if is_date_key(k) and k <= today_key),
            reverse=True,
        )
        return valid[: self.day_window]

    def load_daily_going(self, venue_id: str, today_key: str) -> list[DailyGoingDay]:
        """Read attendance buckets for the most recent days.

        A failed read for one day is logged and contributes a zero bucket;
        it never fails the other days.
        """
        day_keys = self._recent_day_keys(
            self.venue_dao.list_daily_going_day_keys(venue_id), today_key
        )

        days: list[DailyGoingDay] = []
        for date_key in day_keys:
            try:
                days.append(self.venue_dao.get_daily_going(venue_id, date_key))
            except redis.RedisError as e:
                ANALYTICS_DAY_FETCH_ERRORS_TOTAL.labels(collection="daily_going").inc()
                logger.warning(
                    f"[AnalyticsService] Attendance read failed for venue_id={venue_id} "
                    f"day {date_key}: {e}"
                )
                days.append(DailyGoingDay(date_key=date_key, count=0))

        return days

    def load_vibe_daily(self, venue_id: str, today_key: str) -> list[VibeDailyDay]:
        """Read vibe vote documents for the most recent days.

        Missing, unreadable or malformed day documents are skipped.
        """
        day_keys = self._recent_day_keys(
            self.venue_dao.list_vibe_daily_day_keys(venue_id), today_key
        )

        days: list[VibeDailyDay] = []
        for date_key in day_keys:
            try:
                day = self.venue_dao.get_vibe_daily(venue_id, date_key)
            except redis.RedisError as e:
                ANALYTICS_DAY_FETCH_ERRORS_TOTAL.labels(collection="vibe_daily").inc()
                logger.warning(
                    f"[AnalyticsService] Vibe read failed for venue_id={venue_id} "
                    f"day {date_key}: {e}"
                )
                continue
            except ValueError as e:
                MALFORMED_RECORDS_SKIPPED_TOTAL.labels(collection="vibe_daily").inc()
                logger.warning(
                    f"[AnalyticsService] Malformed vibe document for venue_id={venue_id} "
                    f"day {date_key}: {e}"
                )
                continue
            if day is not None:
                days.append(day)

        return days
