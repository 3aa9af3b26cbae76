"""Unit tests for AnalyticsService (mocked DAO, fixed clock)."""
from datetime import date, datetime, timedelta
from unittest.mock import Mock

import pytest
import pytz
import redis

from portal.models import (
    AdminSession,
    DailyGoingDay,
    ReviewRecord,
    VenueProfile,
    VibeDailyDay,
)
from portal.dao import RedisPortalDAO
from portal.models.coercion import resolve_timezone
from portal.services.analytics_service import AnalyticsService

# 03:00 UTC on Jan 11 is still Jan 10 in New York
FIXED_NOW = pytz.UTC.localize(datetime(2024, 1, 11, 3, 0))


@pytest.fixture
def mock_venue_dao():
    """Create mock DAO with an empty venue."""
    dao = Mock()
    dao.get_venue.return_value = VenueProfile(
        venue_id="club-42", name="Club 42", timezone="America/New_York"
    )
    dao.list_daily_going_day_keys.return_value = []
    dao.list_vibe_daily_day_keys.return_value = []
    dao.list_reviews.return_value = []
    return dao


@pytest.fixture
def analytics_service(mock_venue_dao):
    """Create AnalyticsService with a fixed clock."""
    return AnalyticsService(
        mock_venue_dao,
        default_timezone="UTC",
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def session():
    return AdminSession(admin_email="owner@club42.com", venue_id="club-42", venue_ids=["club-42"])


class TestAnalyticsService:
    """Test analytics view assembly."""

    def test_today_evaluated_in_venue_timezone(self, analytics_service, mock_venue_dao, session):
        """Jan 11 data is in the future for a New York venue at 22:00 Jan 10."""
        mock_venue_dao.list_daily_going_day_keys.return_value = [
            "2024-01-09",
            "2024-01-10",
            "2024-01-11",
        ]
        mock_venue_dao.get_daily_going.side_effect = (
            lambda venue_id, key: DailyGoingDay(date_key=key, count=3)
        )

        result = analytics_service.get_venue_analytics(session)

        assert result.venue_id == "club-42"
        assert result.venue_name == "Club 42"
        assert result.generated_at.date() == date(2024, 1, 10)
        assert result.daily_going.today == 3
        assert result.daily_going.last7 == 6
        fetched = [c.args[1] for c in mock_venue_dao.get_daily_going.call_args_list]
        assert "2024-01-11" not in fetched

    def test_default_timezone_when_venue_has_none(self, analytics_service, mock_venue_dao, session):
        mock_venue_dao.get_venue.return_value = None

        result = analytics_service.get_venue_analytics(session)

        assert result.generated_at.date() == date(2024, 1, 11)
        assert result.venue_name == ""

    def test_failed_day_read_counts_as_zero(self, analytics_service, mock_venue_dao, session):
        """One failing day read does not fail the whole view."""
        mock_venue_dao.list_daily_going_day_keys.return_value = ["2024-01-09", "2024-01-10"]

        def get_daily_going(venue_id, key):
            if key == "2024-01-09":
                raise redis.RedisError("timeout")
            return DailyGoingDay(date_key=key, count=5)

        mock_venue_dao.get_daily_going.side_effect = get_daily_going

        result = analytics_service.get_venue_analytics(session)

        assert result.daily_going.today == 5
        assert result.daily_going.last7 == 5
        assert result.daily_going.total_days == 2

    def test_malformed_vibe_day_is_skipped(self, analytics_service, mock_venue_dao, session):
        mock_venue_dao.list_vibe_daily_day_keys.return_value = ["2024-01-10", "2024-01-08", "2024-01-07"]

        def get_vibe_daily(venue_id, key):
            if key == "2024-01-08":
                raise ValueError("not an object")
            if key == "2024-01-07":
                raise redis.RedisError("timeout")
            return VibeDailyDay(date_key=key, total_votes=2, counts={"packed": 2})

        mock_venue_dao.get_vibe_daily.side_effect = get_vibe_daily

        result = analytics_service.get_venue_analytics(session)

        assert result.vibe_daily.total_days == 1
        assert result.vibe_daily.today_votes == 2
        assert result.vibe_daily.today_top_vibe == "packed"

    def test_missing_vibe_day_is_skipped(self, analytics_service, mock_venue_dao, session):
        mock_venue_dao.list_vibe_daily_day_keys.return_value = ["2024-01-10"]
        mock_venue_dao.get_vibe_daily.return_value = None

        result = analytics_service.get_venue_analytics(session)

        assert result.vibe_daily.total_days == 0
        assert result.vibe_daily.latest is None

    def test_day_reads_are_bounded(self, analytics_service, mock_venue_dao, session):
        """Only the 14 most recent day keys are read."""
        start = date(2023, 12, 1)
        mock_venue_dao.list_daily_going_day_keys.return_value = [
            (start + timedelta(days=i)).isoformat() for i in range(40)
        ] + ["garbage"]
        mock_venue_dao.get_daily_going.side_effect = (
            lambda venue_id, key: DailyGoingDay(date_key=key, count=1)
        )

        analytics_service.get_venue_analytics(session)

        fetched = [c.args[1] for c in mock_venue_dao.get_daily_going.call_args_list]
        assert len(fetched) == 14
        assert fetched[0] == "2024-01-09"

    def test_reviews_summarized(self, analytics_service, mock_venue_dao, session):
        mock_venue_dao.list_reviews.return_value = [
            ReviewRecord(review_id="r1", rating=5, vibe="chill", created_at="2024-01-09T20:00:00Z"),
            ReviewRecord(review_id="r2", rating=3, vibe="chill"),
        ]

        result = analytics_service.get_venue_analytics(session)

        assert result.reviews.total == 2
        assert result.reviews.avg_rating == 4.0
        assert result.reviews.last30_days == 1
        assert result.reviews.top_vibe_tags[0].vibe == "chill"
        mock_venue_dao.list_reviews.assert_called_once_with("club-42")


class TestResolveTimezone:
    def test_known_zone(self):
        assert resolve_timezone("Europe/Lisbon").zone == "Europe/Lisbon"

    def test_unknown_zone_uses_fallback(self):
        assert resolve_timezone("Mars/Olympus", "America/Chicago").zone == "America/Chicago"

    def test_nothing_usable_is_utc(self):
        assert resolve_timezone(None, "Nope/Nope") == pytz.UTC


class TestStoredDocuments:
    """Test the service against the real DAO over a mocked Redis client."""

    @pytest.fixture
    def mock_redis_client(self):
        client = Mock()
        client.smembers.return_value = {"2024-01-10"}
        return client

    @pytest.fixture
    def dao_backed_service(self, mock_redis_client):
        return AnalyticsService(RedisPortalDAO(mock_redis_client), clock=lambda: FIXED_NOW)

    def test_infinite_vibe_count_is_neutralized(self, dao_backed_service, mock_redis_client):
        """JSON 1e999 parses to inf; it must count as zero, not abort the view."""
        mock_redis_client.get.return_value = '{"counts": {"chill": 1e999, "packed": 2}, "total_votes": 3}'

        days = dao_backed_service.load_vibe_daily("club-42", "2024-01-10")

        assert len(days) == 1
        assert days[0].counts == {"chill": 0, "packed": 2}
        assert days[0].total_votes == 3

    def test_infinite_total_votes_is_neutralized(self, dao_backed_service, mock_redis_client):
        mock_redis_client.get.return_value = '{"counts": {"chill": 1}, "total_votes": "1e999"}'

        days = dao_backed_service.load_vibe_daily("club-42", "2024-01-10")

        assert days[0].total_votes == 0
