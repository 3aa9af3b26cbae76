"""Unit tests for the weekly occurrence generator."""
from datetime import datetime, timedelta

import pytest
import pytz

from portal.errors import InvalidArgument
from portal.models import RecurrenceRequest
from portal.services.occurrence_generator import (
    clamp_occurrence_count,
    generate,
    generate_weekly_occurrences,
    sunday_based_weekday,
)

# Thursday 2024-01-04 22:00 -> Friday 02:00
THU_START = datetime(2024, 1, 4, 22, 0)
THU_END = datetime(2024, 1, 5, 2, 0)


class TestGenerateWeeklyOccurrences:
    """Test occurrence expansion rules."""

    def test_single_weekday_repeats_weekly(self):
        """Thursday-only series lands on consecutive Thursdays."""
        result = generate_weekly_occurrences(THU_START, THU_END, [4], 3)

        assert [o.start for o in result] == [
            datetime(2024, 1, 4, 22, 0),
            datetime(2024, 1, 11, 22, 0),
            datetime(2024, 1, 18, 22, 0),
        ]
        assert result[0].end == datetime(2024, 1, 5, 2, 0)
        assert result[2].end == datetime(2024, 1, 19, 2, 0)

    def test_two_weekdays_in_chronological_order(self):
        """Tue+Thu starting on a Thursday: Thu 4th, Tue 9th, Thu 11th."""
        result = generate_weekly_occurrences(THU_START, THU_END, [2, 4], 3)

        assert [o.start.date().isoformat() for o in result] == [
            "2024-01-04",
            "2024-01-09",
            "2024-01-11",
        ]

    def test_start_weekday_not_selected(self):
        """First occurrence is the next selected weekday after start."""
        result = generate_weekly_occurrences(THU_START, THU_END, [6], 2)

        assert [o.start for o in result] == [
            datetime(2024, 1, 6, 22, 0),
            datetime(2024, 1, 13, 22, 0),
        ]

    def test_earlier_weekday_in_same_week_is_skipped(self):
        """A Monday selection never produces a date before a Thursday start."""
        result = generate_weekly_occurrences(THU_START, THU_END, [1], 1)

        assert result[0].start == datetime(2024, 1, 8, 22, 0)

    def test_overnight_wrap_when_end_before_start(self):
        """End at 02:00 on the same date is read as 02:00 the next day."""
        end_same_day = datetime(2024, 1, 4, 2, 0)

        result = generate_weekly_occurrences(THU_START, end_same_day, [4], 2)

        for occ in result:
            assert occ.end - occ.start == timedelta(hours=4)

    def test_end_equal_to_start_wraps_to_full_day(self):
        result = generate_weekly_occurrences(THU_START, THU_START, [4], 1)

        assert result[0].end - result[0].start == timedelta(hours=24)

    def test_end_days_before_start_rejected(self):
        """One added day is not enough, so the range is invalid."""
        with pytest.raises(InvalidArgument):
            generate_weekly_occurrences(THU_START, THU_START - timedelta(days=2), [4], 3)

    def test_naive_and_aware_mix_rejected(self):
        with pytest.raises(InvalidArgument):
            generate_weekly_occurrences(pytz.UTC.localize(THU_START), THU_END, [4], 3)

    def test_duplicate_weekdays_are_ignored(self):
        result = generate_weekly_occurrences(THU_START, THU_END, [4, 4, 4], 2)

        assert [o.start.day for o in result] == [4, 11]

    def test_zero_count_returns_empty(self):
        assert generate_weekly_occurrences(THU_START, THU_END, [4], 0) == []

    def test_empty_weekdays_rejected(self):
        with pytest.raises(InvalidArgument):
            generate_weekly_occurrences(THU_START, THU_END, [], 3)

    def test_out_of_range_weekday_rejected(self):
        with pytest.raises(InvalidArgument):
            generate_weekly_occurrences(THU_START, THU_END, [7], 3)

    def test_time_of_day_kept_with_seconds(self):
        """Start seconds are kept, so the first day is not skipped."""
        start = datetime(2024, 1, 4, 22, 0, 30)
        result = generate_weekly_occurrences(start, start + timedelta(hours=3), [4], 2)

        assert result[0].start == start
        assert result[1].start == datetime(2024, 1, 11, 22, 0, 30)

    def test_invariants_over_many_inputs(self):
        """Count, duration, weekday, lower bound and strict ordering hold."""
        weekday_sets = [[0], [1, 3, 5], [0, 6], [0, 1, 2, 3, 4, 5, 6], [2, 4]]
        starts = [THU_START + timedelta(days=d, hours=h) for d in range(7) for h in (0, 5)]

        for weekdays in weekday_sets:
            for start in starts:
                end = start + timedelta(hours=3, minutes=30)
                result = generate_weekly_occurrences(start, end, weekdays, 12)

                assert len(result) == 12
                for occ in result:
                    assert occ.end - occ.start == timedelta(hours=3, minutes=30)
                    assert sunday_based_weekday(occ.start.date()) in weekdays
                    assert occ.start >= start
                for earlier, later in zip(result, result[1:]):
                    assert earlier.start < later.start

    def test_wall_clock_time_kept_across_dst(self):
        """A 22:00 New York event stays at 22:00 after the March change."""
        ny = pytz.timezone("America/New_York")
        start = ny.localize(datetime(2024, 3, 7, 22, 0))  # Thursday, EST
        end = start + timedelta(hours=4)

        result = generate_weekly_occurrences(start, end, [4], 2)

        second = result[1].start
        assert second.date().isoformat() == "2024-03-14"
        assert (second.hour, second.minute) == (22, 0)
        assert second.utcoffset() == timedelta(hours=-4)
        assert result[1].end - result[1].start == timedelta(hours=4)

    def test_generate_accepts_request_model(self):
        request = RecurrenceRequest(start=THU_START, end=THU_END, weekdays=[2, 4], count=3)

        result = generate(request)

        assert len(result) == 3
        assert result[1].start == datetime(2024, 1, 9, 22, 0)


class TestHelpers:
    """Test weekday conversion and count clamping."""

    def test_sunday_based_weekday(self):
        assert sunday_based_weekday(datetime(2024, 1, 7).date()) == 0  # Sunday
        assert sunday_based_weekday(datetime(2024, 1, 4).date()) == 4  # Thursday
        assert sunday_based_weekday(datetime(2024, 1, 6).date()) == 6  # Saturday

    @pytest.mark.parametrize(
        "value,expected",
        [(None, 10), (0, 10), (3, 3), (50, 50), (100, 50), (-3, 1), ("7", 7), ("abc", 10), (4.9, 4)],
    )
    def test_clamp_occurrence_count(self, value, expected):
        assert clamp_occurrence_count(value) == expected
