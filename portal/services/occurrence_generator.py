"""Weekly recurrence expansion for events.

Given the first occurrence of an event and a set of weekdays, produce the
next N occurrences on those weekdays, keeping the event's wall-clock start
time and its duration.

Weekdays are numbered 0=Sunday .. 6=Saturday, the convention admins pick
them in. Python's ``date.weekday()`` is 0=Monday, so conversions go through
``sunday_based_weekday``.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from portal.errors import InvalidArgument
from portal.metrics import OCCURRENCES_GENERATED_TOTAL
from portal.models import Occurrence, RecurrenceRequest

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)

MIN_OCCURRENCES = 1
MAX_OCCURRENCES = 50
DEFAULT_OCCURRENCES = 10


def sunday_based_weekday(day: date) -> int:
    """Return the weekday of ``day`` with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def clamp_occurrence_count(
    value: Optional[object],
    default: int = DEFAULT_OCCURRENCES,
    maximum: int = MAX_OCCURRENCES,
) -> int:
    """Clamp a user-supplied occurrence count to [1, maximum].

    Missing, zero or non-numeric input falls back to ``default``.
    """
    try:
        count = int(float(value)) if value is not None else 0
    except (TypeError, ValueError, OverflowError):
        count = 0
    if count == 0:
        count = default
    return max(MIN_OCCURRENCES, min(maximum, count))


def normalize_weekdays(weekdays: Iterable[int]) -> list[int]:
    """Deduplicate and sort weekdays, rejecting anything outside 0..6."""
    try:
        unique = sorted({int(wd) for wd in weekdays})
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Invalid weekday value: {e}") from e
    if not unique:
        raise InvalidArgument("At least one weekday is required for recurrence.")
    out_of_range = [wd for wd in unique if wd < 0 or wd > 6]
    if out_of_range:
        raise InvalidArgument(f"Weekdays must be in 0..6 (0=Sunday), got {out_of_range}")
    return unique


def overnight_duration(start: datetime, end: datetime) -> timedelta:
    """Duration of a range whose end may be on the next day.

    An ``end`` at or before ``start`` gets 24h added; if it is still not
    after ``start`` the range is rejected.

    Raises:
        InvalidArgument: if ``end`` is more than a day before ``start``, or
            only one of them carries a timezone
    """
    try:
        duration = end - start
    except TypeError as e:
        raise InvalidArgument(f"Start and end must both have a timezone or neither: {e}") from e
    if duration <= timedelta(0):
        duration += ONE_DAY
    if duration <= timedelta(0):
        raise InvalidArgument("End date/time must be after start date/time.")
    return duration


def _at_time_of_day(day: date, template: datetime) -> datetime:
    """Combine ``day`` with the wall-clock time (and zone) of ``template``."""
    naive = datetime.combine(day, template.time())
    tz = template.tzinfo
    if tz is None:
        return naive
    # pytz zones must localize to pick the right offset for that date
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def add_duration(moment: datetime, duration: timedelta) -> datetime:
    """Add an absolute duration, keeping the zone of ``moment``."""
    if moment.tzinfo is None:
        return moment + duration
    return (moment.astimezone(timezone.utc) + duration).astimezone(moment.tzinfo)


def generate_weekly_occurrences(
    start: datetime,
    end: datetime,
    weekdays: Iterable[int],
    count: int,
) -> list[Occurrence]:
    """Expand a weekly recurrence into concrete occurrences.

    The first occurrence is the earliest selected weekday on or after
    ``start``; nothing is ever generated before ``start``. An ``end`` at or
    before ``start`` is read as an overnight range and gets 24h added.

    Args:
        start: Start instant of the first occurrence
        end: End instant of the first occurrence (defines the duration)
        weekdays: Weekdays to repeat on, 0=Sunday .. 6=Saturday
        count: Number of occurrences to produce

    Returns:
        Occurrences in strictly increasing start order, ``count`` long
        (empty when ``count < 1``)

    Raises:
        InvalidArgument: if ``weekdays`` is empty or out of range, or the
            range is invalid (see ``overnight_duration``)
    """
    selected = normalize_weekdays(weekdays)
    duration = overnight_duration(start, end)
    if count < 1:
        return []

    results: list[Occurrence] = []
    cursor = start.date()

    while len(results) < count:
        cursor_weekday = sunday_based_weekday(cursor)
        offsets = sorted((wd - cursor_weekday) % 7 for wd in selected)

        for offset in offsets:
            occ_start = _at_time_of_day(cursor + timedelta(days=offset), start)
            if occ_start < start:
                continue

            results.append(Occurrence(start=occ_start, end=add_duration(occ_start, duration)))
            if len(results) >= count:
                break

        cursor += ONE_WEEK

    OCCURRENCES_GENERATED_TOTAL.inc(len(results))
    logger.debug(
        f"[OccurrenceGenerator] Generated {len(results)} occurrences "
        f"from {start.isoformat()} on weekdays {selected}"
    )
    return results


def generate(request: RecurrenceRequest) -> list[Occurrence]:
    """Run ``generate_weekly_occurrences`` for a RecurrenceRequest."""
    return generate_weekly_occurrences(
        start=request.start,
        end=request.end,
        weekdays=request.weekdays,
        count=request.count,
    )
