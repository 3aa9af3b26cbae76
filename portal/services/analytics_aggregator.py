"""Rolling-window analytics over per-day and per-review documents.

All functions here are pure: they take already-fetched documents plus the
evaluation date/time and return summary models. A malformed document never
aborts a summary; it is coerced to a neutral contribution and skipped.

Ranking rule used everywhere: descending by count, ties broken by the order
in which a key was first seen.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

from portal.errors import MalformedRecord
from portal.metrics import MALFORMED_RECORDS_SKIPPED_TOTAL
from portal.models.coercion import is_date_key, parse_date_key, to_count, to_datetime
from portal.models import (
    DailyGoingDay,
    DailyGoingSummary,
    ReviewRecord,
    ReviewsSummary,
    VibeDailyDay,
    VibeDailySummary,
    VibeTagCount,
)

logger = logging.getLogger(__name__)

RECENT_DAYS_WINDOW = 7
REVIEWS_RECENT_DAYS = 30
TOP_VIBE_TAGS_LIMIT = 4
RECENT_REVIEWS_LIMIT = 8
VALID_RATINGS = (1, 2, 3, 4, 5)


def parse_rating(value: Any) -> int:
    """Return a rating in 1..5 or raise MalformedRecord.

    Integral floats and numeric strings are accepted ("4", 4.0); booleans,
    fractions and anything out of range are not.
    """
    if value is None or isinstance(value, bool):
        raise MalformedRecord(f"invalid rating: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedRecord(f"invalid rating: {value!r}")
    if not number.is_integer() or int(number) not in VALID_RATINGS:
        raise MalformedRecord(f"rating out of range: {value!r}")
    return int(number)


# =============================================================================
# BUCKET-AND-RANK HELPERS
# =============================================================================

def merge_counts(rows: Iterable[Mapping[str, int]]) -> dict[str, int]:
    """Sum category counts across rows; keys keep first-seen order."""
    merged: dict[str, int] = {}
    for counts in rows:
        for key, value in counts.items():
            merged[key] = merged.get(key, 0) + to_count(value)
    return merged


def rank_counts(counts: Mapping[str, int], limit: Optional[int] = None) -> list[tuple[str, int]]:
    """Rank keys by count, descending; ties keep insertion order.

    ``sorted`` is stable, so equal counts stay in first-seen order.
    """
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def top_key(counts: Mapping[str, int]) -> Optional[str]:
    """Return the highest-count key, or None for an empty mapping."""
    ranked = rank_counts(counts, limit=1)
    return ranked[0][0] if ranked else None


def recent_days(
    rows: Iterable[Any],
    n: Optional[int] = None,
    not_after: Optional[date] = None,
) -> list[Any]:
    """Return rows for the ``n`` most recent distinct date keys, newest first.

    Rows need a ``date_key`` attribute; rows with a malformed key are dropped
    and only the first row per key is kept. Keys later than ``not_after`` are
    ignored, so a trailing window always ends at the evaluation date.
    """
    last_key = not_after.isoformat() if not_after else None
    seen: set[str] = set()
    valid = []
    for row in rows:
        key = getattr(row, "date_key", None)
        if not is_date_key(key) or key in seen:
            logger.debug(f"[AnalyticsAggregator] Skipping day row with key {key!r}")
            continue
        if last_key is not None and key > last_key:
            continue
        seen.add(key)
        valid.append(row)
    valid.sort(key=lambda r: r.date_key, reverse=True)
    return valid if n is None else valid[:n]


def _day_votes(day: VibeDailyDay) -> int:
    if day.total_votes is not None:
        return to_count(day.total_votes)
    return sum(to_count(v) for v in day.counts.values())


# =============================================================================
# SUMMARIES
# =============================================================================

def summarize_daily_going(
    days: Iterable[DailyGoingDay],
    today: date,
    window: int = RECENT_DAYS_WINDOW,
) -> DailyGoingSummary:
    """Summarize attendance buckets.

    Args:
        days: Attendance buckets in any order
        today: Calendar date the summary is evaluated for
        window: Number of most recent distinct days in the trailing window

    Returns:
        DailyGoingSummary with ``today`` <= ``last7``
    """
    rows = recent_days(days, not_after=today)
    today_key = today.isoformat()

    today_count = sum(to_count(r.count) for r in rows if r.date_key == today_key)
    last7 = sum(to_count(r.count) for r in rows[:window])

    return DailyGoingSummary(
        total_days=len(rows),
        today=today_count,
        last7=last7,
        days=rows,
    )


def summarize_vibe_daily(
    days: Iterable[VibeDailyDay],
    today: date,
    window: int = RECENT_DAYS_WINDOW,
) -> VibeDailySummary:
    """Summarize daily vibe votes over today and the trailing window.

    Top vibes come from the summed category counts. For today, a stored
    ``top_vibe`` is used only when the day has no counts.
    """
    rows = recent_days(days, not_after=today)
    today_key = today.isoformat()

    last7_rows = rows[:window]
    last7_counts = merge_counts(r.counts for r in last7_rows)
    last7_votes = sum(_day_votes(r) for r in last7_rows)

    today_row = next((r for r in rows if r.date_key == today_key), None)
    today_counts: dict[str, int] = dict(today_row.counts) if today_row else {}
    today_top = top_key(today_counts)
    if today_top is None and today_row is not None and today_row.top_vibe:
        today_top = today_row.top_vibe

    return VibeDailySummary(
        total_days=len(rows),
        today_votes=_day_votes(today_row) if today_row else 0,
        last7_votes=last7_votes,
        today_top_vibe=today_top,
        top_vibe_last7=top_key(last7_counts),
        today_counts=today_counts,
        last7_counts=last7_counts,
        days=rows,
        latest=rows[0] if rows else None,
    )


def _review_moment(record: ReviewRecord, tz) -> Optional[datetime]:
    """When a review happened: ``created_at``, else local midnight of the visit date."""
    created = to_datetime(record.created_at, tz=tz)
    if created is not None:
        return created
    visit_day = parse_date_key(record.visit_date_key)
    if visit_day is None:
        return None
    return to_datetime(datetime.combine(visit_day, datetime.min.time()), tz=tz)


def _comparable(moment: datetime, now: datetime) -> datetime:
    if now.tzinfo is None and moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    if now.tzinfo is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=now.tzinfo)
    return moment


def summarize_reviews(
    records: Iterable[ReviewRecord],
    now: datetime,
    recent_days_window: int = REVIEWS_RECENT_DAYS,
    top_tags_limit: int = TOP_VIBE_TAGS_LIMIT,
    recent_limit: int = RECENT_REVIEWS_LIMIT,
) -> ReviewsSummary:
    """Compute review statistics.

    Every record counts toward ``total``. Only ratings that are integers in
    1..5 enter the distribution and the mean. ``last30_days`` counts records
    whose moment falls within ``[now - 30 days, now]``.
    ``recent`` lists the newest reviews first; undated ones go last, in
    input order.

    Args:
        records: Review documents
        now: Evaluation instant
        recent_days_window: Size of the recent window in days
        top_tags_limit: Number of vibe tags to rank
        recent_limit: Number of reviews kept in ``recent``

    Returns:
        ReviewsSummary
    """
    distribution = {rating: 0 for rating in VALID_RATINGS}
    rating_sum = 0
    rating_count = 0
    vibe_counts: dict[str, int] = {}
    recent = 0
    total = 0
    window_start = now - timedelta(days=recent_days_window)

    latest: Optional[ReviewRecord] = None
    latest_moment: Optional[datetime] = None
    dated: list[tuple[datetime, ReviewRecord]] = []
    undated: list[ReviewRecord] = []

    for record in records:
        total += 1

        try:
            rating = parse_rating(record.rating)
            distribution[rating] += 1
            rating_sum += rating
            rating_count += 1
        except MalformedRecord as e:
            MALFORMED_RECORDS_SKIPPED_TOTAL.labels(collection="reviews").inc()
            logger.debug(f"[AnalyticsAggregator] Review {record.review_id}: {e}")

        vibe = str(record.vibe).strip() if record.vibe is not None else ""
        if vibe:
            vibe_counts[vibe] = vibe_counts.get(vibe, 0) + 1

        moment = _review_moment(record, now.tzinfo)
        if moment is None:
            if latest is None:
                latest = record
            undated.append(record)
            continue
        moment = _comparable(moment, now)
        dated.append((moment, record))
        if window_start <= moment <= now:
            recent += 1
        if latest_moment is None or moment > latest_moment:
            latest, latest_moment = record, moment

    dated.sort(key=lambda item: item[0], reverse=True)
    newest = [record for _, record in dated] + undated

    return ReviewsSummary(
        total=total,
        avg_rating=rating_sum / rating_count if rating_count else 0.0,
        last30_days=recent,
        rating_distribution=distribution,
        top_vibe_tags=[
            VibeTagCount(vibe=vibe, count=count)
            for vibe, count in rank_counts(vibe_counts, limit=top_tags_limit)
        ],
        latest=latest,
        recent=newest[:recent_limit],
    )
