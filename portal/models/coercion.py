"""Coercion helpers for loosely typed stored documents.

Stored analytics documents are written by several clients and do not
always agree on types. These helpers turn whatever was stored into clean
values, falling back to a neutral value instead of raising.
"""
import logging
import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pytz

logger = logging.getLogger(__name__)

DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_date_key(value: Any) -> bool:
    """Check that ``value`` is a ``YYYY-MM-DD`` string."""
    return isinstance(value, str) and bool(DATE_KEY_RE.match(value))


def parse_date_key(value: Any) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` key, returning None when it is not one."""
    if not is_date_key(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def to_count(value: Any) -> int:
    """Coerce a stored count to a non-negative int (0 when unusable)."""
    if isinstance(value, bool):
        return 0
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(n, 0)


def normalize_counts(raw: Any) -> dict[str, int]:
    """Turn a raw category->count mapping into clean ints, keeping order."""
    if not isinstance(raw, Mapping):
        return {}
    return {str(k): to_count(v) for k, v in raw.items()}


def to_datetime(value: Any, tz=None) -> Optional[datetime]:
    """Read a stored instant (datetime, ISO string or epoch seconds).

    Naive results are interpreted in ``tz`` when one is given.
    """
    parsed: Optional[datetime] = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value, tz=tz)
        except (OverflowError, OSError, ValueError):
            return None
    if parsed is None:
        return None
    if tz is not None:
        parsed = localize(parsed, tz)
    return parsed


def resolve_timezone(name: Optional[str], fallback: str = "UTC"):
    """Return a pytz timezone, falling back when ``name`` is unknown."""
    for candidate in (name, fallback):
        if not candidate:
            continue
        try:
            return pytz.timezone(candidate)
        except pytz.UnknownTimeZoneError:
            logger.error(f"[Coercion] Unknown timezone {candidate!r}")
    return pytz.UTC


def localize(value: datetime, tz) -> datetime:
    """Attach ``tz`` to a naive datetime; aware values are returned unchanged."""
    if value.tzinfo is not None:
        return value
    return tz.localize(value) if hasattr(tz, "localize") else value.replace(tzinfo=tz)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.UTC)


def utc_sort_key(value: datetime) -> datetime:
    """Comparable key for a mix of naive and aware datetimes (naive read as UTC)."""
    return value.astimezone(pytz.UTC) if value.tzinfo is not None else pytz.UTC.localize(value)
