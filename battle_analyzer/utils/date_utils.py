import math
from datetime import date, datetime, timezone
from typing import Any, Optional

# Larger epoch values are JavaScript-style milliseconds (1e11 s is year 5138).
MILLISECOND_EPOCH_THRESHOLD = 1e11


def parse_battle_date(value: Any) -> Optional[datetime]:
    """
    Coerce a stored battle date into an aware UTC datetime.

    Accepts datetime/date objects, ISO-8601 strings, POSIX seconds or
    milliseconds (magnitudes above 1e11 are read as milliseconds) and
    Firestore-style ``{"seconds": ..., "nanoseconds": ...}`` mappings.
    Returns None for anything that cannot be read as a point in time.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        if abs(value) > MILLISECOND_EPOCH_THRESHOLD:
            value = value / 1000
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, dict) and "seconds" in value:
        seconds = value.get("seconds")
        nanos = value.get("nanoseconds") or 0
        if not isinstance(seconds, (int, float)) or not isinstance(nanos, (int, float)):
            return None
        return parse_battle_date(seconds + nanos / 1e9)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def get_week_key(when: Optional[datetime]) -> str:
    """Get week identifier (YYYY-WXX format) for a battle date."""
    if when is None:
        return "Unknown"
    iso_calendar = when.isocalendar()
    return f"{iso_calendar[0]}-W{iso_calendar[1]:02d}"
