"""Timezone resolution and DST-aware wall-clock <-> instant conversion.

Wall-clock times that fall in a DST gap (the skipped 2 AM hour in spring)
resolve forward: 02:30 on a spring-forward day becomes 03:30 daylight time.
Ambiguous times in the repeated fall-back hour resolve to the first
occurrence (daylight time). Both follow from ``fold=0``.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import CONFIG

logger = logging.getLogger(__name__)

TIMEZONE_ABBREVIATIONS = {
    "PT": "America/Los_Angeles",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
    "MT": "America/Denver",
    "MST": "America/Denver",
    "MDT": "America/Denver",
    "CT": "America/Chicago",
    "CST": "America/Chicago",
    "CDT": "America/Chicago",
    "ET": "America/New_York",
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "UTC": "UTC",
    "GMT": "UTC",
}

_TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def resolve_zone(indicator: Optional[str], default: Optional[str] = None) -> str:
    """Map an abbreviation or IANA name to a canonical zone id. Never raises."""
    fallback = default or CONFIG.default_timezone
    candidate = (indicator or "").strip()
    if not candidate:
        return fallback

    mapped = TIMEZONE_ABBREVIATIONS.get(candidate.upper())
    if mapped:
        return mapped

    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unsupported timezone '%s', falling back to %s", candidate, fallback)
        return fallback
    return candidate


def _parse_wall_clock(local_date: str, local_time: str) -> datetime:
    day = datetime.strptime(local_date.strip(), "%Y-%m-%d")
    for fmt in _TIME_FORMATS:
        try:
            t = datetime.strptime(local_time.strip(), fmt)
        except ValueError:
            continue
        return day.replace(hour=t.hour, minute=t.minute, second=t.second)
    raise ValueError(f"Unrecognized time of day: {local_time!r}")


def to_instant(local_date: str, local_time: str, zone: str) -> datetime:
    """Attach ``zone`` to a calendar date and wall-clock time, returning an aware UTC datetime.

    The UTC offset is looked up for that specific date, so the same wall-clock
    time maps to different instants in winter and summer.
    """
    naive = _parse_wall_clock(local_date, local_time)
    local = naive.replace(tzinfo=ZoneInfo(zone), fold=0)
    return local.astimezone(timezone.utc)


def format_instant(instant: datetime, zone: str) -> str:
    """ISO-8601 with seconds and an explicit numeric offset, e.g. ``2025-10-12T14:00:00-07:00``."""
    if instant.tzinfo is None:
        raise ValueError("format_instant requires a timezone-aware datetime")
    local = instant.astimezone(ZoneInfo(zone))
    offset = local.utcoffset()
    total_minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{local.strftime('%Y-%m-%dT%H:%M:%S')}{sign}{hours:02d}:{minutes:02d}"


def parse_instant(value: str) -> datetime:
    """Inverse of :func:`format_instant`: parse an offset-qualified ISO string to aware UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {value!r}")
    return parsed.astimezone(timezone.utc)


def to_rfc3339_utc(instant: datetime) -> str:
    """UTC timestamp in the ``...Z`` form the Routes API expects for departureTime."""
    return instant.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_12_hour(instant: datetime, zone: str) -> str:
    """e.g. ``7:00 AM PDT``"""
    local = instant.astimezone(ZoneInfo(zone))
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {local.strftime('%p')} {local.tzname()}"


def format_full_datetime(instant: datetime, zone: str) -> str:
    """e.g. ``Sunday, October 5th at 7:00 AM PDT``"""
    local = instant.astimezone(ZoneInfo(zone))
    return f"{local.strftime('%A, %B')} {_ordinal(local.day)} at {format_12_hour(instant, zone)}"
