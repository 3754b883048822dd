"""
Date/time normalization shared by the provider adapters.

Providers disagree on how they express instants: ISO strings with a "Z"
suffix, separate date and time fields, or naive local strings. Everything
here works on ISO-8601 strings and returns ISO-8601 strings so the
canonical record stays JSON-serializable.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import pytz


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt


def to_utc_iso(dt: datetime) -> str:
    """2024-03-01T10:05:00.000Z"""
    utc = dt.astimezone(pytz.UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def utc_day_window(day: date) -> Tuple[str, str]:
    """UTC window [start of day, start of next day) as ISO strings."""
    start = pytz.UTC.localize(datetime(day.year, day.month, day.day))
    end = start + timedelta(days=1)
    return (
        start.isoformat().replace("+00:00", "Z"),
        end.isoformat().replace("+00:00", "Z"),
    )


def to_local(utc_value: str, timezone: Optional[str]) -> Optional[str]:
    """
    Convert a UTC timestamp to wall-clock time in an IANA timezone.

    The result keeps milliseconds and drops the offset, e.g.
    ("2024-03-01T10:05:00Z", "Europe/Paris") -> "2024-03-01T11:05:00.000".
    """
    dt = parse_iso(utc_value)
    if dt is None or not timezone:
        return None
    try:
        tz = pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        return None
    local = dt.astimezone(tz)
    return local.strftime("%Y-%m-%dT%H:%M:%S.") + f"{local.microsecond // 1000:03d}"


def combine_date_time(day: Optional[str], time_of_day: Optional[str], utc: bool = True) -> Optional[str]:
    """
    Join separate date ("2024-03-01") and time ("10:05" / "10:05:00") fields.

    UTC results end in "Z"; local results are left without an offset.
    """
    if not day or not time_of_day:
        return None
    if len(time_of_day) == 5:
        time_of_day = f"{time_of_day}:00"
    try:
        parsed = datetime.strptime(f"{day}T{time_of_day}", "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        return None
    text = parsed.strftime("%Y-%m-%dT%H:%M:%S.000")
    return f"{text}Z" if utc else text


def minutes_between(scheduled: Optional[str], actual: Optional[str]) -> Optional[int]:
    """Rounded minutes from scheduled to actual; None when either side is unparsable."""
    start = parse_iso(scheduled)
    end = parse_iso(actual)
    if start is None or end is None:
        return None
    return round((end - start).total_seconds() / 60)


def is_same_utc_date(value: Optional[str], day: date) -> bool:
    dt = parse_iso(value)
    if dt is None:
        return False
    return dt.astimezone(pytz.UTC).date() == day
