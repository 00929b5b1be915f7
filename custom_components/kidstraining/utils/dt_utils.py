# File: utils/dt_utils.py
"""Date and time utilities for KidsTraining.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_now_local: Get current datetime in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - dt_now_utc: Get current datetime in UTC
    - as_local: Convert a datetime to the local timezone
    - dt_parse: Normalize str/date/datetime input to an aware datetime
    - to_date_key: Local calendar day key (YYYY-MM-DD) for any input
    - date_key_to_date: Parse a date key back into a date
    - shift_date_key: Move a date key by a number of days
    - days_between: Calendar-day distance between two date keys
"""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - replaced during integration setup
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

DATE_KEY_FORMAT = "%Y-%m-%d"


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Example:
        datetime.date(2025, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware)."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string.

    Example:
        "2025-04-07T14:30:00-05:00"
    """
    return dt_now_local(tz).isoformat()


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


# ==============================================================================
# Parsing / Conversion
# ==============================================================================


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to be UTC.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


def dt_parse(
    dt_input: str | date | datetime | None,
    tz: ZoneInfo | None = None,
) -> datetime | None:
    """Normalize str/date/datetime input into a timezone-aware datetime.

    Strings are parsed with dateutil's ISO 8601 parser, so both "2025-04-07"
    and "2025-04-07T14:30:00+02:00" are accepted. Naive values are placed in
    the local timezone. A bare date becomes local noon so that converting it
    to another timezone does not move it to a neighbouring day.

    Returns:
        Aware datetime, or None if the input could not be parsed.
    """
    if not dt_input:
        return None

    tz_info = tz or DEFAULT_TIME_ZONE

    if isinstance(dt_input, datetime):
        result = dt_input
    elif isinstance(dt_input, date):
        result = datetime(dt_input.year, dt_input.month, dt_input.day, 12)
    elif isinstance(dt_input, str):
        try:
            result = dateutil_parser.isoparse(dt_input)
        except (ValueError, OverflowError):
            _LOGGER.debug("DEBUG: Could not parse datetime input '%s'", dt_input)
            return None
        if len(dt_input.strip()) == 10:
            result = result.replace(hour=12)
    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)
    return result


def to_date_key(
    dt_input: str | date | datetime | None, tz: ZoneInfo | None = None
) -> str | None:
    """Return the local calendar-day key (YYYY-MM-DD) for any supported input.

    Example:
        to_date_key("2025-04-07T23:30:00+00:00", ZoneInfo("Asia/Tokyo")) → "2025-04-08"
    """
    if isinstance(dt_input, date) and not isinstance(dt_input, datetime):
        return dt_input.isoformat()
    parsed = dt_parse(dt_input, tz)
    if parsed is None:
        return None
    return as_local(parsed, tz).strftime(DATE_KEY_FORMAT)


def date_key_to_date(date_key: str) -> date | None:
    """Parse a YYYY-MM-DD key into a date, or None if malformed."""
    try:
        return datetime.strptime(date_key, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError):
        return None


def shift_date_key(date_key: str, days: int) -> str:
    """Return the date key ``days`` calendar days after ``date_key``.

    Raises:
        ValueError: If ``date_key`` is not a valid YYYY-MM-DD key.
    """
    parsed = date_key_to_date(date_key)
    if parsed is None:
        raise ValueError(f"Invalid date key: {date_key!r}")
    return (parsed + relativedelta(days=days)).isoformat()


def days_between(earlier_key: str, later_key: str) -> int | None:
    """Return the calendar-day distance between two date keys.

    Returns None if either key is malformed.
    """
    earlier = date_key_to_date(earlier_key)
    later = date_key_to_date(later_key)
    if earlier is None or later is None:
        return None
    return (later - earlier).days
