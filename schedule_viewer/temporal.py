"""
Date/time helpers for the timeline view.

The solver backend serializes LocalDateTime values without a zone offset.
Those are wall-clock times and are parsed into naive datetimes here, never
shifted through UTC, so bars line up with the hours the solver chose.
"""

import math
import re
from datetime import date, datetime, time

MINUTES_PER_DAY = 24 * 60

_LOCAL_DATETIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d+))?)?"
)
_TIME_OF_DAY_RE = re.compile(r"(\d{1,2}):(\d{2})")


def round_half_up(value: float) -> int:
    """Round the way the browser did (Math.round), not banker's rounding."""
    return math.floor(value + 0.5)


def parse_local_datetime(value: str | datetime | date | None) -> datetime | None:
    """
    Parse a backend date-time string as naive local wall-clock time.

    Strings of the form YYYY-MM-DDTHH:MM[:SS[.fff]] are read field by field and
    any trailing zone designator is ignored. Anything else goes through
    datetime.fromisoformat; aware results are converted to local time.

    Returns:
        The parsed datetime, or None when the value is empty or unparseable
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    match = _LOCAL_DATETIME_RE.search(text)
    if match:
        year, month, day, hour, minute, second, fraction = match.groups()
        microsecond = int((fraction + "000000")[:6]) if fraction else 0
        try:
            return datetime(
                int(year), int(month), int(day),
                int(hour), int(minute), int(second or 0), microsecond,
            )
        except ValueError:
            pass

    # Generic fallback, e.g. plain dates or space-separated date-times
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def time_of_day(value: str | datetime | time | None) -> str | None:
    """
    Extract a zero-padded HH:MM time of day.

    Accepts bare times ("6:00", "22:00:00") as well as full date-time strings,
    in which case only the clock part is used.
    """
    if value is None or value == "":
        return None
    if isinstance(value, (datetime, time)):
        return value.strftime("%H:%M")

    match = _TIME_OF_DAY_RE.search(str(value))
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def minutes_of_day(value: str | datetime | time | None) -> int | None:
    """Minutes since midnight for a time-of-day value, or None."""
    hhmm = time_of_day(value)
    if hhmm is None:
        return None
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_between(start: datetime, end: datetime) -> float:
    """Signed number of minutes from start to end."""
    return (end - start).total_seconds() / 60
