# masjid_console/utils/time_utils.py
import calendar
import datetime
import re
from typing import Any, Dict, Optional, Tuple

PLACEHOLDER_TIMES = frozenset({"", "--:--", "00:00"})

# H:MM, HH:MM or HH:MM:SS as the backend tends to send them
_LOOSE_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")
# What the editor accepts for a new or edited range
_STRICT_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

MONTH_NAMES = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
]


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_date_value(value: Any) -> str:
    """
    Returns the YYYY-MM-DD part of a date or ISO timestamp string.
    Shorter strings are returned unchanged (after stripping).
    """
    s = _clean(value)
    if len(s) >= 10:
        return s[:10]
    return s


def normalize_time_value(value: Any) -> str:
    """
    Rewrites H:MM and HH:MM:SS to canonical HH:MM.
    Anything that is not a recognisable time of day is returned as-is.
    """
    s = _clean(value)
    if not s:
        return ""
    match = _LOOSE_TIME_RE.match(s)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return s


def is_placeholder_time(value: Any) -> bool:
    """True when the value means 'no time recorded' for that day."""
    return _clean(value) in PLACEHOLDER_TIMES


def is_valid_time(value: Any) -> bool:
    return bool(_STRICT_TIME_RE.match(_clean(value)))


def parse_iso_date(value: Any) -> Optional[datetime.date]:
    """
    Parses a YYYY-MM-DD string into a datetime.date object.
    Returns None if parsing fails.
    """
    s = _clean(value)
    if not s:
        return None
    try:
        return datetime.datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def format_iso_date(date_obj: Optional[datetime.date]) -> Optional[str]:
    if not date_obj:
        return None
    return date_obj.strftime("%Y-%m-%d")


def add_days(value: Any, days: int) -> Optional[str]:
    """
    Shifts an ISO date string by a number of calendar days.
    Returns None if the input is not a valid date.
    """
    date_obj = parse_iso_date(value)
    if not date_obj:
        return None
    return format_iso_date(date_obj + datetime.timedelta(days=days))


def month_bounds(year: int, month: int) -> Dict[str, Any]:
    """
    First and last day of a month plus its label, used for the
    'full month' shortcut and the month header of the editor.

    Args:
        year (int): Four digit year.
        month (int): Month number, 1-12.

    Returns:
        dict: {'start', 'end', 'daysInMonth', 'monthLabel'}
    """
    days_in_month = calendar.monthrange(year, month)[1]
    return {
        'start': format_iso_date(datetime.date(year, month, 1)),
        'end': format_iso_date(datetime.date(year, month, days_in_month)),
        'daysInMonth': days_in_month,
        'monthLabel': f"{MONTH_NAMES[month - 1]} {year}",
    }


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Moves (year, month) forward or back by delta months, rolling the year over."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
