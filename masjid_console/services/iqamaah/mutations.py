# masjid_console/services/iqamaah/mutations.py
"""
Builds range create/update/delete requests for the display backend.

The backend replaces ranges by key instead of merging them, so an update always
carries the original key (oldStartDate, oldEndDate, oldTime) plus the complete
new range. Every request is validated here; an invalid range never leaves the
console.
"""
from typing import Any, Dict, Optional, Tuple

from ...utils.constants import Prayers
from ...utils.time_utils import format_iso_date, is_valid_time, parse_iso_date


class RangeValidationError(ValueError):
    """Raised when a range fails validation before any request is built."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _check_prayer(prayer: str) -> None:
    if prayer not in Prayers.ALL:
        raise RangeValidationError(f"Unknown prayer '{prayer}'")


def validate_range(start_date: Any, end_date: Any, time: Any) -> Tuple[str, str, str]:
    """
    Checks a range the way the editor form does.

    Returns:
        tuple: (startDate, endDate, time) as they should be sent, with
               surrounding whitespace removed.
    """
    start = parse_iso_date(start_date)
    end = parse_iso_date(end_date)
    if not start or not end:
        raise RangeValidationError("Please select start and end dates")
    if start > end:
        raise RangeValidationError("Start date must be before end date")
    if not is_valid_time(time):
        raise RangeValidationError("Time must be in HH:MM (24h) format")
    return format_iso_date(start), format_iso_date(end), str(time).strip()


def plan_create(prayer: str, start_date: str, end_date: str, time: str) -> Dict[str, Any]:
    _check_prayer(prayer)
    start_date, end_date, time = validate_range(start_date, end_date, time)
    return {
        'prayer': prayer,
        'startDate': start_date,
        'endDate': end_date,
        'time': time,
    }


def plan_update(prayer: str, original: Optional[Dict[str, Any]], edited: Dict[str, Any]) -> Dict[str, Any]:
    """
    Builds an update keyed by the range as it was last loaded.

    Args:
        prayer (str): Prayer the range belongs to.
        original (dict): The range as loaded from the backend. When unknown,
                         the edited range is used as its own key.
        edited (dict): The full new range.
    """
    _check_prayer(prayer)
    edited = edited or {}
    start_date, end_date, time = validate_range(edited.get('startDate'), edited.get('endDate'), edited.get('time'))
    original = original or edited
    return {
        'prayer': prayer,
        'oldStartDate': original.get('startDate'),
        'oldEndDate': original.get('endDate'),
        'oldTime': original.get('time'),
        'startDate': start_date,
        'endDate': end_date,
        'time': time,
    }


def plan_delete(prayer: str, time_range: Dict[str, Any]) -> Dict[str, Any]:
    """
    Several Jumuah slots can share a date span, so a Jumuah delete also
    sends the time to pick the slot.
    """
    _check_prayer(prayer)
    time_range = time_range or {}
    start = parse_iso_date(time_range.get('startDate'))
    end = parse_iso_date(time_range.get('endDate'))
    if not start or not end:
        raise RangeValidationError("Please provide valid dates")

    request = {
        'prayer': prayer,
        'startDate': format_iso_date(start),
        'endDate': format_iso_date(end),
    }
    if prayer == Prayers.JUMUAH and time_range.get('time'):
        request['time'] = str(time_range['time']).strip()
    return request
