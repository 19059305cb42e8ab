# masjid_console/services/iqamaah/ranges.py
"""
Compression of day-by-day iqamaah records into contiguous date ranges.

A range is a maximal run of consecutive calendar days on which one prayer
(and, for Jumuah, one slot) had the same time. Placeholder days never belong
to a range and always end the run in progress.
"""
from typing import Any, Dict, Iterable, List, Optional

from ...utils.constants import Prayers
from ...utils.time_utils import (
    add_days,
    is_placeholder_time,
    normalize_date_value,
    normalize_time_value,
)


def make_range(start_date: str, end_date: str, time: str, slot_index: Optional[int] = None) -> Dict[str, Any]:
    time_range = {'startDate': start_date, 'endDate': end_date, 'time': time}
    if slot_index is not None:
        time_range['slotIndex'] = slot_index
    return time_range


def _sort_key(time_range: Dict[str, Any]):
    slot = time_range.get('slotIndex')
    return str(time_range.get('startDate') or ''), slot if isinstance(slot, int) else -1


def sort_ranges(ranges: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Ascending by startDate; Jumuah slots starting the same day keep slot order."""
    return sorted(ranges, key=_sort_key)


def _sorted_records(days: Any) -> List[Dict[str, Any]]:
    if not isinstance(days, (list, tuple)):
        return []
    records = [row for row in days if isinstance(row, dict)]
    return sorted(records, key=lambda row: normalize_date_value(row.get('date')))


def _extends(run: Dict[str, Any], date: str, time: str) -> bool:
    return add_days(run['endDate'], 1) == date and run['time'] == time


def _jumuah_values(raw: Any) -> List[Any]:
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw] if raw else []


def compress(days: Any, prayer: str) -> List[Dict[str, Any]]:
    """
    Builds the canonical range list for one prayer from daily records.

    Args:
        days (list): Records like {'date': 'YYYY-MM-DD', 'fajr': '05:40', ...}.
                     The input is never modified.
        prayer (str): One of Prayers.ALL.

    Returns:
        list: Ranges sorted by startDate.
    """
    records = _sorted_records(days)
    if prayer == Prayers.JUMUAH:
        return _compress_slots(records)

    ranges = []
    current = None
    for row in records:
        date = normalize_date_value(row.get('date'))
        time = normalize_time_value(row.get(prayer))

        if is_placeholder_time(time):
            if current:
                ranges.append(current)
                current = None
            continue

        if current and _extends(current, date, time):
            current['endDate'] = date
            continue

        if current:
            ranges.append(current)
        current = make_range(date, date, time)

    if current:
        ranges.append(current)
    return sort_ranges(ranges)


def _compress_slots(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Jumuah can have several congregations a day, e.g. ["13:30", "14:15"].
    Each slot index keeps its own open run; a slot missing from a day closes it.
    """
    ranges = []
    runs: Dict[int, Dict[str, Any]] = {}

    for row in records:
        date = normalize_date_value(row.get('date'))
        times = _jumuah_values(row.get(Prayers.JUMUAH))

        for idx in sorted(runs):
            if idx >= len(times):
                ranges.append(runs.pop(idx))

        for idx, value in enumerate(times):
            time = normalize_time_value(value)
            run = runs.get(idx)

            if is_placeholder_time(time):
                if run:
                    ranges.append(runs.pop(idx))
                continue

            if run and _extends(run, date, time):
                run['endDate'] = date
                continue

            if run:
                ranges.append(run)
            runs[idx] = make_range(date, date, time, slot_index=idx)

    for idx in sorted(runs):
        ranges.append(runs[idx])
    return sort_ranges(ranges)
