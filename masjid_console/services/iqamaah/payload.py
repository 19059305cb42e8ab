# masjid_console/services/iqamaah/payload.py
"""
Normalization of whatever the display backend returns for a month.

The backend has answered with at least three shapes over time: a bare list of
daily records, an object wrapping that list, and an object of pre-aggregated
ranges keyed by prayer (with several spellings). Every shape ends up as the same
{prayer: [range, ...]} map. Unknown shapes degrade to empty lists; nothing here
raises on bad input.
"""
from typing import Any, Dict, List

from ...utils.constants import Prayers
from ...utils.time_utils import normalize_date_value, normalize_time_value
from .ranges import compress, sort_ranges

# Keys under which a wrapped list of daily records may appear, first match wins
DAILY_CONTAINER_KEYS = ('days', 'items', 'rows', 'entries')

# Keys under which pre-aggregated ranges may be wrapped, first match wins
RANGE_CONTAINER_KEYS = (
    'iqamaahTimes', 'iqamaah_times', 'iqamaah', 'timings',
    'prayers', 'times', 'ranges', 'payload',
)

PRAYER_ALIASES = {
    Prayers.FAJR: ('fajr', 'fajar'),
    Prayers.DHUHR: ('dhuhr', 'zuhr', 'zohar', 'zohr'),
    Prayers.ASR: ('asr',),
    Prayers.ISHA: ('isha', 'ishaa'),
    Prayers.JUMUAH: ('jumuah', 'jummah', 'jumuahTimes'),
}


def empty_ranges() -> Dict[str, List[Dict[str, Any]]]:
    return {prayer: [] for prayer in Prayers.ALL}


def normalize(payload: Any) -> Dict[str, List[Dict[str, Any]]]:
    """
    Converts a month payload into {prayer: ranges sorted by startDate}.
    Every prayer is always present in the result.
    """
    result = empty_ranges()
    if not payload:
        return result

    if isinstance(payload, (list, tuple)):
        return _from_daily(payload)

    if not isinstance(payload, dict):
        return result

    daily = _find_daily_list(payload)
    if daily is not None:
        return _from_daily(daily)

    container = _find_range_container(payload)
    if not isinstance(container, dict):
        return result

    for prayer in Prayers.ALL:
        raw_ranges = _lookup_prayer(container, prayer)
        result[prayer] = sort_ranges(_normalize_range(r) for r in raw_ranges if isinstance(r, dict))
    return result


def _from_daily(days) -> Dict[str, List[Dict[str, Any]]]:
    return {prayer: compress(days, prayer) for prayer in Prayers.ALL}


def _find_daily_list(payload: Dict[str, Any]):
    for key in DAILY_CONTAINER_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            return value
    return None


def _find_range_container(payload: Dict[str, Any]):
    for key in RANGE_CONTAINER_KEYS:
        value = payload.get(key)
        if value:
            return value
    return payload


def _lookup_prayer(container: Dict[str, Any], prayer: str) -> List[Any]:
    folded = {str(key).lower(): v for key, v in container.items() if v is not None}
    value = None
    for alias in PRAYER_ALIASES.get(prayer, (prayer,)):
        value = container.get(alias)
        if value is None:
            value = folded.get(alias.lower())
        if value is not None:
            break

    # Either a bare list or {"ranges": [...]}
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and isinstance(value.get('ranges'), list):
        return value['ranges']
    return []


def _normalize_range(raw: Dict[str, Any]) -> Dict[str, Any]:
    time_range = dict(raw)
    time_range['startDate'] = normalize_date_value(raw.get('startDate', raw.get('start_date')))
    time_range['endDate'] = normalize_date_value(raw.get('endDate', raw.get('end_date')))
    time_range['time'] = normalize_time_value(raw.get('time'))
    time_range.pop('start_date', None)
    time_range.pop('end_date', None)
    slot = time_range.get('slotIndex')
    if 'slotIndex' in time_range and (not isinstance(slot, int) or isinstance(slot, bool)):
        del time_range['slotIndex']
    return time_range
