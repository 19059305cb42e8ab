# tests/test_range_mutations.py

import pytest

from masjid_console.services.iqamaah.mutations import (
    RangeValidationError,
    plan_create,
    plan_delete,
    plan_update,
)


def test_plan_create_builds_full_request():
    assert plan_create('fajr', "2024-01-01", "2024-01-31", "05:30") == {
        'prayer': 'fajr',
        'startDate': "2024-01-01",
        'endDate': "2024-01-31",
        'time': "05:30",
    }


def test_single_day_range_is_valid():
    assert plan_create('isha', "2024-01-01", "2024-01-01", "20:00")['endDate'] == "2024-01-01"


@pytest.mark.parametrize("start, end, time, message", [
    ("", "2024-01-31", "05:30", "Please select start and end dates"),
    ("2024-01-01", None, "05:30", "Please select start and end dates"),
    ("2024-02-30", "2024-03-01", "05:30", "Please select start and end dates"),
    ("2024-02-01", "2024-01-31", "05:30", "Start date must be before end date"),
    ("2024-01-01", "2024-01-31", "5:30", "Time must be in HH:MM (24h) format"),
    ("2024-01-01", "2024-01-31", "24:00", "Time must be in HH:MM (24h) format"),
    ("2024-01-01", "2024-01-31", "", "Time must be in HH:MM (24h) format"),
])
def test_plan_create_rejects_invalid_ranges(start, end, time, message):
    with pytest.raises(RangeValidationError) as excinfo:
        plan_create('fajr', start, end, time)
    assert excinfo.value.message == message


def test_unknown_prayer_is_rejected():
    with pytest.raises(RangeValidationError, match="Unknown prayer 'maghrib'"):
        plan_create('maghrib', "2024-01-01", "2024-01-02", "18:00")


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        plan_create('fajr', "2024-01-02", "2024-01-01", "05:30")


def test_plan_update_carries_original_key_and_full_new_range():
    original = {'startDate': "2024-01-01", 'endDate': "2024-01-15", 'time': "05:30"}
    edited = {'startDate': "2024-01-01", 'endDate': "2024-01-10", 'time': "05:35"}

    assert plan_update('fajr', original, edited) == {
        'prayer': 'fajr',
        'oldStartDate': "2024-01-01",
        'oldEndDate': "2024-01-15",
        'oldTime': "05:30",
        'startDate': "2024-01-01",
        'endDate': "2024-01-10",
        'time': "05:35",
    }


def test_plan_update_without_original_keys_on_edited_range():
    edited = {'startDate': "2024-01-01", 'endDate': "2024-01-10", 'time': "05:35"}

    request = plan_update('asr', None, edited)

    assert request['oldStartDate'] == "2024-01-01"
    assert request['oldTime'] == "05:35"


def test_plan_update_validates_edited_range():
    original = {'startDate': "2024-01-01", 'endDate': "2024-01-15", 'time': "05:30"}
    with pytest.raises(RangeValidationError, match="HH:MM"):
        plan_update('fajr', original, {'startDate': "2024-01-01", 'endDate': "2024-01-15", 'time': "5pm"})


def test_plan_delete_omits_time_for_ordinary_prayers():
    time_range = {'startDate': "2024-01-01", 'endDate': "2024-01-15", 'time': "13:15"}

    assert plan_delete('dhuhr', time_range) == {
        'prayer': 'dhuhr',
        'startDate': "2024-01-01",
        'endDate': "2024-01-15",
    }


def test_plan_delete_keys_jumuah_slot_by_time():
    time_range = {'startDate': "2024-01-05", 'endDate': "2024-01-26", 'time': "14:15", 'slotIndex': 1}

    assert plan_delete('jumuah', time_range) == {
        'prayer': 'jumuah',
        'startDate': "2024-01-05",
        'endDate': "2024-01-26",
        'time': "14:15",
    }


def test_plan_delete_requires_dates():
    with pytest.raises(RangeValidationError, match="Please provide valid dates"):
        plan_delete('fajr', {'startDate': "", 'endDate': "2024-01-02"})


def test_padded_values_are_sent_trimmed():
    assert plan_create('fajr', " 2024-01-01", "2024-01-02 ", " 05:30 ") == {
        'prayer': 'fajr',
        'startDate': "2024-01-01",
        'endDate': "2024-01-02",
        'time': "05:30",
    }


def test_plan_update_sends_trimmed_edited_range():
    original = {'startDate': "2024-01-01", 'endDate': "2024-01-15", 'time': "05:30"}
    edited = {'startDate': "2024-01-01 ", 'endDate': " 2024-01-10", 'time': "05:35\n"}

    request = plan_update('fajr', original, edited)

    assert (request['startDate'], request['endDate'], request['time']) == ("2024-01-01", "2024-01-10", "05:35")


def test_plan_delete_sends_trimmed_key():
    assert plan_delete('jumuah', {'startDate': " 2024-01-05", 'endDate': "2024-01-26 ", 'time': " 14:15"}) == {
        'prayer': 'jumuah',
        'startDate': "2024-01-05",
        'endDate': "2024-01-26",
        'time': "14:15",
    }
