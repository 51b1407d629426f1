"""
Tests for turning weekly availability windows into bookable time slots.
"""

from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

import pytest

from booking_widget.application.exceptions import InvalidTimeError
from booking_widget.application.use_cases.slot_deriver import derive_time_slots, mark_busy_slots
from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.time_slot import BusyInterval, TimeSlot

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SYDNEY = ZoneInfo("Australia/Sydney")


def _times(slots: list[TimeSlot]) -> list[str]:
    return [s.time for s in slots]


def test_end_time_is_exclusive():
    windows = [AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="11:00")]
    slots = derive_time_slots(windows, MONDAY, 60)
    assert _times(slots) == ["09:00", "10:00"]
    assert all(s.available for s in slots)


def test_window_shorter_than_duration_yields_nothing():
    windows = [AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="09:30")]
    assert derive_time_slots(windows, MONDAY, 60) == []


def test_window_that_ends_at_start_yields_nothing():
    windows = [AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="09:00")]
    assert derive_time_slots(windows, MONDAY, 60) == []


def test_only_matching_day_and_available_windows_count():
    windows = [
        AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="10:00", is_available=False),
        AvailabilityWindow(day_of_week=1, start_time="13:00", end_time="15:00"),
        AvailabilityWindow(day_of_week=0, start_time="14:00", end_time="15:00"),
    ]
    assert _times(derive_time_slots(windows, MONDAY)) == ["14:00"]
    assert _times(derive_time_slots(windows, TUESDAY)) == ["13:00", "14:00"]


def test_datetime_input_is_truncated_to_its_date():
    windows = [AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="12:00")]
    at_noon = datetime(2026, 10, 19, 12, 30)
    assert _times(derive_time_slots(windows, at_noon)) == ["09:00", "10:00", "11:00"]


def test_windows_keep_input_order_without_dedupe():
    windows = [
        AvailabilityWindow(day_of_week=0, start_time="13:00", end_time="15:00"),
        AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="10:00"),
        AvailabilityWindow(day_of_week=0, start_time="14:00", end_time="15:00"),
    ]
    assert _times(derive_time_slots(windows, MONDAY)) == ["13:00", "14:00", "09:00", "14:00"]


def test_custom_duration_and_minute_rollover():
    windows = [AvailabilityWindow(day_of_week=0, start_time="09:45", end_time="11:00")]
    assert _times(derive_time_slots(windows, MONDAY, 30)) == ["09:45", "10:15"]


def test_inverted_window_is_skipped():
    windows = [
        AvailabilityWindow(day_of_week=0, start_time="22:00", end_time="02:00"),
        AvailabilityWindow(day_of_week=0, start_time="08:00", end_time="09:00"),
    ]
    assert _times(derive_time_slots(windows, MONDAY)) == ["08:00"]


def test_derivation_is_repeatable():
    windows = [AvailabilityWindow(day_of_week=0, start_time="09:00", end_time="12:00")]
    assert derive_time_slots(windows, MONDAY) == derive_time_slots(windows, MONDAY)


def test_rejects_bad_input():
    with pytest.raises(ValueError):
        derive_time_slots([], MONDAY, 0)
    with pytest.raises(InvalidTimeError):
        derive_time_slots([AvailabilityWindow(day_of_week=0, start_time="9am", end_time="10:00")], MONDAY)


def test_busy_intervals_mark_overlapping_slots():
    slots = [TimeSlot("09:00"), TimeSlot("10:00"), TimeSlot("11:00")]
    busy = [BusyInterval(start=datetime(2026, 10, 19, 10, 0, tzinfo=SYDNEY), end=datetime(2026, 10, 19, 11, 0, tzinfo=SYDNEY))]
    marked = mark_busy_slots(slots, MONDAY, busy, 60, SYDNEY)
    assert [(s.time, s.available) for s in marked] == [("09:00", True), ("10:00", False), ("11:00", True)]


def test_buffers_widen_busy_intervals():
    slots = [TimeSlot("09:00"), TimeSlot("10:00"), TimeSlot("11:00"), TimeSlot("12:00")]
    busy = [BusyInterval(start=datetime(2026, 10, 19, 10, 0, tzinfo=SYDNEY), end=datetime(2026, 10, 19, 11, 0, tzinfo=SYDNEY))]
    marked = mark_busy_slots(slots, MONDAY, busy, 60, SYDNEY, buffer_before=15, buffer_after=15)
    assert [s.available for s in marked] == [False, False, False, True]


def test_busy_interval_in_utc_is_compared_in_booking_timezone():
    # 23:00 UTC on the 18th is 10:00 on the 19th in Sydney (AEDT, UTC+11).
    busy = [
        BusyInterval(
            start=datetime(2026, 10, 18, 23, 0, tzinfo=dt_timezone.utc),
            end=datetime(2026, 10, 19, 0, 0, tzinfo=dt_timezone.utc),
        )
    ]
    marked = mark_busy_slots([TimeSlot("09:00"), TimeSlot("10:00")], MONDAY, busy, 60, SYDNEY)
    assert [s.available for s in marked] == [True, False]
