from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from booking_widget.application.utils.time_of_day import (
    booking_day_of_week,
    format_time_of_day,
    parse_time_of_day,
    to_calendar_date,
)
from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.time_slot import BusyInterval, TimeSlot

DEFAULT_SLOT_DURATION_MINUTES = 60

logger = logging.getLogger(__name__)


def windows_for_day(windows: Iterable[AvailabilityWindow], on_date: date | datetime) -> list[AvailabilityWindow]:
    """Available windows whose day-of-week matches the date, in input order."""
    day = booking_day_of_week(on_date)
    return [w for w in windows if w.is_available and w.day_of_week == day]


def derive_time_slots(
    windows: Iterable[AvailabilityWindow],
    on_date: date | datetime,
    duration_minutes: int = DEFAULT_SLOT_DURATION_MINUTES,
) -> list[TimeSlot]:
    """
    Slice each matching window into slots starting every `duration_minutes`.
    A slot is emitted only while its start is strictly before the window end
    and the whole slot fits inside the window.

    Windows are walked in input order; overlapping windows for the same day
    can therefore produce duplicate or out-of-order slots.
    """
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    slots: list[TimeSlot] = []
    for window in windows_for_day(windows, on_date):
        start = parse_time_of_day(window.start_time)
        end = parse_time_of_day(window.end_time)
        if end <= start:
            # End times are same-day only.
            logger.debug(
                "Skipping window that does not end after it starts",
                extra={"window_id": window.id, "start": window.start_time, "end": window.end_time},
            )
            continue

        current = start
        while current + duration_minutes <= end:
            slots.append(TimeSlot(time=format_time_of_day(current), available=True))
            current += duration_minutes

    return slots


def mark_busy_slots(
    slots: Iterable[TimeSlot],
    on_date: date | datetime,
    busy_intervals: Iterable[BusyInterval],
    duration_minutes: int,
    timezone: ZoneInfo,
    buffer_before: int = 0,
    buffer_after: int = 0,
) -> list[TimeSlot]:
    """Mark slots that collide with an existing appointment (plus buffers) as unavailable."""
    busy = [
        (
            _as_aware(interval.start, timezone) - timedelta(minutes=buffer_before),
            _as_aware(interval.end, timezone) + timedelta(minutes=buffer_after),
        )
        for interval in busy_intervals
    ]
    day = to_calendar_date(on_date)
    marked: list[TimeSlot] = []
    for slot in slots:
        if not busy or not slot.available:
            marked.append(slot)
            continue
        minutes = parse_time_of_day(slot.time)
        slot_start = datetime.combine(day, datetime.min.time(), tzinfo=timezone) + timedelta(minutes=minutes)
        slot_end = slot_start + timedelta(minutes=duration_minutes)
        overlaps = any(slot_start < busy_end and slot_end > busy_start for busy_start, busy_end in busy)
        marked.append(TimeSlot(time=slot.time, available=not overlaps))
    return marked


def _as_aware(value: datetime, timezone: ZoneInfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone)
    return value
