from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from booking_widget.application.utils.time_of_day import booking_day_of_week, to_calendar_date
from booking_widget.domain.entities.availability_window import AvailabilityWindow


@dataclass(frozen=True)
class DateOption:
    date: date
    enabled: bool
    is_today: bool


class AvailabilityIndex:
    """Day-of-week existence checks over a fixed window set, used to enable date-picker entries."""

    def __init__(self, windows: Iterable[AvailabilityWindow]) -> None:
        self._days = frozenset(w.day_of_week for w in windows if w.is_available)

    def available_days(self) -> frozenset[int]:
        return self._days

    def has_availability(self, value: date | datetime) -> bool:
        return booking_day_of_week(value) in self._days

    def calendar(self, start: date | datetime, days: int, today: date) -> list[DateOption]:
        first = to_calendar_date(start)
        options: list[DateOption] = []
        for offset in range(max(days, 0)):
            day = first + timedelta(days=offset)
            options.append(
                DateOption(
                    date=day,
                    enabled=day >= today and self.has_availability(day),
                    is_today=day == today,
                )
            )
        return options
