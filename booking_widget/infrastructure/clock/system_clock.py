from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from booking_widget.application.ports.clock import ClockPort


class SystemClock(ClockPort):
    def __init__(self, timezone: ZoneInfo) -> None:
        self._timezone = timezone

    def now(self) -> datetime:
        return datetime.now(self._timezone)


class FixedClock(ClockPort):
    """Clock pinned to one instant, for tests and local harnesses."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant
