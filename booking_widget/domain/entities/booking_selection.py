from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class BookingSelection:
    date: date | None = None
    time: str | None = None  # HH:MM, only set while date is set

    @property
    def is_complete(self) -> bool:
        return self.date is not None and self.time is not None
