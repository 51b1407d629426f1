from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeSlot:
    time: str  # HH:MM
    available: bool = True


@dataclass(frozen=True)
class BusyInterval:
    start: datetime
    end: datetime
