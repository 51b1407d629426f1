from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AvailabilityWindow:
    day_of_week: int  # 0 = Monday, 6 = Sunday
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    is_available: bool = True
    id: int | None = None
