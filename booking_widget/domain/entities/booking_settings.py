from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BookingSettings:
    default_duration: int = 60  # minutes
    buffer_time_before: int = 0
    buffer_time_after: int = 0
    require_approval: bool = False
