from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.booking_settings import BookingSettings
from booking_widget.domain.entities.time_slot import BusyInterval

TIME_PATTERN = r"^([0-1][0-9]|2[0-3]):([0-5][0-9])(:[0-5][0-9])?$"


class AvailabilityWindowDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | None = None
    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)
    start_time: str = Field(alias="startTime", pattern=TIME_PATTERN)
    end_time: str = Field(alias="endTime", pattern=TIME_PATTERN)
    is_available: bool = Field(default=True, alias="isAvailable")

    def to_entity(self) -> AvailabilityWindow:
        return AvailabilityWindow(
            id=self.id,
            day_of_week=self.day_of_week,
            start_time=self.start_time[:5],
            end_time=self.end_time[:5],
            is_available=self.is_available,
        )


class BookingSettingsDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    default_duration: int = Field(default=60, alias="defaultDuration", ge=1)
    buffer_time_before: int = Field(default=0, alias="bufferTimeBefore", ge=0)
    buffer_time_after: int = Field(default=0, alias="bufferTimeAfter", ge=0)
    require_approval: bool = Field(default=False, alias="requireApproval")

    def to_entity(self) -> BookingSettings:
        return BookingSettings(
            default_duration=self.default_duration,
            buffer_time_before=self.buffer_time_before,
            buffer_time_after=self.buffer_time_after,
            require_approval=self.require_approval,
        )


class BusySlotDTO(BaseModel):
    start: datetime
    end: datetime

    def to_entity(self) -> BusyInterval:
        return BusyInterval(start=self.start, end=self.end)
