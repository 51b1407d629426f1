from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from booking_widget.application.dto.direct_booking import DirectBookingRequestDTO
from booking_widget.application.exceptions import AvailabilityFetchError, BookingSubmissionError
from booking_widget.application.ports.availability import AvailabilityPort
from booking_widget.application.ports.booking_service import BookingServicePort
from booking_widget.application.utils.time_of_day import booking_day_of_week, parse_time_of_day
from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.booking_settings import BookingSettings
from booking_widget.domain.entities.time_slot import BusyInterval


def default_weekday_windows() -> list[AvailabilityWindow]:
    return [
        AvailabilityWindow(id=day + 1, day_of_week=day, start_time="09:00", end_time="17:00")
        for day in range(5)
    ]


class MockBookingApi(AvailabilityPort, BookingServicePort):
    """In-memory stand-in for the booking server, used in dev/local and tests."""

    def __init__(
        self,
        windows: list[AvailabilityWindow] | None = None,
        booking_settings: BookingSettings | None = None,
        timezone: ZoneInfo | None = None,
        fail_availability: bool = False,
    ) -> None:
        self._windows = list(default_weekday_windows() if windows is None else windows)
        self._settings = booking_settings or BookingSettings()
        self._timezone = timezone or ZoneInfo("UTC")
        self._fail_availability = fail_availability
        self.bookings: list[DirectBookingRequestDTO] = []
        self.availability_calls = 0
        self._logger = logging.getLogger(__name__)

    def set_windows(self, windows: list[AvailabilityWindow]) -> None:
        self._windows = list(windows)

    async def get_availability(self, provider_id: int) -> list[AvailabilityWindow]:
        self.availability_calls += 1
        if self._fail_availability:
            raise AvailabilityFetchError("Mock availability failure")
        return list(self._windows)

    async def get_booking_settings(self, provider_id: int) -> BookingSettings:
        return self._settings

    async def get_busy_intervals(self, provider_id: int) -> list[BusyInterval]:
        return [self._interval_for(booking) for booking in self.bookings]

    async def create_booking(self, request: DirectBookingRequestDTO) -> None:
        start = self._interval_for(request).start
        if not self._within_availability(request):
            raise BookingSubmissionError("Selected time is not within availability", 400)
        if any(self._interval_for(existing).start == start for existing in self.bookings):
            raise BookingSubmissionError("Selected time is no longer available", 400)

        self.bookings.append(request)
        self._logger.info(
            "Mock booking created",
            extra={
                "provider_id": request.pharmacist_id,
                "appointment_date": request.appointment_date.isoformat(),
                "appointment_time": request.appointment_time,
            },
        )

    def _interval_for(self, request: DirectBookingRequestDTO) -> BusyInterval:
        start = datetime.combine(request.appointment_date, datetime.min.time(), tzinfo=self._timezone)
        start += timedelta(minutes=parse_time_of_day(request.appointment_time))
        return BusyInterval(start=start, end=start + timedelta(minutes=self._settings.default_duration))

    def _within_availability(self, request: DirectBookingRequestDTO) -> bool:
        day = booking_day_of_week(request.appointment_date)
        start = parse_time_of_day(request.appointment_time)
        end = start + self._settings.default_duration
        return any(
            w.is_available
            and w.day_of_week == day
            and parse_time_of_day(w.start_time) <= start
            and end <= parse_time_of_day(w.end_time)
            for w in self._windows
        )
