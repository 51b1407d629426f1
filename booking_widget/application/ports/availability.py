from __future__ import annotations

from abc import ABC, abstractmethod

from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.booking_settings import BookingSettings
from booking_widget.domain.entities.time_slot import BusyInterval


class AvailabilityPort(ABC):
    @abstractmethod
    async def get_availability(self, provider_id: int) -> list[AvailabilityWindow]:
        """Fetch the weekly recurring availability windows for a provider.

        Raises AvailabilityFetchError on any failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_booking_settings(self, provider_id: int) -> BookingSettings:
        """Fetch slot duration and buffer settings."""
        raise NotImplementedError

    @abstractmethod
    async def get_busy_intervals(self, provider_id: int) -> list[BusyInterval]:
        """Fetch already-booked intervals for the provider."""
        raise NotImplementedError
