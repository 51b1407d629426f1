from __future__ import annotations

from abc import ABC, abstractmethod

from booking_widget.application.dto.direct_booking import DirectBookingRequestDTO


class BookingServicePort(ABC):
    @abstractmethod
    async def create_booking(self, request: DirectBookingRequestDTO) -> None:
        """Create a booking. Raises BookingSubmissionError on failure."""
        raise NotImplementedError
