class BookingWidgetError(RuntimeError):
    """Base class for errors raised by booking widget adapters."""
    pass


class AvailabilityFetchError(BookingWidgetError):
    """Raised when provider availability cannot be loaded (non-2xx, network error, bad body)."""
    pass


class BookingSubmissionError(BookingWidgetError):
    """Raised when the booking service rejects or fails a create-booking call."""

    def __init__(self, server_message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(server_message or "Booking submission failed")
        self.server_message = server_message
        self.status_code = status_code


class InvalidTimeError(ValueError):
    """Raised when a wall-clock time is not a valid HH:MM value."""
    pass
