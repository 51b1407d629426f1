from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from booking_widget.application.dto.availability import AvailabilityWindowDTO, BookingSettingsDTO, BusySlotDTO
from booking_widget.application.dto.direct_booking import DirectBookingRequestDTO
from booking_widget.application.exceptions import AvailabilityFetchError, BookingSubmissionError
from booking_widget.application.ports.availability import AvailabilityPort
from booking_widget.application.ports.booking_service import BookingServicePort
from booking_widget.core.config import settings
from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.booking_settings import BookingSettings
from booking_widget.domain.entities.time_slot import BusyInterval


class BookingApiClient(AvailabilityPort, BookingServicePort):
    def __init__(
        self,
        base_url: str | None = None,
        session_cookie: str | None = None,
        cookie_name: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.BOOKING_API_BASE_URL or "").rstrip("/")
        if not self._base_url:
            raise ValueError("BOOKING_API_BASE_URL is required for the booking API client")

        cookie_value = session_cookie or settings.BOOKING_SESSION_COOKIE
        cookies = {(cookie_name or settings.BOOKING_SESSION_COOKIE_NAME): cookie_value} if cookie_value else None
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            cookies=cookies,
            timeout=timeout or settings.BOOKING_API_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Booking API request failed",
                extra={"path": path, "status": e.response.status_code},
            )
            raise AvailabilityFetchError(f"GET {path} returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Booking API request error", extra={"path": path, "error": str(e)})
            raise AvailabilityFetchError(f"GET {path} failed: {e}") from e

    async def get_availability(self, provider_id: int) -> list[AvailabilityWindow]:
        data = await self._get_json("/booking/availability", params={"userId": provider_id})
        if not isinstance(data, list):
            raise AvailabilityFetchError("Availability response is not a list")
        try:
            return [AvailabilityWindowDTO.model_validate(item).to_entity() for item in data]
        except ValidationError as e:
            raise AvailabilityFetchError(f"Malformed availability window: {e}") from e

    async def get_booking_settings(self, provider_id: int) -> BookingSettings:
        data = await self._get_json("/booking/settings", params={"userId": provider_id})
        try:
            return BookingSettingsDTO.model_validate(data or {}).to_entity()
        except ValidationError as e:
            raise AvailabilityFetchError(f"Malformed booking settings: {e}") from e

    async def get_busy_intervals(self, provider_id: int) -> list[BusyInterval]:
        data = await self._get_json("/booking/busy", params={"userId": provider_id})
        # The server wraps the list as {"busySlots": [...]}; older servers return a bare list.
        items = data.get("busySlots", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise AvailabilityFetchError("Busy slot response is not a list")
        try:
            return [BusySlotDTO.model_validate(item).to_entity() for item in items]
        except ValidationError as e:
            raise AvailabilityFetchError(f"Malformed busy slot: {e}") from e

    async def create_booking(self, request: DirectBookingRequestDTO) -> None:
        try:
            response = await self._client.post("/booking/direct", json=request.to_payload())
        except httpx.HTTPError as e:
            self._logger.error("Booking API unreachable", extra={"error": str(e)})
            raise BookingSubmissionError() from e

        if response.is_success:
            self._logger.info(
                "Direct booking created",
                extra={"status": response.status_code, "appointment_date": request.appointment_date.isoformat()},
            )
            return

        server_message: str | None = None
        try:
            body = response.json()
            if isinstance(body, dict):
                message = body.get("message") or body.get("error")
                if isinstance(message, str) and message.strip():
                    server_message = message
        except ValueError:
            server_message = None

        self._logger.error(
            "Direct booking rejected",
            extra={"status": response.status_code, "error": server_message},
        )
        raise BookingSubmissionError(server_message, response.status_code)
