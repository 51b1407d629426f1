from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date

from booking_widget.application.dto.direct_booking import DirectBookingRequestDTO
from booking_widget.application.exceptions import BookingSubmissionError
from booking_widget.application.ports.booking_service import BookingServicePort
from booking_widget.application.utils.form_rules import validate_details
from booking_widget.domain.entities.booking_details import BookingDetailsForm

GENERIC_SUBMIT_ERROR = "Failed to submit booking"


@dataclass(frozen=True)
class SubmissionResult:
    status: str  # "success", "invalid", "failed", "in_flight"
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == "success"


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class BookingSubmitter:
    def __init__(self, booking_service: BookingServicePort, provider_id: int) -> None:
        self._booking_service = booking_service
        self._provider_id = provider_id
        self._lock = asyncio.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def is_submitting(self) -> bool:
        return self._lock.locked()

    def validate(self, form: BookingDetailsForm) -> dict[str, str]:
        return validate_details(form)

    def build_request(
        self,
        form: BookingDetailsForm,
        appointment_date: date,
        appointment_time: str,
    ) -> DirectBookingRequestDTO:
        return DirectBookingRequestDTO(
            pharmacist_id=self._provider_id,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            patient_first_name=form.patient_first_name.strip(),
            patient_last_name=form.patient_last_name.strip(),
            patient_phone=form.patient_phone.strip(),
            patient_email=_optional(form.patient_email),
            referrer_name=form.referrer_name.strip(),
            referrer_email=_optional(form.referrer_email),
            referrer_phone=_optional(form.referrer_phone),
            referrer_clinic=_optional(form.referrer_clinic),
            referral_reason=_optional(form.referral_reason),
            notes=_optional(form.notes),
        )

    async def submit(
        self,
        form: BookingDetailsForm,
        appointment_date: date,
        appointment_time: str,
    ) -> SubmissionResult:
        """
        Validate locally, then send the booking.
        Only one submission may be in flight; extra calls return status "in_flight"
        without touching the network.
        """
        if self._lock.locked():
            self._logger.info("Submission already in flight", extra={"provider_id": self._provider_id})
            return SubmissionResult(status="in_flight")

        field_errors = self.validate(form)
        if field_errors:
            return SubmissionResult(status="invalid", field_errors=field_errors)

        async with self._lock:
            request = self.build_request(form, appointment_date, appointment_time)
            try:
                await self._booking_service.create_booking(request)
            except BookingSubmissionError as e:
                self._logger.error(
                    "Booking submission failed",
                    extra={
                        "provider_id": self._provider_id,
                        "appointment_date": appointment_date.isoformat(),
                        "appointment_time": appointment_time,
                        "status": e.status_code,
                        "error": str(e),
                    },
                )
                return SubmissionResult(status="failed", error=e.server_message or GENERIC_SUBMIT_ERROR)

        self._logger.info(
            "Booking submitted",
            extra={
                "provider_id": self._provider_id,
                "appointment_date": appointment_date.isoformat(),
                "appointment_time": appointment_time,
            },
        )
        return SubmissionResult(status="success")
