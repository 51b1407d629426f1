"""
Tests for local validation, payload building and single-flight submission.
"""

from __future__ import annotations

import asyncio
from datetime import date

from booking_widget.application.dto.direct_booking import DirectBookingRequestDTO
from booking_widget.application.exceptions import BookingSubmissionError
from booking_widget.application.ports.booking_service import BookingServicePort
from booking_widget.application.use_cases.booking_submitter import GENERIC_SUBMIT_ERROR, BookingSubmitter
from booking_widget.domain.entities.booking_details import BookingDetailsForm

MONDAY = date(2026, 10, 19)

FORM = BookingDetailsForm(
    patient_first_name="Ada",
    patient_last_name="Lovelace",
    patient_phone="0412345678",
    patient_email="ada@example.com",
    referrer_name="Dr Babbage",
    referrer_clinic="  ",
    notes="Prefers mornings",
)


class RecordingBookingService(BookingServicePort):
    def __init__(self, error: BookingSubmissionError | None = None) -> None:
        self.requests: list[DirectBookingRequestDTO] = []
        self._error = error

    async def create_booking(self, request: DirectBookingRequestDTO) -> None:
        self.requests.append(request)
        if self._error is not None:
            raise self._error


class GatedBookingService(BookingServicePort):
    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.calls = 0

    async def create_booking(self, request: DirectBookingRequestDTO) -> None:
        self.calls += 1
        await self.release.wait()


def test_payload_uses_wire_names_and_drops_blank_optionals():
    submitter = BookingSubmitter(RecordingBookingService(), provider_id=7)
    payload = submitter.build_request(FORM, MONDAY, "10:00").to_payload()
    assert payload == {
        "pharmacistId": 7,
        "appointmentDate": "2026-10-19",
        "appointmentTime": "10:00",
        "patientFirstName": "Ada",
        "patientLastName": "Lovelace",
        "patientPhone": "0412345678",
        "patientEmail": "ada@example.com",
        "referrerName": "Dr Babbage",
        "notes": "Prefers mornings",
    }


def test_success():
    service = RecordingBookingService()
    submitter = BookingSubmitter(service, provider_id=7)
    result = asyncio.run(submitter.submit(FORM, MONDAY, "10:00"))
    assert result.success
    assert result.error is None
    assert len(service.requests) == 1
    assert not submitter.is_submitting


def test_missing_first_name_never_reaches_network():
    service = RecordingBookingService()
    submitter = BookingSubmitter(service, provider_id=7)
    form = BookingDetailsForm(
        patient_last_name="Lovelace",
        patient_phone="0412345678",
        referrer_name="Dr Babbage",
    )
    result = asyncio.run(submitter.submit(form, MONDAY, "10:00"))
    assert result.status == "invalid"
    assert result.field_errors == {"patientFirstName": "First name is required"}
    assert service.requests == []


def test_server_message_is_used_verbatim():
    service = RecordingBookingService(BookingSubmissionError("Selected time is no longer available", 400))
    result = asyncio.run(BookingSubmitter(service, provider_id=7).submit(FORM, MONDAY, "10:00"))
    assert result.status == "failed"
    assert result.error == "Selected time is no longer available"


def test_failure_without_message_uses_generic_fallback():
    service = RecordingBookingService(BookingSubmissionError())
    result = asyncio.run(BookingSubmitter(service, provider_id=7).submit(FORM, MONDAY, "10:00"))
    assert result.status == "failed"
    assert result.error == GENERIC_SUBMIT_ERROR


def test_second_submission_while_in_flight_is_dropped():
    async def scenario():
        service = GatedBookingService()
        submitter = BookingSubmitter(service, provider_id=7)

        first = asyncio.create_task(submitter.submit(FORM, MONDAY, "10:00"))
        await asyncio.sleep(0)
        assert submitter.is_submitting

        second = await submitter.submit(FORM, MONDAY, "10:00")
        assert second.status == "in_flight"

        service.release.set()
        assert (await first).success
        assert service.calls == 1
        assert not submitter.is_submitting

    asyncio.run(scenario())
