from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DirectBookingRequestDTO(BaseModel):
    """Body of POST /booking/direct."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    pharmacist_id: int = Field(alias="pharmacistId")
    appointment_date: date = Field(alias="appointmentDate")
    appointment_time: str = Field(alias="appointmentTime", pattern=r"^([0-1][0-9]|2[0-3]):([0-5][0-9])$")
    patient_first_name: str = Field(alias="patientFirstName")
    patient_last_name: str = Field(alias="patientLastName")
    patient_phone: str = Field(alias="patientPhone")
    patient_email: str | None = Field(default=None, alias="patientEmail")
    referrer_name: str = Field(alias="referrerName")
    referrer_email: str | None = Field(default=None, alias="referrerEmail")
    referrer_phone: str | None = Field(default=None, alias="referrerPhone")
    referrer_clinic: str | None = Field(default=None, alias="referrerClinic")
    referral_reason: str | None = Field(default=None, alias="referralReason")
    notes: str | None = None

    def to_payload(self) -> dict[str, Any]:
        # date serializes as YYYY-MM-DD in json mode
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
