from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BookingDetailsForm:
    patient_first_name: str = ""
    patient_last_name: str = ""
    patient_phone: str = ""
    patient_email: str | None = None
    referrer_name: str = ""
    referrer_email: str | None = None
    referrer_phone: str | None = None
    referrer_clinic: str | None = None
    referral_reason: str | None = None
    notes: str | None = None
