from __future__ import annotations

import re

from booking_widget.domain.entities.booking_details import BookingDetailsForm

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_LENGTH = 10


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


def validate_details(form: BookingDetailsForm) -> dict[str, str]:
    """Return field errors keyed by wire field name. Empty dict means the form is valid."""
    errors: dict[str, str] = {}

    if _blank(form.patient_first_name):
        errors["patientFirstName"] = "First name is required"
    if _blank(form.patient_last_name):
        errors["patientLastName"] = "Last name is required"
    if len((form.patient_phone or "").strip()) < MIN_PHONE_LENGTH:
        errors["patientPhone"] = "Valid phone number is required"
    if not _blank(form.patient_email) and not is_valid_email(form.patient_email.strip()):
        errors["patientEmail"] = "Valid email is required"

    if _blank(form.referrer_name):
        errors["referrerName"] = "Referrer name is required"
    if not _blank(form.referrer_email) and not is_valid_email(form.referrer_email.strip()):
        errors["referrerEmail"] = "Valid email is required"

    return errors
