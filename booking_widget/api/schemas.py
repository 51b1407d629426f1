from datetime import date as Date

from pydantic import BaseModel, ConfigDict, Field

from booking_widget.application.use_cases.booking_flow import FlowSnapshot
from booking_widget.application.utils.time_of_day import format_booking_time
from booking_widget.domain.entities.booking_details import BookingDetailsForm
from booking_widget.domain.entities.booking_step import BookingStep


class CreateSessionSchema(BaseModel):
    provider_id: int = Field(alias="providerId")


class SelectDateSchema(BaseModel):
    date: Date


class SelectTimeSchema(BaseModel):
    time: str


class BookingDetailsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patient_first_name: str = Field(default="", alias="patientFirstName")
    patient_last_name: str = Field(default="", alias="patientLastName")
    patient_phone: str = Field(default="", alias="patientPhone")
    patient_email: str | None = Field(default=None, alias="patientEmail")
    referrer_name: str = Field(default="", alias="referrerName")
    referrer_email: str | None = Field(default=None, alias="referrerEmail")
    referrer_phone: str | None = Field(default=None, alias="referrerPhone")
    referrer_clinic: str | None = Field(default=None, alias="referrerClinic")
    referral_reason: str | None = Field(default=None, alias="referralReason")
    notes: str | None = None

    def to_form(self) -> BookingDetailsForm:
        return BookingDetailsForm(**self.model_dump())


class TimeSlotSchema(BaseModel):
    time: str
    label: str
    available: bool


class DateOptionSchema(BaseModel):
    date: Date
    enabled: bool
    is_today: bool


class WidgetStateSchema(BaseModel):
    session_id: str
    provider_id: int
    step: BookingStep
    selected_date: Date | None = None
    selected_time: str | None = None
    time_slots: list[TimeSlotSchema] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None
    is_submitting: bool = False
    submit_error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_snapshot(cls, session_id: str, provider_id: int, snapshot: FlowSnapshot) -> "WidgetStateSchema":
        return cls(
            session_id=session_id,
            provider_id=provider_id,
            step=snapshot.step,
            selected_date=snapshot.selection.date,
            selected_time=snapshot.selection.time,
            time_slots=[
                TimeSlotSchema(time=s.time, label=format_booking_time(s.time), available=s.available)
                for s in snapshot.time_slots
            ],
            loading=snapshot.loading,
            error=snapshot.error,
            is_submitting=snapshot.is_submitting,
            submit_error=snapshot.submit_error,
            field_errors=snapshot.field_errors,
        )
