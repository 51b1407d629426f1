from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

from booking_widget.application.exceptions import AvailabilityFetchError
from booking_widget.application.ports.availability import AvailabilityPort
from booking_widget.application.ports.clock import ClockPort
from booking_widget.application.use_cases.availability_index import AvailabilityIndex, DateOption
from booking_widget.application.use_cases.booking_submitter import BookingSubmitter, SubmissionResult
from booking_widget.application.use_cases.slot_deriver import derive_time_slots, mark_busy_slots
from booking_widget.application.utils.time_of_day import to_calendar_date
from booking_widget.domain.entities.availability_window import AvailabilityWindow
from booking_widget.domain.entities.booking_details import BookingDetailsForm
from booking_widget.domain.entities.booking_selection import BookingSelection
from booking_widget.domain.entities.booking_settings import BookingSettings
from booking_widget.domain.entities.booking_step import BookingStep
from booking_widget.domain.entities.time_slot import BusyInterval, TimeSlot

LOAD_ERROR_MESSAGE = "Failed to load availability"


@dataclass(frozen=True)
class FlowSnapshot:
    step: BookingStep
    selection: BookingSelection
    time_slots: list[TimeSlot]
    loading: bool
    error: str | None
    is_submitting: bool
    submit_error: str | None
    field_errors: dict[str, str] = field(default_factory=dict)


class BookingFlowController:
    """
    Owns the widget's step and selection state.

    Transitions:
        DATE    --select_date--> TIME
        TIME    --select_time--> DETAILS
        TIME    --back-------->  DATE
        DETAILS --back-------->  TIME
        DETAILS --submit------>  SUCCESS (or DETAILS with submit_error)
        SUCCESS --reset------->  DATE

    A transition whose precondition fails is a no-op and returns False.
    """

    def __init__(
        self,
        provider_id: int,
        availability: AvailabilityPort,
        submitter: BookingSubmitter,
        clock: ClockPort,
        timezone: ZoneInfo,
        slot_duration_minutes: int = 60,
        on_booking_complete: Callable[[], None] | None = None,
    ) -> None:
        self._provider_id = provider_id
        self._availability = availability
        self._submitter = submitter
        self._clock = clock
        self._timezone = timezone
        self._default_duration = slot_duration_minutes
        self._on_booking_complete = on_booking_complete
        self._logger = logging.getLogger(__name__)

        self._windows: list[AvailabilityWindow] = []
        self._index = AvailabilityIndex([])
        self._settings = BookingSettings(default_duration=slot_duration_minutes)
        self._busy: list[BusyInterval] = []
        self._load_lock = asyncio.Lock()

        self._step = BookingStep.DATE
        self._selection = BookingSelection()
        self._time_slots: list[TimeSlot] = []
        self._error: str | None = None
        self._submit_error: str | None = None
        self._field_errors: dict[str, str] = {}
        self._reconcile_pending = False

    @property
    def provider_id(self) -> int:
        return self._provider_id

    @property
    def step(self) -> BookingStep:
        return self._step

    @property
    def selection(self) -> BookingSelection:
        return self._selection

    @property
    def time_slots(self) -> list[TimeSlot]:
        return list(self._time_slots)

    @property
    def loading(self) -> bool:
        return self._load_lock.locked()

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_submitting(self) -> bool:
        return self._submitter.is_submitting

    @property
    def submit_error(self) -> str | None:
        return self._submit_error

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._field_errors)

    @property
    def slot_duration_minutes(self) -> int:
        return self._settings.default_duration

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(
            step=self._step,
            selection=self._selection,
            time_slots=self.time_slots,
            loading=self.loading,
            error=self._error,
            is_submitting=self.is_submitting,
            submit_error=self._submit_error,
            field_errors=self.field_errors,
        )

    async def load_availability(self) -> bool:
        """
        Fetch windows (plus best-effort settings and busy intervals) and replace
        derived state. Returns False if a load was already in flight or failed.
        """
        if self._load_lock.locked():
            return False

        async with self._load_lock:
            self._error = None
            try:
                windows = await self._availability.get_availability(self._provider_id)
            except AvailabilityFetchError as e:
                self._logger.error(
                    "Error fetching availability",
                    extra={"provider_id": self._provider_id, "error": str(e)},
                )
                self._error = LOAD_ERROR_MESSAGE
                return False

            settings = await self._load_settings()
            busy = await self._load_busy()

        self._apply_availability(windows, settings, busy)
        return True

    async def _load_settings(self) -> BookingSettings:
        try:
            return await self._availability.get_booking_settings(self._provider_id)
        except AvailabilityFetchError as e:
            self._logger.warning(
                "Booking settings unavailable, using defaults",
                extra={"provider_id": self._provider_id, "error": str(e)},
            )
            return BookingSettings(default_duration=self._default_duration)

    async def _load_busy(self) -> list[BusyInterval]:
        try:
            return await self._availability.get_busy_intervals(self._provider_id)
        except AvailabilityFetchError as e:
            self._logger.warning(
                "Busy slots unavailable, treating all slots as open",
                extra={"provider_id": self._provider_id, "error": str(e)},
            )
            return []

    def _apply_availability(
        self,
        windows: list[AvailabilityWindow],
        settings: BookingSettings,
        busy: list[BusyInterval],
    ) -> None:
        self._windows = list(windows)
        self._index = AvailabilityIndex(self._windows)
        self._settings = settings
        self._busy = list(busy)

        # Reconciled before the next submit so the in-flight outcome keeps its selection.
        if self._submitter.is_submitting:
            self._reconcile_pending = True
            return
        self._reconcile_selection()

    def _reconcile_selection(self) -> None:
        """
        Bring the selection in line with the current windows. Only TIME and
        DETAILS hold a selection that can go stale; SUCCESS keeps its booked
        selection until reset().
        """
        self._reconcile_pending = False
        if self._step not in (BookingStep.TIME, BookingStep.DETAILS):
            return

        selected_date = self._selection.date
        if selected_date is None:
            self._time_slots = []
            return

        if not self._index.has_availability(selected_date):
            self._logger.info(
                "Selected date lost availability, returning to date step",
                extra={"provider_id": self._provider_id, "appointment_date": selected_date.isoformat()},
            )
            self._selection = BookingSelection()
            self._time_slots = []
            self._clear_details_errors()
            self._step = BookingStep.DATE
            return

        previous = self._time_slots
        self._time_slots = self._derive(selected_date)
        if self._selection.time is not None and self._time_slots != previous:
            self._selection = BookingSelection(date=selected_date)
            if self._step == BookingStep.DETAILS:
                self._clear_details_errors()
                self._step = BookingStep.TIME

    def _clear_details_errors(self) -> None:
        self._submit_error = None
        self._field_errors = {}

    def _derive(self, on_date: date) -> list[TimeSlot]:
        slots = derive_time_slots(self._windows, on_date, self._settings.default_duration)
        return mark_busy_slots(
            slots,
            on_date,
            self._busy,
            self._settings.default_duration,
            self._timezone,
            self._settings.buffer_time_before,
            self._settings.buffer_time_after,
        )

    def has_availability(self, value: date | datetime) -> bool:
        return self._index.has_availability(value)

    def is_past(self, value: date | datetime) -> bool:
        return to_calendar_date(value) < self._clock.today()

    def is_date_selectable(self, value: date | datetime) -> bool:
        return not self.is_past(value) and self.has_availability(value)

    def date_options(self, days: int, start: date | None = None) -> list[DateOption]:
        today = self._clock.today()
        return self._index.calendar(start or today, days, today)

    def select_date(self, value: date | datetime) -> bool:
        if self._step != BookingStep.DATE or not self.is_date_selectable(value):
            return False
        selected = to_calendar_date(value)
        self._selection = BookingSelection(date=selected)
        self._time_slots = self._derive(selected)
        self._step = BookingStep.TIME
        return True

    def select_time(self, time: str) -> bool:
        if self._step != BookingStep.TIME or self._selection.date is None:
            return False
        if not any(slot.time == time and slot.available for slot in self._time_slots):
            return False
        self._selection = BookingSelection(date=self._selection.date, time=time)
        self._field_errors = {}
        self._submit_error = None
        self._step = BookingStep.DETAILS
        return True

    def back(self) -> bool:
        if self.is_submitting:
            return False
        if self._step == BookingStep.DETAILS:
            self._selection = BookingSelection(date=self._selection.date)
            self._step = BookingStep.TIME
            if self._reconcile_pending:
                self._reconcile_selection()
            return True
        if self._step == BookingStep.TIME:
            self._selection = BookingSelection()
            self._time_slots = []
            self._step = BookingStep.DATE
            return True
        return False

    async def submit(self, form: BookingDetailsForm) -> SubmissionResult | None:
        """
        Submit the details form. Returns None when not in the details step,
        including when a reload deferred during the previous attempt moves the
        flow out of DETAILS.
        """
        if self._step != BookingStep.DETAILS or not self._selection.is_complete:
            return None

        if self._submitter.is_submitting:
            return SubmissionResult(status="in_flight")

        if self._reconcile_pending:
            self._reconcile_selection()
            if self._step != BookingStep.DETAILS:
                return None

        selection = self._selection
        self._submit_error = None
        result = await self._submitter.submit(form, selection.date, selection.time)
        self._field_errors = dict(result.field_errors)
        if result.success:
            self._reconcile_pending = False
            self._step = BookingStep.SUCCESS
            if self._on_booking_complete is not None:
                self._on_booking_complete()
        elif result.status == "failed":
            self._submit_error = result.error
        return result

    def reset(self) -> bool:
        if self._step != BookingStep.SUCCESS:
            return False
        self._selection = BookingSelection()
        self._time_slots = []
        self._submit_error = None
        self._field_errors = {}
        self._error = None
        self._step = BookingStep.DATE
        return True
