#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP server).

Usage:
  python3 scripts/book_local.py [provider_id]

What it does:
- Builds a BookingFlowController through the project wiring (mock booking API
  unless BOOKING_API_BASE_URL is set)
- Walks the date -> time -> details -> success steps from the terminal
- Commands: /back, /reset, /reload, /quit
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking_widget.application.use_cases.booking_flow import BookingFlowController
from booking_widget.application.utils.time_of_day import format_booking_time
from booking_widget.core.config import settings
from booking_widget.domain.entities.booking_details import BookingDetailsForm
from booking_widget.domain.entities.booking_step import BookingStep
from booking_widget.wiring.dependencies import build_booking_flow


def _print_header(provider_id: int) -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print(f"provider_id: {provider_id}")
    print("Commands: /back, /reset, /reload, /quit")
    print("-" * 60)


def _print_dates(controller: BookingFlowController) -> None:
    print("\nSelect a date (YYYY-MM-DD):")
    for option in controller.date_options(settings.DATE_PICKER_DAYS):
        label = "Today" if option.is_today else option.date.strftime("%a")
        marker = " " if option.enabled else "x"
        print(f"  [{marker}] {label:<5} {option.date.isoformat()}")


def _print_times(controller: BookingFlowController) -> None:
    selected = controller.selection.date
    print(f"\nAvailable times for {selected.strftime('%A, %B %d, %Y') if selected else '-'}:")
    if not controller.time_slots:
        print("  (no times available)")
    for slot in controller.time_slots:
        marker = " " if slot.available else "x"
        print(f"  [{marker}] {slot.time}  {format_booking_time(slot.time)}")


def _ask(prompt: str, required: bool = False) -> str | None:
    while True:
        value = input(f"  {prompt}{' *' if required else ''}: ").strip()
        if value or not required:
            return value or None


def _collect_details() -> BookingDetailsForm:
    print("\nPatient Information")
    first = _ask("First name", required=True)
    last = _ask("Last name", required=True)
    phone = _ask("Phone", required=True)
    email = _ask("Email (optional)")
    print("Referrer Information")
    referrer = _ask("Referrer name", required=True)
    referrer_email = _ask("Referrer email (optional)")
    referrer_phone = _ask("Referrer phone (optional)")
    clinic = _ask("Clinic name (optional)")
    reason = _ask("Referral reason (optional)")
    notes = _ask("Additional notes (optional)")
    return BookingDetailsForm(
        patient_first_name=first or "",
        patient_last_name=last or "",
        patient_phone=phone or "",
        patient_email=email,
        referrer_name=referrer or "",
        referrer_email=referrer_email,
        referrer_phone=referrer_phone,
        referrer_clinic=clinic,
        referral_reason=reason,
        notes=notes,
    )


async def run(provider_id: int) -> None:
    controller = build_booking_flow(provider_id, on_booking_complete=lambda: print("\nBooking confirmed."))
    _print_header(provider_id)

    if not await controller.load_availability():
        print(f"Error: {controller.error}")
        return

    while True:
        step = controller.step
        if step == BookingStep.DATE:
            _print_dates(controller)
        elif step == BookingStep.TIME:
            _print_times(controller)
        elif step == BookingStep.SUCCESS:
            print("\nBooking submitted. Type /reset to book another appointment.")

        if step == BookingStep.DETAILS:
            command = input("\nPress Enter to fill in details (or a command) > ").strip()
        else:
            command = input("\n> ").strip()

        if command == "/quit":
            return
        if command == "/back":
            controller.back()
            continue
        if command == "/reset":
            controller.reset()
            continue
        if command == "/reload":
            await controller.load_availability()
            continue

        if step == BookingStep.DATE:
            try:
                picked = date.fromisoformat(command)
            except ValueError:
                print("Enter a date as YYYY-MM-DD.")
                continue
            if not controller.select_date(picked):
                print("That date is not available.")
        elif step == BookingStep.TIME:
            if not controller.select_time(command):
                print("That time is not available.")
        elif step == BookingStep.DETAILS:
            result = await controller.submit(_collect_details())
            if result is not None and not result.success:
                for field_name, message in controller.field_errors.items():
                    print(f"  {field_name}: {message}")
                if controller.submit_error:
                    print(f"  Error: {controller.submit_error}")


def main() -> None:
    provider_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    try:
        asyncio.run(run(provider_id))
    except (KeyboardInterrupt, EOFError):
        print("\nBye.")


if __name__ == "__main__":
    main()
