#!/usr/bin/env python3
"""
Interactive booking harness (no host app).

Uses the in-process backend when ENV is dev/local, the HTTP backend at
BOOKING_API_URL otherwise.

Usage:
  python3 scripts/book_local.py [token]

What it does:
- Opens one booking session with the given token (default: first configured token)
- Walks through date, time slot and form steps on the terminal
- Prints the booking id, or the error message for the session's error code
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking_app.application.utils.error_messages import message_for
from booking_app.core.config import settings
from booking_app.domain.entities.booking import BookingFormData
from booking_app.domain.entities.booking_session import (
    Confirmed,
    Failed,
    FillingForm,
    SelectingDate,
    SelectingTime,
)
from booking_app.application.use_cases.booking_session import BookingSessionMachine
from booking_app.infrastructure.host.launch_context import LaunchContext
from booking_app.wiring.dependencies import close_booking_gateway, get_session_machine


def _pick(prompt: str, count: int) -> int | None:
    raw = input(f"{prompt} [1-{count}, q to quit]: ").strip().lower()
    if raw in {"q", "/quit"}:
        return None
    if raw.isdigit() and 1 <= int(raw) <= count:
        return int(raw) - 1
    print("  not a valid choice")
    return _pick(prompt, count)


async def run(token: str | None) -> int:
    machine = get_session_machine(LaunchContext(start_param=token))
    try:
        return await _drive(machine)
    finally:
        await close_booking_gateway(machine.gateway)


async def _drive(machine: BookingSessionMachine) -> int:
    state = await machine.start()

    while True:
        if isinstance(state, Failed):
            print(f"\nError: {message_for(state.error_code)}")
            return 1

        if isinstance(state, Confirmed):
            print(f"\nBooked {state.selected_date} {state.selected_slot.start}-{state.selected_slot.end}")
            print(f"booking_id: {state.booking_id}")
            return 0

        if isinstance(state, SelectingDate):
            open_dates = [d for d in state.available_dates if d.has_slots]
            if not open_dates:
                print("No open dates in the booking window.")
                return 1
            print("\nAvailable dates:")
            for i, d in enumerate(open_dates, 1):
                print(f"  {i}. {d.date} ({d.day_of_week.value})")
            choice = _pick("Date", len(open_dates))
            if choice is None:
                return 0
            state = await machine.select_date(open_dates[choice].date)
            continue

        if isinstance(state, SelectingTime):
            print(f"\nTimes on {state.selected_date}:")
            for i, slot in enumerate(state.time_slots, 1):
                print(f"  {i}. {slot.start} - {slot.end}")
            choice = _pick("Time", len(state.time_slots))
            if choice is None:
                return 0
            state = machine.select_slot(state.time_slots[choice])
            continue

        if isinstance(state, FillingForm):
            if state.form_errors:
                print(f"  please fix: {', '.join(state.form_errors)}")
            form = BookingFormData(
                name=input("Full name: "),
                email=input("Email: "),
                title=input("Meeting title: "),
                description=input("Description (optional): "),
            )
            state = await machine.submit(form)
            continue

        print(f"Unexpected step: {state.step.value}")
        return 1


def main() -> None:
    token = sys.argv[1] if len(sys.argv) > 1 else (settings.BOOKING_VALID_TOKENS or [None])[0]
    print("\nLocal Booking Harness")
    print("-" * 60)
    try:
        sys.exit(asyncio.run(run(token)))
    except (KeyboardInterrupt, EOFError):
        print("\nbye")


if __name__ == "__main__":
    main()
