from __future__ import annotations

from dataclasses import dataclass

from booking_app.domain.entities.availability import TimeSlot


@dataclass(frozen=True)
class BookingFormData:
    name: str = ""
    email: str = ""
    title: str = ""
    description: str = ""


@dataclass(frozen=True)
class BookingRequest:
    form: BookingFormData
    date: str  # YYYY-MM-DD
    slot: TimeSlot
    external_user_id: str | None = None  # host user id, sent as telegram_id


@dataclass(frozen=True)
class BookingResult:
    success: bool
    booking_id: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, booking_id: str) -> "BookingResult":
        return cls(success=True, booking_id=booking_id)

    @classmethod
    def failed(cls, error: str) -> "BookingResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class Booking:
    """A booking accepted by the backend."""

    booking_id: str
    token: str
    name: str
    email: str
    title: str
    description: str
    date: str
    start_time: str
    end_time: str
    telegram_id: str | None = None
    created_at: float | None = None
