from __future__ import annotations

import threading

from booking_app.application.ports.booking_store import BookingStorePort
from booking_app.domain.entities.booking import Booking


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()

    def add(self, booking: Booking) -> None:
        with self._lock:
            self._bookings[booking.booking_id] = booking

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def list_for_token(self, token: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.token == token]
