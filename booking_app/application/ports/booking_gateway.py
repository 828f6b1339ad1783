from __future__ import annotations

from abc import ABC, abstractmethod

from booking_app.domain.entities.availability import DateInfo, TimeSlot
from booking_app.domain.entities.booking import BookingRequest, BookingResult


class BookingGatewayPort(ABC):
    """
    Remote booking service as seen by a booking session.

    Contract:
    - validate_token / list_slots / create_booking may raise GatewayError for
      transport or payload failures; "no data" is an empty result, not an error.
    - list_dates never raises; it returns an empty list on failure.
    """

    @abstractmethod
    async def validate_token(self, token: str) -> bool:
        """Return True if the backend accepts the token."""
        raise NotImplementedError

    @abstractmethod
    async def list_dates(self, token: str) -> list[DateInfo]:
        """Return the offered dates in chronological order."""
        raise NotImplementedError

    @abstractmethod
    async def list_slots(self, token: str, date: str) -> list[TimeSlot]:
        """Return the offered one-hour slots for an ISO date."""
        raise NotImplementedError

    @abstractmethod
    async def create_booking(self, token: str, request: BookingRequest) -> BookingResult:
        """Create a booking. A rejected booking is a failed result, not an exception."""
        raise NotImplementedError
