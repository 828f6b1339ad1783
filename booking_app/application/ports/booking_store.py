from abc import ABC, abstractmethod

from booking_app.domain.entities.booking import Booking


class BookingStorePort(ABC):
    @abstractmethod
    def add(self, booking: Booking) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_for_token(self, token: str) -> list[Booking]:
        raise NotImplementedError
