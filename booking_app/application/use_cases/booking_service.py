from __future__ import annotations

import logging
import random
import string
import time
from dataclasses import dataclass
from typing import Iterable

from booking_app.application.exceptions import InvalidTokenError, MissingFieldsError
from booking_app.application.ports.booking_store import BookingStorePort
from booking_app.application.use_cases.availability import AvailabilityEngine, parse_iso_date
from booking_app.application.utils.log_helpers import mask_token
from booking_app.domain.entities.availability import DateInfo, TimeSlot
from booking_app.domain.entities.booking import Booking

BOOKING_ID_ALPHABET = string.ascii_lowercase + string.digits
BOOKING_ID_LENGTH = 8


@dataclass(frozen=True)
class NewBooking:
    token: str | None = None
    name: str | None = None
    email: str | None = None
    title: str | None = None
    description: str | None = None
    date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    telegram_id: str | None = None


REQUIRED_BOOKING_FIELDS = ("name", "email", "title", "date", "start_time", "end_time")


class BookingService:
    """Backend side of the booking flow: token checks, availability and booking intake."""

    def __init__(
        self,
        engine: AvailabilityEngine,
        store: BookingStorePort,
        valid_tokens: Iterable[str],
        id_rng: random.Random | None = None,
    ) -> None:
        self._engine = engine
        self._store = store
        self._valid_tokens = frozenset(t for t in valid_tokens if t)
        self._id_rng = id_rng or random.Random()
        self._logger = logging.getLogger(__name__)

    def is_valid_token(self, token: str | None) -> bool:
        return bool(token) and token in self._valid_tokens

    def available_dates(self, token: str | None, days: int | None = None) -> list[DateInfo]:
        self._require_token(token)
        return self._engine.generate_available_dates(days)

    def time_slots(self, token: str | None, date: str | None) -> list[TimeSlot]:
        self._require_token(token)
        if not date:
            raise MissingFieldsError(["date"], "Date is required")
        return self._engine.generate_time_slots(parse_iso_date(date))

    def create_booking(self, payload: NewBooking) -> Booking:
        self._require_token(payload.token)
        missing = [name for name in REQUIRED_BOOKING_FIELDS if not getattr(payload, name)]
        if missing:
            raise MissingFieldsError(missing)

        booking = Booking(
            booking_id=self._new_booking_id(),
            token=payload.token or "",
            name=payload.name or "",
            email=payload.email or "",
            title=payload.title or "",
            description=payload.description or "",
            date=payload.date or "",
            start_time=payload.start_time or "",
            end_time=payload.end_time or "",
            telegram_id=payload.telegram_id,
            created_at=time.time(),
        )
        self._store.add(booking)
        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.booking_id, "date": booking.date, "token": mask_token(booking.token)},
        )
        return booking

    def _require_token(self, token: str | None) -> None:
        if not self.is_valid_token(token):
            self._logger.info("Rejected booking token", extra={"token": mask_token(token)})
            raise InvalidTokenError("Invalid token")

    def _new_booking_id(self) -> str:
        while True:
            booking_id = "".join(self._id_rng.choice(BOOKING_ID_ALPHABET) for _ in range(BOOKING_ID_LENGTH))
            if self._store.get(booking_id) is None:
                return booking_id
