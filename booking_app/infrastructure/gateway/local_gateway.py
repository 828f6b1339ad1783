from __future__ import annotations

import logging

from booking_app.application.exceptions import InvalidTokenError, MissingFieldsError
from booking_app.application.ports.booking_gateway import BookingGatewayPort
from booking_app.application.use_cases.booking_service import BookingService, NewBooking
from booking_app.domain.entities.availability import DateInfo, TimeSlot
from booking_app.domain.entities.booking import BookingRequest, BookingResult


class LocalBookingGateway(BookingGatewayPort):
    """In-process gateway over BookingService, for dev and local runs."""

    def __init__(self, service: BookingService) -> None:
        self._service = service
        self._logger = logging.getLogger(__name__)

    async def validate_token(self, token: str) -> bool:
        return self._service.is_valid_token(token)

    async def list_dates(self, token: str) -> list[DateInfo]:
        try:
            return self._service.available_dates(token)
        except InvalidTokenError as e:
            self._logger.error("Error fetching available dates", extra={"error": str(e)})
            return []

    async def list_slots(self, token: str, date: str) -> list[TimeSlot]:
        return self._service.time_slots(token, date)

    async def create_booking(self, token: str, request: BookingRequest) -> BookingResult:
        try:
            booking = self._service.create_booking(
                NewBooking(
                    token=token,
                    name=request.form.name,
                    email=request.form.email,
                    title=request.form.title,
                    description=request.form.description,
                    date=request.date,
                    start_time=request.slot.start,
                    end_time=request.slot.end,
                    telegram_id=request.external_user_id,
                )
            )
        except (InvalidTokenError, MissingFieldsError) as e:
            return BookingResult.failed(str(e))
        return BookingResult.ok(booking.booking_id)
