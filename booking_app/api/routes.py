from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from booking_app.api.schemas import (
    AvailableDatesResponseSchema,
    CreateBookingRequestSchema,
    CreateBookingResponseSchema,
    DateInfoSchema,
    TimeSlotSchema,
    TimeSlotsResponseSchema,
    ValidateTokenResponseSchema,
)
from booking_app.application.exceptions import InvalidTokenError, MissingFieldsError
from booking_app.application.use_cases.booking_service import BookingService, NewBooking
from booking_app.application.utils.log_helpers import mask_token
from booking_app.wiring.dependencies import get_booking_service


MAX_WINDOW_DAYS = 366

router = APIRouter()
logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **body: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={**body, "error": message})


@router.api_route("/validate-token", methods=["GET", "POST"], response_model=ValidateTokenResponseSchema)
def validate_token(
    token: str | None = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    valid = service.is_valid_token(token)
    logger.info("Token checked", extra={"token": mask_token(token), "valid": valid})
    return ValidateTokenResponseSchema(valid=valid)


@router.get("/available-dates", response_model=AvailableDatesResponseSchema)
def available_dates(
    token: str | None = Query(None),
    days: str | None = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    try:
        dates = service.available_dates(token, _parse_days(days))
    except InvalidTokenError as e:
        return _error(401, str(e))

    return AvailableDatesResponseSchema(
        dates=[DateInfoSchema(date=d.date, day_of_week=d.day_of_week, has_slots=d.has_slots) for d in dates]
    )


@router.get("/time-slots", response_model=TimeSlotsResponseSchema)
def time_slots(
    token: str | None = Query(None),
    date: str | None = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    try:
        slots = service.time_slots(token, date)
    except InvalidTokenError as e:
        return _error(401, str(e))
    except ValueError as e:
        return _error(400, str(e))

    return TimeSlotsResponseSchema(slots=[TimeSlotSchema(start=s.start, end=s.end) for s in slots])


@router.post("/create-booking", response_model=CreateBookingResponseSchema)
def create_booking(
    req: CreateBookingRequestSchema,
    service: BookingService = Depends(get_booking_service),
):
    try:
        booking = service.create_booking(
            NewBooking(
                token=req.token,
                name=req.name,
                email=req.email,
                title=req.title,
                description=req.description,
                date=req.date,
                start_time=req.start_time,
                end_time=req.end_time,
                telegram_id=str(req.telegram_id) if req.telegram_id is not None else None,
            )
        )
    except InvalidTokenError as e:
        return _error(401, str(e))
    except MissingFieldsError as e:
        logger.info("Booking request incomplete", extra={"reason": ",".join(e.fields)})
        return _error(400, str(e), success=False)

    return CreateBookingResponseSchema(success=True, booking_id=booking.booking_id)


def _parse_days(raw: str | None) -> int | None:
    # Unparseable or non-positive values fall back to the configured window;
    # larger values are capped at MAX_WINDOW_DAYS.
    try:
        days = int(raw) if raw is not None else None
    except ValueError:
        return None
    if days is None or days <= 0:
        return None
    return min(days, MAX_WINDOW_DAYS)
