from pydantic import BaseModel, Field

from booking_app.domain.entities.availability import Weekday


class DateInfoSchema(BaseModel):
    date: str
    day_of_week: Weekday
    has_slots: bool


class TimeSlotSchema(BaseModel):
    start: str
    end: str


class ValidateTokenResponseSchema(BaseModel):
    valid: bool


class AvailableDatesResponseSchema(BaseModel):
    dates: list[DateInfoSchema] = Field(default_factory=list)


class TimeSlotsResponseSchema(BaseModel):
    slots: list[TimeSlotSchema] = Field(default_factory=list)


class CreateBookingRequestSchema(BaseModel):
    # Optional so that missing fields answer 400 with the booking error body.
    token: str | None = None
    name: str | None = None
    email: str | None = None
    title: str | None = None
    description: str | None = None
    date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    telegram_id: str | int | None = None


class CreateBookingResponseSchema(BaseModel):
    success: bool
    booking_id: str | None = None
    error: str | None = None
