from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from booking_app.domain.entities.availability import DateInfo, TimeSlot
from booking_app.domain.entities.booking import BookingFormData


class BookingStep(str, Enum):
    LOADING = "loading"
    SELECT_DATE = "select_date"
    SELECT_TIME = "select_time"
    FILL_FORM = "fill_form"
    CONFIRM = "confirm"
    ERROR = "error"


class ErrorCode(str, Enum):
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    NO_SLOTS = "no_slots"
    MISSING_INFO = "missing_info"
    BOOKING_FAILED = "booking_failed"
    DEFAULT = "default"


@dataclass(frozen=True)
class Loading:
    step: ClassVar[BookingStep] = BookingStep.LOADING


@dataclass(frozen=True)
class SelectingDate:
    step: ClassVar[BookingStep] = BookingStep.SELECT_DATE

    token: str
    available_dates: tuple[DateInfo, ...] = ()


@dataclass(frozen=True)
class SelectingTime:
    step: ClassVar[BookingStep] = BookingStep.SELECT_TIME

    token: str
    available_dates: tuple[DateInfo, ...]
    selected_date: str
    time_slots: tuple[TimeSlot, ...]


@dataclass(frozen=True)
class FillingForm:
    step: ClassVar[BookingStep] = BookingStep.FILL_FORM

    token: str
    available_dates: tuple[DateInfo, ...]
    selected_date: str
    time_slots: tuple[TimeSlot, ...]
    selected_slot: TimeSlot
    form_data: BookingFormData = field(default_factory=BookingFormData)
    form_errors: tuple[str, ...] = ()  # names of fields that failed validation


@dataclass(frozen=True)
class Confirmed:
    step: ClassVar[BookingStep] = BookingStep.CONFIRM

    token: str
    selected_date: str
    selected_slot: TimeSlot
    booking_id: str


@dataclass(frozen=True)
class Failed:
    step: ClassVar[BookingStep] = BookingStep.ERROR

    error_code: ErrorCode
    token: str | None = None


BookingSession = Union[Loading, SelectingDate, SelectingTime, FillingForm, Confirmed, Failed]
