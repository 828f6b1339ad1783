from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, TypeVar

from booking_app.application.exceptions import InvalidTransitionError
from booking_app.application.ports.booking_gateway import BookingGatewayPort
from booking_app.application.ports.token_source import TokenSourcePort
from booking_app.application.utils.form_validation import normalize_form, validate_form
from booking_app.application.utils.log_helpers import mask_token
from booking_app.domain.entities.availability import TimeSlot
from booking_app.domain.entities.booking import BookingFormData, BookingRequest, BookingResult
from booking_app.domain.entities.booking_session import (
    BookingSession,
    Confirmed,
    ErrorCode,
    Failed,
    FillingForm,
    Loading,
    SelectingDate,
    SelectingTime,
)

T = TypeVar("T")


class BookingSessionMachine:
    """
    One user's pass through the booking flow.

    LOADING -> SELECT_DATE -> SELECT_TIME -> FILL_FORM -> CONFIRM, with ERROR
    reachable from every gateway-backed step. Each transition replaces the
    immutable session record; ERROR and CONFIRM are terminal until `reset()`.

    Gateway failures never escape: they become an ErrorCode on a Failed record.
    Calling an operation the current step does not offer raises
    InvalidTransitionError, which is a bug in the caller rather than a user error.
    """

    def __init__(
        self,
        gateway: BookingGatewayPort,
        token_source: TokenSourcePort,
        step_timeout: float = 15.0,
    ) -> None:
        if step_timeout <= 0:
            raise ValueError("step_timeout must be positive")
        self._gateway = gateway
        self._token_source = token_source
        self._step_timeout = step_timeout
        self._logger = logging.getLogger(__name__)

        self._state: BookingSession = Loading()
        self._generation = 0
        self._slots_request = 0
        self._pending_date: str | None = None
        self._starting = False
        self._submitting = False

    @property
    def state(self) -> BookingSession:
        return self._state

    @property
    def gateway(self) -> BookingGatewayPort:
        return self._gateway

    @property
    def pending_date(self) -> str | None:
        """Date whose slots are being fetched, if any."""
        return self._pending_date

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    async def start(self) -> BookingSession:
        if not isinstance(self._state, Loading) or self._starting:
            raise InvalidTransitionError(f"cannot start from {self._state.step.value}")

        generation = self._generation
        token = self._token_source.get_token()
        if not token:
            return self._fail(ErrorCode.NO_TOKEN)

        self._starting = True
        try:
            try:
                valid = await self._call(self._gateway.validate_token(token))
            except Exception as e:
                if generation != self._generation:
                    return self._state
                return self._fail(ErrorCode.DEFAULT, token, e)

            if generation != self._generation:
                return self._state
            if not valid:
                return self._fail(ErrorCode.INVALID_TOKEN, token)

            try:
                dates = await self._call(self._gateway.list_dates(token))
            except Exception as e:
                if generation != self._generation:
                    return self._state
                return self._fail(ErrorCode.DEFAULT, token, e)

            if generation != self._generation:
                return self._state
            return self._transition(SelectingDate(token=token, available_dates=tuple(dates)))
        finally:
            if generation == self._generation:
                self._starting = False

    async def select_date(self, date: str) -> BookingSession:
        state = self._state
        if not isinstance(state, (SelectingDate, SelectingTime)) or self._submitting:
            raise InvalidTransitionError(f"cannot select a date from {state.step.value}")

        self._slots_request += 1
        request_id = self._slots_request
        generation = self._generation
        self._pending_date = date

        try:
            slots = await self._call(self._gateway.list_slots(state.token, date))
        except Exception as e:
            if self._is_stale(generation, request_id):
                self._log_discarded(date)
                return self._state
            self._pending_date = None
            return self._fail(ErrorCode.DEFAULT, state.token, e)

        if self._is_stale(generation, request_id):
            self._log_discarded(date)
            return self._state

        self._pending_date = None
        if not slots:
            return self._fail(ErrorCode.NO_SLOTS, state.token)

        return self._transition(
            SelectingTime(
                token=state.token,
                available_dates=state.available_dates,
                selected_date=date,
                time_slots=tuple(slots),
            )
        )

    def select_slot(self, slot: TimeSlot) -> BookingSession:
        state = self._state
        if not isinstance(state, SelectingTime):
            raise InvalidTransitionError(f"cannot select a slot from {state.step.value}")
        if slot not in state.time_slots:
            raise InvalidTransitionError(f"slot {slot.start}-{slot.end} is not offered on {state.selected_date}")

        self._invalidate_pending()
        return self._transition(
            FillingForm(
                token=state.token,
                available_dates=state.available_dates,
                selected_date=state.selected_date,
                time_slots=state.time_slots,
                selected_slot=slot,
            )
        )

    def update_form(self, **fields: str) -> BookingSession:
        state = self._require_editable_form()
        form_data = replace(state.form_data, **fields)
        form_errors = tuple(name for name in state.form_errors if name not in fields)
        self._state = replace(state, form_data=form_data, form_errors=form_errors)
        return self._state

    def back(self) -> BookingSession:
        state = self._require_editable_form()
        return self._transition(
            SelectingTime(
                token=state.token,
                available_dates=state.available_dates,
                selected_date=state.selected_date,
                time_slots=state.time_slots,
            )
        )

    async def submit(self, form_data: BookingFormData | None = None) -> BookingSession:
        if self._submitting:
            self._logger.warning("Submit ignored while a booking is pending", extra={"step": self._state.step.value})
            return self._state

        state = self._state
        if isinstance(state, (Confirmed, Failed)):
            raise InvalidTransitionError(f"cannot submit from {state.step.value}")
        if not isinstance(state, FillingForm):
            return self._fail(ErrorCode.MISSING_INFO, getattr(state, "token", None))

        form = normalize_form(form_data or state.form_data)
        form_errors = validate_form(form)
        if form_errors:
            self._state = replace(state, form_data=form, form_errors=tuple(form_errors))
            return self._state

        if not (state.token and state.selected_date and state.selected_slot):
            return self._fail(ErrorCode.MISSING_INFO, state.token or None)

        request = BookingRequest(
            form=form,
            date=state.selected_date,
            slot=state.selected_slot,
            external_user_id=self._token_source.get_user_id(),
        )
        generation = self._generation
        self._state = replace(state, form_data=form, form_errors=())
        self._submitting = True
        try:
            result: BookingResult = await self._call(self._gateway.create_booking(state.token, request))
        except asyncio.TimeoutError as e:
            return self._finish_submit(generation, ErrorCode.DEFAULT, state.token, e)
        except Exception as e:
            return self._finish_submit(generation, ErrorCode.BOOKING_FAILED, state.token, e)

        if generation != self._generation:
            return self._state
        self._submitting = False

        if not result.success or not result.booking_id:
            self._logger.warning("Booking rejected", extra={"error": result.error, "token": mask_token(state.token)})
            return self._fail(ErrorCode.BOOKING_FAILED, state.token)

        self._logger.info("Booking created", extra={"booking_id": result.booking_id, "token": mask_token(state.token)})
        return self._transition(
            Confirmed(
                token=state.token,
                selected_date=state.selected_date,
                selected_slot=state.selected_slot,
                booking_id=result.booking_id,
            )
        )

    def reset(self) -> BookingSession:
        """Drop the session and every pending response; back to LOADING."""
        self._generation += 1
        self._invalidate_pending()
        self._starting = False
        self._submitting = False
        return self._transition(Loading())

    async def restart(self) -> BookingSession:
        self.reset()
        return await self.start()

    async def _call(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self._step_timeout)

    def _require_editable_form(self) -> FillingForm:
        state = self._state
        if not isinstance(state, FillingForm) or self._submitting:
            raise InvalidTransitionError(f"no editable form in {state.step.value}")
        return state

    def _finish_submit(
        self,
        generation: int,
        code: ErrorCode,
        token: str,
        error: BaseException,
    ) -> BookingSession:
        if generation != self._generation:
            return self._state
        self._submitting = False
        return self._fail(code, token, error)

    def _is_stale(self, generation: int, request_id: int) -> bool:
        return generation != self._generation or request_id != self._slots_request

    def _invalidate_pending(self) -> None:
        self._slots_request += 1
        self._pending_date = None

    def _log_discarded(self, date: str) -> None:
        self._logger.info("Discarded stale time slots response", extra={"date": date})

    def _transition(self, state: BookingSession) -> BookingSession:
        self._state = state
        self._logger.info(
            "Booking session step changed",
            extra={"step": state.step.value, "token": mask_token(getattr(state, "token", None))},
        )
        return state

    def _fail(
        self,
        code: ErrorCode,
        token: str | None = None,
        error: BaseException | None = None,
    ) -> BookingSession:
        # ERROR is terminal: responses still in flight must not replace it.
        self._generation += 1
        self._invalidate_pending()
        self._starting = False
        self._submitting = False

        extra = {"error_code": code.value, "token": mask_token(token)}
        if error is not None:
            extra["error"] = str(error) or type(error).__name__
            self._logger.error("Booking session failed", extra=extra)
        else:
            self._logger.warning("Booking session failed", extra=extra)
        return self._transition(Failed(error_code=code, token=token))
