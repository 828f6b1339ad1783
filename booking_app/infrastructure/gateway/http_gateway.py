from __future__ import annotations

import logging
from typing import Any

import httpx

from booking_app.application.exceptions import GatewayContractError, GatewayError, GatewayUpstreamError
from booking_app.application.ports.booking_gateway import BookingGatewayPort
from booking_app.application.utils.log_helpers import mask_token
from booking_app.core.config import settings
from booking_app.domain.entities.availability import DateInfo, TimeSlot, Weekday
from booking_app.domain.entities.booking import BookingRequest, BookingResult


class HttpBookingGateway(BookingGatewayPort):
    """
    Booking backend over HTTP.

    Endpoints: /validate-token, /available-dates, /time-slots, /create-booking.
    Raises:
        GatewayUpstreamError: network errors, timeouts, unexpected status codes
        GatewayContractError: a 2xx body that is not the expected JSON shape
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.BOOKING_API_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.BOOKING_API_TIMEOUT_SECONDS
        )
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def validate_token(self, token: str) -> bool:
        response = await self._request("GET", "/validate-token", params={"token": token})
        if response.status_code == 401:
            return False
        self._raise_for_status(response, "validate-token")
        data = self._json(response, "validate-token")
        valid = data.get("valid")
        if not isinstance(valid, bool):
            raise GatewayContractError("validate-token: 'valid' must be a boolean.")
        return valid

    async def list_dates(self, token: str) -> list[DateInfo]:
        try:
            response = await self._request("GET", "/available-dates", params={"token": token})
            self._raise_for_status(response, "available-dates")
            data = self._json(response, "available-dates")
            return [_parse_date_info(item) for item in _require_list(data, "dates", "available-dates")]
        except GatewayError as e:
            self._logger.error("Error fetching available dates", extra={"error": str(e), "token": mask_token(token)})
            return []

    async def list_slots(self, token: str, date: str) -> list[TimeSlot]:
        response = await self._request("GET", "/time-slots", params={"token": token, "date": date})
        self._raise_for_status(response, "time-slots")
        data = self._json(response, "time-slots")
        return [_parse_time_slot(item) for item in _require_list(data, "slots", "time-slots")]

    async def create_booking(self, token: str, request: BookingRequest) -> BookingResult:
        payload: dict[str, Any] = {
            "token": token,
            "name": request.form.name,
            "email": request.form.email,
            "title": request.form.title,
            "description": request.form.description,
            "date": request.date,
            "start_time": request.slot.start,
            "end_time": request.slot.end,
        }
        if request.external_user_id:
            payload["telegram_id"] = request.external_user_id

        response = await self._request("POST", "/create-booking", json=payload)
        if response.status_code in (400, 401):
            error = self._error_message(response)
            self._logger.warning(
                "Booking rejected by backend",
                extra={"status": response.status_code, "error": error, "token": mask_token(token)},
            )
            return BookingResult.failed(error)
        self._raise_for_status(response, "create-booking")

        data = self._json(response, "create-booking")
        if data.get("success") is True:
            booking_id = data.get("booking_id")
            if not isinstance(booking_id, str) or not booking_id:
                raise GatewayContractError("create-booking: success without 'booking_id'.")
            return BookingResult.ok(booking_id)
        return BookingResult.failed(str(data.get("error") or "Failed to create booking"))

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, f"{self._base_url}{path}", **kwargs)
        except httpx.HTTPError as e:
            self._logger.error("Booking backend unreachable", extra={"error": str(e) or type(e).__name__})
            raise GatewayUpstreamError(f"{path}: {type(e).__name__}") from e

    def _raise_for_status(self, response: httpx.Response, what: str) -> None:
        if response.status_code >= 400:
            self._logger.error(
                "Booking backend error",
                extra={"status": response.status_code, "error": self._error_message(response)},
            )
            raise GatewayUpstreamError(f"{what}: HTTP {response.status_code}")

    def _json(self, response: httpx.Response, what: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise GatewayContractError(f"{what}: response is not JSON.") from e
        if not isinstance(data, dict):
            raise GatewayContractError(f"{what}: expected a JSON object.")
        return data

    def _error_message(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return f"HTTP {response.status_code}"


def _require_list(data: dict[str, Any], key: str, what: str) -> list[Any]:
    items = data.get(key)
    if not isinstance(items, list):
        raise GatewayContractError(f"{what}: '{key}' must be a list.")
    return items


def _parse_date_info(item: Any) -> DateInfo:
    try:
        return DateInfo(
            date=str(item["date"]),
            day_of_week=Weekday(item["day_of_week"]),
            has_slots=bool(item["has_slots"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GatewayContractError(f"available-dates: malformed date entry {item!r}.") from e


def _parse_time_slot(item: Any) -> TimeSlot:
    try:
        start, end = item["start"], item["end"]
    except (KeyError, TypeError) as e:
        raise GatewayContractError(f"time-slots: malformed slot entry {item!r}.") from e
    if not isinstance(start, str) or not isinstance(end, str):
        raise GatewayContractError(f"time-slots: malformed slot entry {item!r}.")
    return TimeSlot(start=start, end=end)
