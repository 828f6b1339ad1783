from __future__ import annotations

from booking_app.domain.entities.booking_session import ErrorCode


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NO_TOKEN: "No booking token provided",
    ErrorCode.INVALID_TOKEN: "Invalid or expired booking link",
    ErrorCode.NO_SLOTS: "No available times on this date. Please pick another day.",
    ErrorCode.MISSING_INFO: "Missing booking information",
    ErrorCode.BOOKING_FAILED: "Failed to create booking",
    ErrorCode.DEFAULT: "An error occurred",
}


def message_for(code: ErrorCode | str | None) -> str:
    try:
        return ERROR_MESSAGES[ErrorCode(code)]
    except ValueError:
        return ERROR_MESSAGES[ErrorCode.DEFAULT]
