from __future__ import annotations

import re

from booking_app.domain.entities.booking import BookingFormData


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS = ("name", "email", "title")


def normalize_form(form: BookingFormData) -> BookingFormData:
    return BookingFormData(
        name=form.name.strip(),
        email=form.email.strip(),
        title=form.title.strip(),
        description=(form.description or "").strip(),
    )


def validate_form(form: BookingFormData) -> list[str]:
    """Return the names of invalid fields, in form order. Empty means valid."""
    errors = [name for name in REQUIRED_FIELDS if not getattr(form, name).strip()]
    if "email" not in errors and not is_valid_email(form.email):
        errors.append("email")
    return sorted(errors, key=REQUIRED_FIELDS.index)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))
