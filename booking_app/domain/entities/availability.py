from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Map `date.weekday()` (Monday == 0) to a Weekday."""
        return list(cls)[index]

    @property
    def is_weekend(self) -> bool:
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)


@dataclass(frozen=True)
class DateInfo:
    date: str  # YYYY-MM-DD
    day_of_week: Weekday
    has_slots: bool  # advisory, slots are re-derived per date


@dataclass(frozen=True)
class TimeSlot:
    start: str  # HH:MM
    end: str  # HH:MM
