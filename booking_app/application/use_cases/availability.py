from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from booking_app.domain.entities.availability import DateInfo, TimeSlot, Weekday


@dataclass(frozen=True)
class AvailabilityPolicy:
    window_days: int = 14
    work_start_hour: int = 9
    work_end_hour: int = 17
    slot_minutes: int = 60
    weekday_open_probability: float = 0.7
    weekend_open_probability: float = 0.3
    slot_open_probability: float = 0.7

    def __post_init__(self) -> None:
        if self.window_days <= 0:
            raise ValueError(f"window_days must be positive, got {self.window_days}")
        if not 0 <= self.work_start_hour < self.work_end_hour <= 24:
            raise ValueError(
                f"invalid working window {self.work_start_hour}:00-{self.work_end_hour}:00"
            )
        for name in ("weekday_open_probability", "weekend_open_probability", "slot_open_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")


class AvailabilityEngine:
    """
    Simulated availability for a single calendar.

    Dates: one entry per day of the window, weekends open less often than weekdays.
    Slots: one-hour candidates inside the working window, each kept independently;
    weekends never have slots. Every draw is one `rng.random()` call, so a seeded
    or scripted generator pins the output.
    """

    def __init__(
        self,
        policy: AvailabilityPolicy | None = None,
        rng: random.Random | None = None,
        timezone: ZoneInfo | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self._policy = policy or AvailabilityPolicy()
        self._rng = rng or random.Random()
        self._timezone = timezone or ZoneInfo("UTC")
        self._clock = clock or (lambda: datetime.now(self._timezone).date())
        self._logger = logging.getLogger(__name__)

    @property
    def policy(self) -> AvailabilityPolicy:
        return self._policy

    def today(self) -> date:
        return self._clock()

    def generate_available_dates(self, window_days: int | None = None) -> list[DateInfo]:
        days = self._policy.window_days if window_days is None else window_days
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise ValueError(f"window_days must be a positive integer, got {days!r}")

        start = self.today()
        dates: list[DateInfo] = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            weekday = Weekday.from_index(day.weekday())
            probability = (
                self._policy.weekend_open_probability
                if weekday.is_weekend
                else self._policy.weekday_open_probability
            )
            dates.append(
                DateInfo(
                    date=day.isoformat(),
                    day_of_week=weekday,
                    has_slots=self._draw(probability),
                )
            )

        self._logger.debug(
            "Generated available dates",
            extra={"date": start.isoformat(), "window_days": days},
        )
        return dates

    def generate_time_slots(self, day: date | str) -> list[TimeSlot]:
        parsed = parse_iso_date(day) if isinstance(day, str) else day
        if Weekday.from_index(parsed.weekday()).is_weekend:
            return []

        step = timedelta(minutes=self._policy.slot_minutes)
        current = datetime.combine(parsed, datetime.min.time().replace(hour=self._policy.work_start_hour))
        if self._policy.work_end_hour == 24:
            end_time = datetime.combine(parsed + timedelta(days=1), datetime.min.time())
        else:
            end_time = datetime.combine(parsed, datetime.min.time().replace(hour=self._policy.work_end_hour))

        slots: list[TimeSlot] = []
        while current + step <= end_time:
            slot_end = current + step
            if self._draw(self._policy.slot_open_probability):
                slots.append(TimeSlot(start=current.strftime("%H:%M"), end=slot_end.strftime("%H:%M")))
            current = slot_end

        return slots

    def _draw(self, probability: float) -> bool:
        return self._rng.random() < probability


def parse_iso_date(value: str) -> date:
    """Parse a strict `YYYY-MM-DD` string."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as e:
        raise ValueError(f"invalid ISO date: {value!r}") from e
