"""
Tests for the availability engine: date window and one-hour slot generation.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta

import pytest

from booking_app.application.use_cases.availability import (
    AvailabilityEngine,
    AvailabilityPolicy,
    parse_iso_date,
)
from booking_app.domain.entities.availability import TimeSlot, Weekday

from fakes import ScriptedRandom

MONDAY = date(2024, 1, 22)
SATURDAY = date(2024, 1, 27)
SUNDAY = date(2024, 1, 28)


def _engine(rng=None, today: date = MONDAY, **policy) -> AvailabilityEngine:
    return AvailabilityEngine(
        policy=AvailabilityPolicy(**policy),
        rng=rng or random.Random(7),
        clock=lambda: today,
    )


def test_dates_cover_window_in_order_starting_today():
    """Every window size yields exactly that many consecutive days from today."""
    for window in (1, 7, 14, 30):
        dates = _engine().generate_available_dates(window)
        assert len(dates) == window
        assert dates[0].date == MONDAY.isoformat()
        expected = [(MONDAY + timedelta(days=i)).isoformat() for i in range(window)]
        assert [d.date for d in dates] == expected


def test_dates_default_to_policy_window():
    assert len(_engine().generate_available_dates()) == 14
    assert len(_engine(window_days=5).generate_available_dates()) == 5


def test_dates_carry_weekday_names():
    dates = _engine().generate_available_dates(7)
    assert [d.day_of_week for d in dates] == [
        Weekday.MONDAY,
        Weekday.TUESDAY,
        Weekday.WEDNESDAY,
        Weekday.THURSDAY,
        Weekday.FRIDAY,
        Weekday.SATURDAY,
        Weekday.SUNDAY,
    ]
    assert dates[5].day_of_week.value == "Saturday"


def test_closed_days_are_kept_with_has_slots_false():
    """A draw above the open probability marks the day closed but keeps it in the list."""
    # Mon..Sun: weekday threshold 0.7, weekend threshold 0.3
    rng = ScriptedRandom([0.1, 0.9, 0.69, 0.7, 0.0, 0.29, 0.31])
    dates = _engine(rng).generate_available_dates(7)
    assert [d.has_slots for d in dates] == [True, False, True, False, True, True, False]
    assert rng.calls == 7


def test_weekend_probability_differs_from_weekday():
    rng = ScriptedRandom([], default=0.5)
    dates = _engine(rng).generate_available_dates(7)
    assert all(d.has_slots for d in dates if not d.day_of_week.is_weekend)
    assert not any(d.has_slots for d in dates if d.day_of_week.is_weekend)


def test_seeded_generator_pins_output():
    first = _engine(random.Random(42)).generate_available_dates(14)
    second = _engine(random.Random(42)).generate_available_dates(14)
    assert first == second


def test_non_positive_window_is_rejected():
    engine = _engine()
    for bad in (0, -3):
        with pytest.raises(ValueError):
            engine.generate_available_dates(bad)
    with pytest.raises(ValueError):
        AvailabilityPolicy(window_days=0)


def test_weekend_slots_are_always_empty():
    """Weekends never get slots, whatever the random source says."""
    rng = ScriptedRandom([], default=0.0)
    engine = _engine(rng)
    assert engine.generate_time_slots(SATURDAY) == []
    assert engine.generate_time_slots("2024-01-28") == []
    assert rng.calls == 0


def test_weekday_slots_all_open():
    slots = _engine(ScriptedRandom([], default=0.0)).generate_time_slots(MONDAY)
    assert slots == [
        TimeSlot("09:00", "10:00"),
        TimeSlot("10:00", "11:00"),
        TimeSlot("11:00", "12:00"),
        TimeSlot("12:00", "13:00"),
        TimeSlot("13:00", "14:00"),
        TimeSlot("14:00", "15:00"),
        TimeSlot("15:00", "16:00"),
        TimeSlot("16:00", "17:00"),
    ]


def test_weekday_slots_independently_excluded():
    rng = ScriptedRandom([0.0, 0.9, 0.5, 0.99, 0.1, 0.7, 0.2, 0.8])
    slots = _engine(rng).generate_time_slots("2024-01-23")
    assert [s.start for s in slots] == ["09:00", "11:00", "13:00", "15:00"]
    assert rng.calls == 8


def test_weekday_slots_may_be_empty():
    assert _engine(ScriptedRandom([], default=0.95)).generate_time_slots(MONDAY) == []


def test_weekday_slots_stay_inside_working_window():
    """Random draws: slots are within 09:00-17:00, one hour long, ordered and unique."""
    engine = _engine(random.Random(3))
    for offset in range(60):
        day = MONDAY + timedelta(days=offset)
        if day.weekday() >= 5:
            continue
        slots = engine.generate_time_slots(day)
        starts = [s.start for s in slots]
        assert starts == sorted(starts)
        assert len(set(slots)) == len(slots)
        for slot in slots:
            start = datetime.strptime(slot.start, "%H:%M")
            end = datetime.strptime(slot.end, "%H:%M")
            assert end - start == timedelta(hours=1)
            assert "09:00" <= slot.start and slot.end <= "17:00"


def test_slots_for_dates_outside_window_use_same_rule():
    engine = _engine(ScriptedRandom([], default=0.0))
    far_monday = MONDAY + timedelta(days=7 * 52)
    assert len(engine.generate_time_slots(far_monday)) == 8
    assert engine.generate_time_slots(SUNDAY - timedelta(days=7 * 52)) == []


def test_custom_working_window():
    slots = _engine(ScriptedRandom([], default=0.0), work_start_hour=13, work_end_hour=15).generate_time_slots(MONDAY)
    assert slots == [TimeSlot("13:00", "14:00"), TimeSlot("14:00", "15:00")]


def test_parse_iso_date():
    assert parse_iso_date("2024-01-22") == MONDAY
    for bad in ("22/01/2024", "2024-13-01", "", "tomorrow"):
        with pytest.raises(ValueError):
            parse_iso_date(bad)
