"""
Tests for time slot generation.
"""

from datetime import datetime, timezone, time

import pytest

from tournament_scheduler.core.exceptions import InvalidInputError
from tournament_scheduler.services.time_slots import (
    TimeSlotGenerator, format_instant, format_slot_label, parse_date, parse_instant
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_morning_window_yields_four_hourly_slots():
    """08:00-12:00 with 60 minute games gives 8, 9, 10 and 11 o'clock."""
    generator = TimeSlotGenerator("08:00", "12:00", 60, "America/Los_Angeles")
    slots = generator.generate("2025-06-14")

    assert [slot.label for slot in slots] == ["8:00 AM", "9:00 AM", "10:00 AM", "11:00 AM"]
    # Pacific daylight time is UTC-7
    assert slots[0].start == utc(2025, 6, 14, 15, 0)
    assert slots[-1].end == utc(2025, 6, 14, 19, 0)


def test_slots_are_contiguous_and_non_overlapping():
    slots = TimeSlotGenerator("08:00", "22:00", 45, "America/Los_Angeles").generate("2025-06-14")

    for previous, current in zip(slots, slots[1:]):
        assert previous.end == current.start
        assert previous.start < current.start


def test_partial_last_slot_is_dropped():
    slots = TimeSlotGenerator("08:00", "09:30", 60, "America/Los_Angeles").generate("2025-06-14")
    assert [slot.label for slot in slots] == ["8:00 AM"]


def test_window_that_ends_before_it_starts_is_empty():
    assert TimeSlotGenerator("12:00", "08:00", 60, "UTC").generate("2025-06-14") == []
    assert TimeSlotGenerator("08:00", "08:00", 60, "UTC").generate("2025-06-14") == []


def test_labels_use_twelve_hour_clock():
    slots = TimeSlotGenerator("11:30", "13:30", 30, "UTC").generate("2025-06-14")
    assert [slot.label for slot in slots] == ["11:30 AM", "12:00 PM", "12:30 PM", "1:00 PM"]


def test_label_format():
    assert format_slot_label(time(0, 0)) == "12:00 AM"
    assert format_slot_label(time(8, 5)) == "8:05 AM"
    assert format_slot_label(time(21, 0)) == "9:00 PM"


def test_slots_do_not_depend_on_winter_or_summer_offset():
    """The same wall-clock window maps to different UTC instants in winter and summer."""
    generator = TimeSlotGenerator("08:00", "09:00", 60, "America/Los_Angeles")

    winter = generator.generate("2025-01-11")
    summer = generator.generate("2025-07-12")

    assert winter[0].start == utc(2025, 1, 11, 16, 0)
    assert summer[0].start == utc(2025, 7, 12, 15, 0)
    assert winter[0].label == summer[0].label == "8:00 AM"


def test_spring_forward_skips_missing_hour():
    """On 2025-03-09 Pacific clocks jump from 02:00 to 03:00."""
    slots = TimeSlotGenerator("00:00", "05:00", 60, "America/Los_Angeles").generate("2025-03-09")

    assert [slot.label for slot in slots] == ["12:00 AM", "1:00 AM", "3:00 AM", "4:00 AM"]
    assert [slot.start for slot in slots] == [
        utc(2025, 3, 9, 8, 0),
        utc(2025, 3, 9, 9, 0),
        utc(2025, 3, 9, 10, 0),
        utc(2025, 3, 9, 11, 0),
    ]
    for previous, current in zip(slots, slots[1:]):
        assert previous.end <= current.start


def test_fall_back_slots_do_not_overlap():
    """On 2025-11-02 Pacific clocks repeat 01:00-02:00."""
    slots = TimeSlotGenerator("00:00", "04:00", 60, "America/Los_Angeles").generate("2025-11-02")

    assert len(slots) == 4
    for slot in slots:
        assert slot.end - slot.start == slots[0].end - slots[0].start
    for previous, current in zip(slots, slots[1:]):
        assert previous.end <= current.start


def test_generation_is_repeatable():
    generator = TimeSlotGenerator("08:00", "12:00", 60, "America/Los_Angeles")
    assert generator.generate("2025-06-14") == generator.generate("2025-06-14")


def test_non_positive_duration_is_rejected():
    with pytest.raises(InvalidInputError):
        TimeSlotGenerator("08:00", "12:00", 0, "UTC")


def test_bad_date_is_rejected():
    with pytest.raises(InvalidInputError):
        parse_date("06/14/2025")


def test_instant_round_trip_format():
    instant = parse_instant("2025-06-14T15:00:00Z")
    assert instant == utc(2025, 6, 14, 15, 0)
    assert format_instant(instant) == "2025-06-14T15:00:00Z"
    assert parse_instant(None) is None
