"""
Time slot generation for a single tournament day.

Slots are built from wall-clock times in the tournament's timezone and
converted to UTC instants, so the result does not depend on the clock or
timezone of the machine running the scheduler.
"""

from datetime import datetime, date, time, timedelta, timezone
from typing import List, Optional, Union
from zoneinfo import ZoneInfo

from tournament_scheduler.models import TimeSlot
from tournament_scheduler.core.config import (
    DEFAULT_START_TIME, DEFAULT_END_TIME, DEFAULT_TIMEZONE, GAME_DURATION_MINUTES
)
from tournament_scheduler.core.exceptions import InvalidInputError


def parse_date(date_input: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD string (or pass a date through)."""
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    try:
        return datetime.strptime(str(date_input).strip(), '%Y-%m-%d').date()
    except ValueError:
        raise InvalidInputError(f"Invalid date format: {date_input!r} (expected YYYY-MM-DD)")


def parse_clock_time(time_input: Union[str, time]) -> time:
    """Parse an HH:MM 24-hour string (or pass a time through)."""
    if isinstance(time_input, time):
        return time_input
    try:
        return datetime.strptime(str(time_input).strip(), '%H:%M').time()
    except ValueError:
        raise InvalidInputError(f"Invalid time format: {time_input!r} (expected HH:MM)")


def parse_instant(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidInputError(f"Invalid timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_instant(value: datetime) -> str:
    """ISO-8601 in UTC with a Z suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_slot_label(slot_time: time) -> str:
    """12-hour display label, e.g. 8:00 AM, 12:30 PM."""
    return slot_time.strftime("%I:%M %p").lstrip('0')


class TimeSlotGenerator:
    """
    Produces the ordered, non-overlapping slots of one day.

    The window is [start_time, end_time); a slot that would run past
    end_time is dropped rather than shortened.
    """

    def __init__(self, start_time: Union[str, time] = DEFAULT_START_TIME,
                 end_time: Union[str, time] = DEFAULT_END_TIME,
                 duration_minutes: int = GAME_DURATION_MINUTES,
                 tz_name: str = DEFAULT_TIMEZONE):
        if duration_minutes <= 0:
            raise InvalidInputError(f"Slot duration must be positive, got {duration_minutes}")

        self.start_time = parse_clock_time(start_time)
        self.end_time = parse_clock_time(end_time)
        self.duration_minutes = duration_minutes
        self.tz = ZoneInfo(tz_name)

    def _to_instant(self, game_date: date, minutes_from_midnight: int) -> Optional[datetime]:
        """UTC instant of a local wall-clock time, or None if the clock skips it."""
        local = datetime.combine(game_date, time.min) + timedelta(minutes=minutes_from_midnight)
        instant = local.replace(tzinfo=self.tz).astimezone(timezone.utc)
        if instant.astimezone(self.tz).replace(tzinfo=None) != local:
            return None
        return instant

    def generate(self, game_date: Union[str, date]) -> List[TimeSlot]:
        game_date = parse_date(game_date)

        start_minutes = self.start_time.hour * 60 + self.start_time.minute
        end_minutes = self.end_time.hour * 60 + self.end_time.minute
        duration = timedelta(minutes=self.duration_minutes)

        slots = []
        minutes = start_minutes
        while minutes + self.duration_minutes <= end_minutes:
            slot_start = self._to_instant(game_date, minutes)
            # Wall-clock times lost to a spring-forward transition get no slot
            if slot_start is not None:
                label = format_slot_label(time(minutes // 60, minutes % 60))
                slots.append(TimeSlot(start=slot_start, end=slot_start + duration, label=label))
            minutes += self.duration_minutes

        return slots
