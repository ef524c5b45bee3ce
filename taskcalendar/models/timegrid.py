"""Time grid for taskcalendar.

A day is split into 48 fixed 30-minute slots. Times are carried as integer
minutes since midnight (a slot's ``sort_order``); the 12-hour label is derived
for display and never used for ordering or arithmetic.
"""

import re
from typing import Iterator, NamedTuple

from taskcalendar.models.constants import SLOT_MINUTES, MINUTES_PER_DAY


_TIME_12H = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")
_TIME_24H = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


class TimeSlot(NamedTuple):
    """A discrete 30-minute point in the daily grid."""

    sort_order: int

    @property
    def display(self) -> str:
        return format_time_12h(self.sort_order)

    @property
    def value(self) -> str:
        return format_time_24h(self.sort_order)

    @property
    def hour24(self) -> int:
        return self.sort_order // 60

    @property
    def index(self) -> int:
        return self.sort_order // SLOT_MINUTES


def slots() -> Iterator[TimeSlot]:
    """Yield the 48 daily slots in ascending order.

    Each call returns a fresh generator, so the sequence can be walked again.
    """
    for minute in range(0, MINUTES_PER_DAY, SLOT_MINUTES):
        yield TimeSlot(minute)


def is_slot_aligned(minute: int) -> bool:
    return minute % SLOT_MINUTES == 0


def slot_index(minute: int) -> int:
    """Index into the daily grid of the slot starting at ``minute``.

    Raises:
        ValueError: If ``minute`` is not a slot boundary inside the day
    """
    if not is_slot_aligned(minute) or not 0 <= minute < MINUTES_PER_DAY:
        raise ValueError(f"{minute} is not a slot start (0..{MINUTES_PER_DAY - SLOT_MINUTES} in steps of {SLOT_MINUTES})")
    return minute // SLOT_MINUTES


def slots_needed(duration_min: int) -> int:
    """Number of contiguous slots a task of ``duration_min`` occupies (ceil)."""
    if duration_min <= 0:
        raise ValueError("duration must be positive")
    return (duration_min + SLOT_MINUTES - 1) // SLOT_MINUTES


def add_minutes(minute: int, minutes: int) -> int:
    """Advance ``minute`` by ``minutes``, clipped into the day via modulo.

    Callers placing tasks must not rely on the wrap; the scheduler keeps every
    placement inside its window.
    """
    return (minute + minutes) % MINUTES_PER_DAY


def span_minutes(start: int, end: int) -> int:
    """Length of ``[start, end)`` in minutes. Used for display heights."""
    duration = end - start
    if duration <= 0:
        raise ValueError(f"end ({end}) must be after start ({start})")
    return duration


def format_time_12h(minute: int) -> str:
    """Format minutes since midnight as '9:00 AM'. 1440 (end of day) renders as midnight."""
    minute %= MINUTES_PER_DAY
    hour, mins = divmod(minute, 60)
    hour12 = 12 if hour % 12 == 0 else hour % 12
    ampm = "AM" if hour < 12 else "PM"
    return f"{hour12}:{mins:02d} {ampm}"


def format_time_24h(minute: int) -> str:
    minute %= MINUTES_PER_DAY
    hour, mins = divmod(minute, 60)
    return f"{hour:02d}:{mins:02d}"


def parse_time(text: str) -> int:
    """Parse '9:00 AM' or '09:00' into minutes since midnight.

    '24:00' is accepted as the end of the day (1440).

    Raises:
        ValueError: If the text is not a recognizable time
    """
    match = _TIME_12H.match(text)
    if match:
        hour, mins, ampm = int(match.group(1)), int(match.group(2)), match.group(3).upper()
        if not 1 <= hour <= 12 or mins >= 60:
            raise ValueError(f"Invalid time: {text!r}")
        hour %= 12
        if ampm == "PM":
            hour += 12
        return hour * 60 + mins

    match = _TIME_24H.match(text)
    if match:
        hour, mins = int(match.group(1)), int(match.group(2))
        if (hour, mins) == (24, 0):
            return MINUTES_PER_DAY
        if hour >= 24 or mins >= 60:
            raise ValueError(f"Invalid time: {text!r}")
        return hour * 60 + mins

    raise ValueError(f"Invalid time: {text!r}")


def format_duration(minutes: int) -> str:
    """Format a duration as '1h 30m', '2h' or '45m'."""
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m" if mins else f"{hours}h"
    return f"{mins}m"
