"""Availability index for taskcalendar.

For one calendar date, computes which slots of the daily grid are blocked for
a task. An event blocks its ``[start, end)`` range unless both the event and
the task being placed permit overlap.
"""

from typing import Iterable, List, Set

from taskcalendar.models.calendar_event import CalendarEvent
from taskcalendar.models.constants import SLOT_MINUTES


def blocks(event: CalendarEvent, can_overlap: bool) -> bool:
    """Whether ``event`` blocks an item whose overlap permission is ``can_overlap``."""
    return not (can_overlap and event.can_overlap)


def blocked_slots(events: Iterable[CalendarEvent], can_overlap: bool) -> Set[int]:
    """Build the set of blocked slot indices for one date.

    Args:
        events: Events on the date (manual events and earlier placements)
        can_overlap: Overlap permission of the task under consideration

    Returns:
        Indices into the daily time grid that the task may not use
    """
    blocked: Set[int] = set()
    for event in events:
        if not blocks(event, can_overlap):
            continue
        first = event.start_minute // SLOT_MINUTES
        last = -(-event.end_minute // SLOT_MINUTES)  # ceil
        blocked.update(range(first, last))
    return blocked


def is_range_free(blocked: Set[int], start_index: int, count: int) -> bool:
    """Whether ``count`` contiguous slots from ``start_index`` are all unblocked."""
    return not any(i in blocked for i in range(start_index, start_index + count))


def find_conflicts(
    events: Iterable[CalendarEvent],
    start_minute: int,
    end_minute: int,
    can_overlap: bool,
) -> List[CalendarEvent]:
    """Events that would conflict with an item placed at ``[start_minute, end_minute)``.

    Used for drag-and-drop placement of a backlog task, where the
    caller already knows the exact interval.
    """
    return [
        event
        for event in events
        if blocks(event, can_overlap)
        and event.start_minute < end_minute
        and start_minute < event.end_minute
    ]
