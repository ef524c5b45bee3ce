"""Scheduling algorithm for taskcalendar.

Places backlog tasks into free 30-minute slots of the calendar, most urgent
tasks first, within a requested date range, daily time window and set of
weekdays. Placement is first-fit: earliest allowed date, then earliest slot.

The scheduler is pure: it never mutates the tasks or events it is given and
returns new events and updated task copies for the caller to persist.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Set

from pydantic import ValidationError

from taskcalendar.engine.availability import blocked_slots, is_range_free
from taskcalendar.engine.calendar_views import iter_dates, to_weekday_index
from taskcalendar.engine.ranking import stack_rank
from taskcalendar.models.calendar_event import CalendarEvent
from taskcalendar.models.constants import SLOT_MINUTES
from taskcalendar.models.schedule_request import AutoScheduleRequest, TimeWindow
from taskcalendar.models.task import Task, PRIORITY_RANK
from taskcalendar.models.task_factory import create_event_for_task
from taskcalendar.models.timegrid import TimeSlot, slots, slots_needed

logger = logging.getLogger(__name__)


# Scheduling granularity: 30 minutes
SCHEDULING_GRANULARITY_MINUTES = SLOT_MINUTES


class InvalidTaskError(ValueError):
    """A backlog entry cannot be scheduled because it is malformed."""


class SchedulingProgress(NamedTuple):
    """Reported after every task decision."""
    task_id: Optional[str]
    event: Optional[CalendarEvent]
    done: int
    total: int


ProgressCallback = Callable[[SchedulingProgress], None]


class SchedulingResult:
    """Result of scheduling operation."""

    def __init__(self):
        self.placed_events: List[CalendarEvent] = []
        self.updated_tasks: List[Task] = []
        self.scheduled_task_ids: Set[str] = set()
        self.unscheduled_task_ids: Set[str] = set()
        # Tasks whose slot span is wider than the daily window (can never fit)
        self.too_long_task_ids: Set[str] = set()
        # Malformed backlog entries, skipped without aborting the pass
        self.failed_task_ids: Set[str] = set()
        self.attempted_count: int = 0

    @property
    def scheduled_count(self) -> int:
        return len(self.scheduled_task_ids)


def schedule_tasks(
    backlog: Iterable[Any],
    occupied_events_by_date: Optional[Mapping[date, List[CalendarEvent]]],
    request: AutoScheduleRequest,
    progress: Optional[ProgressCallback] = None,
) -> SchedulingResult:
    """Place unscheduled backlog tasks into free calendar slots.

    Algorithm:
    - Only tasks with ``scheduled == False`` are considered
    - Tasks are stack-ranked by priority (stable for equal priority)
    - Each task needs ceil(duration / 30) contiguous slots, all starting at or
      after the window start and ending at or before the window end
    - Dates are walked in ascending order, skipping disallowed weekdays
    - A slot range is free unless an event covers it and either that event or
      the task forbids overlap
    - Events placed earlier in the pass block later tasks
    - The first free range wins; tasks that fit nowhere stay unscheduled

    Args:
        backlog: Tasks (``Task`` objects or dicts) in backlog order
        occupied_events_by_date: Existing events grouped by date
        request: Validated date range, daily window and weekdays
        progress: Optional callback invoked after each task decision

    Returns:
        SchedulingResult with placed events and scheduled/unscheduled task ids
    """
    result = SchedulingResult()

    tasks: List[Task] = []
    seen_ids: Set[str] = set()
    for entry in backlog:
        try:
            task = _coerce_task(entry)
        except (InvalidTaskError, ValidationError) as e:
            task_id = _entry_id(entry)
            logger.warning(f"Skipping malformed task {task_id}: {type(e).__name__}: {str(e)}")
            if task_id is not None:
                result.failed_task_ids.add(task_id)
                result.unscheduled_task_ids.add(task_id)
            continue
        # A task id gets at most one placement; the first occurrence wins.
        if task.id in seen_ids:
            logger.warning(f"Ignoring duplicate backlog entry for task {task.id}")
            continue
        seen_ids.add(task.id)
        tasks.append(task)

    pending = stack_rank([task for task in tasks if not task.scheduled])
    result.attempted_count = len(pending)

    day_events = _copy_events_by_date(occupied_events_by_date)
    window = request.time_window
    allowed = set(request.allowed_weekdays)
    candidate_days = [
        day for day in iter_dates(request.start_date, request.end_date)
        if to_weekday_index(day) in allowed
    ]

    for done, task in enumerate(pending, start=1):
        event = _place_task(task, candidate_days, window, day_events, result)
        if event is not None:
            day_events.setdefault(event.event_date, []).append(event)
            result.placed_events.append(event)
            result.updated_tasks.append(task.model_copy(update={"scheduled": True}))
            result.scheduled_task_ids.add(task.id)
            logger.debug(
                f"Placed task {task.id} on {event.event_date.isoformat()} "
                f"{event.start_display} - {event.end_display}"
            )
        else:
            result.unscheduled_task_ids.add(task.id)
            logger.debug(f"No slot found for task {task.id}")

        if progress is not None:
            progress(SchedulingProgress(task_id=task.id, event=event, done=done, total=len(pending)))

    logger.info(
        f"Auto-schedule {request.start_date.isoformat()}..{request.end_date.isoformat()}: "
        f"placed {result.scheduled_count} of {result.attempted_count} task(s)"
    )
    return result


def candidate_starts(window: TimeWindow, needed: int) -> List[TimeSlot]:
    """Slots from which ``needed`` slots fit before the window end."""
    last_start = window.end - needed * SLOT_MINUTES
    return [slot for slot in slots() if window.start <= slot.sort_order <= last_start]


def _place_task(
    task: Task,
    candidate_days: List[date],
    window: TimeWindow,
    day_events: Dict[date, List[CalendarEvent]],
    result: SchedulingResult,
) -> Optional[CalendarEvent]:
    """Find the first free slot range for ``task`` and build its event."""
    needed = slots_needed(task.duration_min)
    starts = candidate_starts(window, needed)
    if not starts:
        result.too_long_task_ids.add(task.id)
        return None

    for day in candidate_days:
        blocked = blocked_slots(day_events.get(day, []), task.can_overlap)
        for slot in starts:
            if is_range_free(blocked, slot.index, needed):
                return create_event_for_task(task, day, slot.sort_order)
    return None


def _coerce_task(entry: Any) -> Task:
    """Validate a backlog entry, raising on malformed tasks."""
    task = entry if isinstance(entry, Task) else Task.model_validate(entry)
    # Task instances can bypass validation (model_construct, attribute assignment).
    if not isinstance(task.title, str) or not task.title.strip():
        raise InvalidTaskError(f"task {task.id} has an empty title")
    if not isinstance(task.duration_min, int) or task.duration_min <= 0:
        raise InvalidTaskError(f"task {task.id} has a non-positive duration")
    priority = getattr(task.priority, "value", task.priority)
    if not isinstance(priority, str) or priority not in PRIORITY_RANK:
        raise InvalidTaskError(f"task {task.id} has an unknown priority {task.priority!r}")
    return task


def _entry_id(entry: Any) -> Optional[str]:
    if isinstance(entry, Mapping):
        return entry.get("id")
    return getattr(entry, "id", None)


def _copy_events_by_date(
    occupied_events_by_date: Optional[Mapping[Any, List[CalendarEvent]]],
) -> Dict[date, List[CalendarEvent]]:
    """Shallow copy so placements made during the pass never leak into the caller's lists."""
    copied: Dict[date, List[CalendarEvent]] = {}
    for key, events in (occupied_events_by_date or {}).items():
        day = date.fromisoformat(key) if isinstance(key, str) else key
        copied.setdefault(day, []).extend(events)
    return copied
