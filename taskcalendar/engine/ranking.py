"""Stack ranking logic for taskcalendar.

Sorts tasks by priority, most urgent first. This produces a deterministic
ordering for scheduling.
"""

from typing import List
from taskcalendar.models.task import Task, PRIORITY_RANK


def stack_rank(tasks: List[Task]) -> List[Task]:
    """Stack-rank tasks by priority (urgent > high > medium > low).

    The sort is stable: tasks of equal priority keep their backlog order.
    Higher-priority tasks therefore get first claim on preferred slots.

    Args:
        tasks: List of tasks to rank

    Returns:
        New list of tasks sorted by priority (highest first)
    """
    return sorted(tasks, key=_priority_sort_key)


def _priority_sort_key(task: Task) -> int:
    """Get sort key for priority (lower = scheduled earlier)."""
    return -priority_rank(task.priority)


def priority_rank(priority) -> int:
    """Numeric rank of a priority (enum or its string value)."""
    value = getattr(priority, "value", priority)
    return PRIORITY_RANK[value]
