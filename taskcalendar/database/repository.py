"""Repository layer for database operations."""

import logging
from datetime import datetime
from typing import List, Optional, Set
from sqlalchemy.orm import Session
from sqlalchemy import desc

from taskcalendar.models.task import Task
from taskcalendar.database.models import TaskDB, CalendarEventDB, enum_to_value

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _as_unique_ids(self, task_ids: List[str]) -> List[str]:
        """Deduplicate while preserving order."""
        seen: Set[str] = set()
        unique: List[str] = []
        for task_id in task_ids:
            if task_id not in seen:
                seen.add(task_id)
                unique.append(task_id)
        return unique

    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, task_id: str) -> Optional[Task]:
        """Get task by ID for a specific user."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.user_id == user_id,
        ).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self, user_id: str) -> List[Task]:
        """Get all tasks for a user sorted by creation date (newest first)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
        ).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_backlog(self, user_id: str) -> List[Task]:
        """Get unscheduled tasks in backlog order (oldest first)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.scheduled.is_(False),
        ).order_by(TaskDB.created_at, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, task: Task) -> Task:
        """Update an existing task (user_id must match task.user_id)."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task.id,
            TaskDB.user_id == task.user_id,
        ).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")

        task_db.title = task.title
        task_db.duration_min = task.duration_min
        task_db.priority = enum_to_value(task.priority)
        task_db.can_overlap = task.can_overlap
        task_db.color = task.color
        task_db.description = task.description
        task_db.location = task.location
        task_db.category = task.category
        task_db.estimated_effort = enum_to_value(task.estimated_effort)
        task_db.deadline = task.deadline
        task_db.reminder_minutes = task.reminder_minutes
        task_db.notes = task.notes
        task_db.scheduled = task.scheduled
        task_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, user_id: str, task_id: str) -> bool:
        """Delete a task and the calendar events placed for it.

        Returns:
            True if the task existed
        """
        try:
            task_db = self.db.query(TaskDB).filter(
                TaskDB.id == task_id,
                TaskDB.user_id == user_id,
            ).first()
            if task_db is None:
                return False
            removed_events = self.db.query(CalendarEventDB).filter(
                CalendarEventDB.user_id == user_id,
                CalendarEventDB.task_id == task_id,
            ).delete(synchronize_session=False)
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id} and {removed_events} linked event(s)")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise

    def stage_scheduled(self, user_id: str, task_ids: List[str], scheduled: bool) -> int:
        """Set the scheduled flag for the given tasks without committing.

        The caller commits, so the flag changes land in the same transaction as
        the calendar event writes that caused them.

        Returns:
            Number of tasks updated
        """
        unique_ids = self._as_unique_ids(task_ids)
        if not unique_ids:
            return 0
        updated = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.id.in_(unique_ids),
        ).update(
            {TaskDB.scheduled: scheduled, TaskDB.updated_at: datetime.utcnow()},
            synchronize_session=False,
        )
        logger.debug(f"Staged scheduled={scheduled} on {updated} task(s)")
        return int(updated)
