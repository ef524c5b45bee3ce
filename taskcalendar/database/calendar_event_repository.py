"""Repository for CalendarEvent database operations."""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from taskcalendar.models.calendar_event import CalendarEvent
from taskcalendar.database.models import CalendarEventDB
from taskcalendar.database.repository import TaskRepository

logger = logging.getLogger(__name__)


class CalendarEventRepository:
    """Repository for CalendarEvent database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, user_id: str):
        return self.db.query(CalendarEventDB).filter(CalendarEventDB.user_id == user_id)

    def create(self, event: CalendarEvent) -> CalendarEvent:
        """Create a new calendar event."""
        try:
            event_db = CalendarEventDB.from_pydantic(event)
            self.db.add(event_db)
            self.db.commit()
            self.db.refresh(event_db)
            logger.debug(f"Created calendar event {event.id}")
            return event_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create calendar event {event.id}: {type(e).__name__}: {str(e)}")
            raise

    def get_by_id(self, user_id: str, event_id: str) -> Optional[CalendarEvent]:
        """Get a calendar event by ID (user-scoped)."""
        row = self._query(user_id).filter(CalendarEventDB.id == event_id).first()
        return row.to_pydantic() if row else None

    def get_all(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[CalendarEvent]:
        """Get events for a user ordered by date and start time, optionally within a date range."""
        query = self._query(user_id)
        if start_date is not None:
            query = query.filter(CalendarEventDB.event_date >= start_date)
        if end_date is not None:
            query = query.filter(CalendarEventDB.event_date <= end_date)
        rows = query.order_by(CalendarEventDB.event_date, CalendarEventDB.start_minute).all()
        return [row.to_pydantic() for row in rows]

    def get_by_date(self, user_id: str, start_date: date, end_date: date) -> Dict[date, List[CalendarEvent]]:
        """Events in ``[start_date, end_date]`` grouped by date (the occupied-interval snapshot)."""
        by_date: Dict[date, List[CalendarEvent]] = defaultdict(list)
        for event in self.get_all(user_id, start_date, end_date):
            by_date[event.event_date].append(event)
        return dict(by_date)

    def update(self, event: CalendarEvent) -> Optional[CalendarEvent]:
        """Replace the editable fields of an event (user-scoped)."""
        try:
            row = self._query(event.user_id).filter(CalendarEventDB.id == event.id).first()
            if row is None:
                return None
            fresh = CalendarEventDB.from_pydantic(event)
            for column in (
                "title", "event_date", "start_minute", "end_minute", "color", "can_overlap",
                "priority", "description", "location", "attendees", "repeat",
            ):
                setattr(row, column, getattr(fresh, column))
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Updated calendar event {event.id}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update calendar event {event.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, user_id: str, event_id: str) -> Optional[CalendarEvent]:
        """Delete an event; a task-linked event returns its task to the backlog.

        Both changes are committed together.

        Returns:
            The deleted event, or None if it did not exist
        """
        try:
            row = self._query(user_id).filter(CalendarEventDB.id == event_id).first()
            if row is None:
                return None
            deleted = row.to_pydantic()
            self.db.delete(row)
            if deleted.task_id:
                TaskRepository(self.db).stage_scheduled(user_id, [deleted.task_id], False)
            self.db.commit()
            logger.debug(f"Deleted calendar event {event_id} (task {deleted.task_id})")
            return deleted
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete calendar event {event_id}: {type(e).__name__}: {str(e)}")
            raise

    def commit_placements(self, user_id: str, events: List[CalendarEvent]) -> List[CalendarEvent]:
        """Store task placements and mark their tasks scheduled in one transaction.

        Either every placement of a scheduling pass is committed or none is.
        """
        if not events:
            return []
        try:
            rows = [CalendarEventDB.from_pydantic(event) for event in events]
            self.db.add_all(rows)
            task_ids = [event.task_id for event in events if event.task_id]
            TaskRepository(self.db).stage_scheduled(user_id, task_ids, True)
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
            logger.debug(f"Committed {len(rows)} task placement(s)")
            return [row.to_pydantic() for row in rows]
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to commit task placements: {type(e).__name__}: {str(e)}")
            raise
