"""FastAPI web application for taskcalendar."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session

from taskcalendar.database.database import get_db, init_db
from taskcalendar.database.repository import TaskRepository
from taskcalendar.database.calendar_event_repository import CalendarEventRepository
from taskcalendar.engine.availability import find_conflicts
from taskcalendar.engine.calendar_views import ViewType, view_dates
from taskcalendar.engine.scheduler import schedule_tasks
from taskcalendar.models.calendar_event import CalendarEvent, RepeatSettings, coerce_minute
from taskcalendar.models.constants import DEFAULT_EVENT_TITLE, PLACEHOLDER_USER_ID
from taskcalendar.models.schedule_request import AutoScheduleRequest, PRESET_LABELS, SchedulePreset, all_presets
from taskcalendar.models.task import Task, Priority, EstimatedEffort
from taskcalendar.models.task_factory import create_task_base, create_event_for_task, create_manual_event
from taskcalendar.models.timegrid import slots

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="taskcalendar API",
    description="Calendar and task planner with automatic placement of backlog tasks",
    version=VERSION,
    lifespan=lifespan,
)


def get_current_user_id() -> str:
    """Single placeholder user (no authentication)."""
    return PLACEHOLDER_USER_ID


def _validation_detail(e: ValidationError):
    return e.errors(include_url=False, include_context=False)


# Request models
class TaskCreateRequest(BaseModel):
    """Request body for task creation."""
    title: str
    duration_min: Optional[int] = None
    priority: Optional[Priority] = None
    can_overlap: Optional[bool] = None
    color: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    estimated_effort: Optional[EstimatedEffort] = None
    deadline: Optional[date] = None
    reminder_minutes: Optional[int] = None
    notes: Optional[str] = None


class TaskUpdateRequest(BaseModel):
    """Partial task update. The scheduled flag is owned by placements and cannot be set here."""
    title: Optional[str] = None
    duration_min: Optional[int] = None
    priority: Optional[Priority] = None
    can_overlap: Optional[bool] = None
    color: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    estimated_effort: Optional[EstimatedEffort] = None
    deadline: Optional[date] = None
    reminder_minutes: Optional[int] = None
    notes: Optional[str] = None


class PlaceTaskRequest(BaseModel):
    """Manual placement of a backlog task (drag-and-drop onto a slot)."""
    event_date: date
    start_time: Union[int, str] = Field(..., description="'9:00 AM', '09:00' or minutes since midnight")


class EventCreateRequest(BaseModel):
    """Request body for a manual calendar event."""
    title: str = DEFAULT_EVENT_TITLE
    event_date: date
    start_time: Union[int, str]
    end_time: Optional[Union[int, str]] = Field(None, description="Defaults to one hour after start")
    color: Optional[str] = None
    can_overlap: bool = False
    description: Optional[str] = None
    location: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)
    repeat: Optional[RepeatSettings] = None


class EventUpdateRequest(BaseModel):
    """Partial event update (edit or move)."""
    title: Optional[str] = None
    event_date: Optional[date] = None
    start_time: Optional[Union[int, str]] = None
    end_time: Optional[Union[int, str]] = None
    color: Optional[str] = None
    can_overlap: Optional[bool] = None
    description: Optional[str] = None
    location: Optional[str] = None
    attendees: Optional[List[str]] = None
    repeat: Optional[RepeatSettings] = None


# Response models
class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int


class EventResponse(BaseModel):
    event: CalendarEvent


class EventListResponse(BaseModel):
    events: List[CalendarEvent]
    count: int


class TimeSlotResponse(BaseModel):
    sort_order: int
    display: str
    value: str
    hour24: int


class CalendarViewResponse(BaseModel):
    view: ViewType
    dates: List[date]
    events_by_date: Dict[str, List[CalendarEvent]]


class PresetResponse(BaseModel):
    label: str
    request: AutoScheduleRequest


class AutoScheduleResponse(BaseModel):
    """Response for an auto-schedule run."""
    placed_events: List[CalendarEvent]
    scheduled_task_ids: List[str]
    unscheduled_task_ids: List[str]
    too_long_task_ids: List[str] = Field(default_factory=list, description="Tasks longer than the daily window")
    failed_task_ids: List[str] = Field(default_factory=list)
    scheduled_count: int
    attempted_count: int
    message: str


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/time-slots", response_model=List[TimeSlotResponse])
async def list_time_slots():
    """The 48 half-hour slots of a day."""
    return [
        TimeSlotResponse(sort_order=s.sort_order, display=s.display, value=s.value, hour24=s.hour24)
        for s in slots()
    ]


# Tasks
@app.get("/tasks", response_model=TaskListResponse)
async def list_tasks(
    scheduled: Optional[bool] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """List tasks (newest first), optionally filtered by scheduled state."""
    tasks = TaskRepository(db).get_all(user_id)
    if scheduled is not None:
        tasks = [t for t in tasks if t.scheduled == scheduled]
    return TaskListResponse(tasks=tasks, count=len(tasks))


@app.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    body: TaskCreateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Create a backlog task."""
    try:
        task = create_task_base(user_id=user_id, **body.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e))

    try:
        created = TaskRepository(db).create(task)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create task: {str(e)}")
    return TaskResponse(task=created)


def _get_task_or_404(repo: TaskRepository, user_id: str, task_id: str) -> Task:
    task = repo.get(user_id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@app.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return TaskResponse(task=_get_task_or_404(TaskRepository(db), user_id, task_id))


@app.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Update task fields. Omitted fields keep their values."""
    repo = TaskRepository(db)
    task = _get_task_or_404(repo, user_id, task_id)
    updates = body.model_dump(exclude_unset=True)
    try:
        updated = Task.model_validate({**task.model_dump(), **updates})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e))

    try:
        return TaskResponse(task=repo.update(updated))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update task: {str(e)}")


@app.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Delete a task together with any events placed for it."""
    try:
        deleted = TaskRepository(db).delete(user_id, task_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete task: {str(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return {"success": True}


@app.post("/tasks/{task_id}/place", response_model=EventResponse, status_code=201)
async def place_task(
    task_id: str,
    body: PlaceTaskRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Place a backlog task at a chosen date and slot."""
    task = _get_task_or_404(TaskRepository(db), user_id, task_id)
    if task.scheduled:
        raise HTTPException(status_code=409, detail=f"Task {task_id} is already scheduled")

    try:
        event = create_event_for_task(task, body.event_date, coerce_minute(body.start_time))
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid placement: {str(e)}")

    events_repo = CalendarEventRepository(db)
    day_events = events_repo.get_all(user_id, body.event_date, body.event_date)
    conflicts = find_conflicts(day_events, event.start_minute, event.end_minute, event.can_overlap)
    if conflicts:
        raise HTTPException(
            status_code=409,
            detail=f"Slot conflicts with: {', '.join(c.title for c in conflicts)}",
        )

    try:
        placed = events_repo.commit_placements(user_id, [event])
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to place task: {str(e)}")
    return EventResponse(event=placed[0])


# Events
@app.get("/events", response_model=EventListResponse)
async def list_events(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """List events ordered by date and start time."""
    events = CalendarEventRepository(db).get_all(user_id, start_date, end_date)
    return EventListResponse(events=events, count=len(events))


@app.post("/events", response_model=EventResponse, status_code=201)
async def create_event(
    body: EventCreateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Create a manual (non-task) event."""
    fields = body.model_dump(exclude={"title", "event_date", "start_time", "end_time"}, exclude_none=True)
    try:
        event = create_manual_event(
            body.event_date,
            coerce_minute(body.start_time),
            coerce_minute(body.end_time) if body.end_time is not None else None,
            title=body.title,
            user_id=user_id,
            **fields,
        )
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid event: {str(e)}")

    try:
        created = CalendarEventRepository(db).create(event)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create event: {str(e)}")
    return EventResponse(event=created)


@app.put("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    body: EventUpdateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Edit or move an event. Moving keeps the event's length unless an end time is given."""
    repo = CalendarEventRepository(db)
    event = repo.get_by_id(user_id, event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event {event_id} not found")

    updates = body.model_dump(exclude_unset=True, exclude={"start_time", "end_time"})
    try:
        if body.start_time is not None:
            start = coerce_minute(body.start_time)
            updates["start_minute"] = start
            updates["end_minute"] = start + event.duration_min
        if body.end_time is not None:
            updates["end_minute"] = coerce_minute(body.end_time)
        data = event.model_dump(exclude={"start_display", "end_display"})
        updated = CalendarEvent.model_validate({**data, **updates})
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid event: {str(e)}")

    try:
        return EventResponse(event=repo.update(updated))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update event: {str(e)}")


@app.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Delete an event. A task-linked event returns its task to the backlog."""
    try:
        deleted = CalendarEventRepository(db).delete(user_id, event_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete event: {str(e)}")
    if deleted is None:
        raise HTTPException(status_code=404, detail=f"Event {event_id} not found")
    if deleted.task_id:
        logger.info(f"Task {deleted.task_id} returned to backlog")
    return {"success": True, "unscheduled_task_id": deleted.task_id}


@app.get("/calendar", response_model=CalendarViewResponse)
async def calendar_view(
    view: ViewType = ViewType.WEEK,
    day: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Dates of a day/week/month view with their events."""
    dates = view_dates(view, day)
    by_date = CalendarEventRepository(db).get_by_date(user_id, dates[0], dates[-1])
    return CalendarViewResponse(
        view=view,
        dates=dates,
        events_by_date={d.isoformat(): by_date.get(d, []) for d in dates},
    )


# Auto-scheduling
@app.get("/schedule/presets", response_model=Dict[str, PresetResponse])
async def schedule_presets(today: Optional[date] = None):
    """Quick auto-schedule presets relative to ``today``."""
    presets = all_presets(today or date.today())
    return {
        name: PresetResponse(label=PRESET_LABELS[SchedulePreset(name)], request=request)
        for name, request in presets.items()
    }


@app.post("/schedule/auto", response_model=AutoScheduleResponse)
async def auto_schedule(
    request: AutoScheduleRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Place every unscheduled task into free slots of the requested range.

    All placements of a run are committed together.
    """
    tasks_repo = TaskRepository(db)
    events_repo = CalendarEventRepository(db)

    backlog = tasks_repo.get_backlog(user_id)
    occupied = events_repo.get_by_date(user_id, request.start_date, request.end_date)
    result = schedule_tasks(backlog, occupied, request)

    try:
        placed = events_repo.commit_placements(user_id, result.placed_events)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save schedule: {str(e)}")

    if result.scheduled_count > 0:
        message = f"Successfully scheduled {result.scheduled_count} task(s)!"
    else:
        message = "No available slots found for tasks in the specified range."

    return AutoScheduleResponse(
        placed_events=placed,
        scheduled_task_ids=sorted(result.scheduled_task_ids),
        unscheduled_task_ids=sorted(result.unscheduled_task_ids),
        too_long_task_ids=sorted(result.too_long_task_ids),
        failed_task_ids=sorted(result.failed_task_ids),
        scheduled_count=result.scheduled_count,
        attempted_count=result.attempted_count,
        message=message,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
