import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from googleapiclient.errors import HttpError
from pydantic import BaseModel

from api.dependencies import get_calendar, get_task_store
from api.metrics import REQUESTS_TOTAL
from integration.calendar_integration import CalendarIntegration
from storage.task_store import TaskStore

router = APIRouter()
logger = logging.getLogger(__name__)


class CalendarEventIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = ""
    startTime: Optional[str] = None
    endTime: Optional[str] = None


@router.get("/calendar/events")
async def upcoming_events(
    maxResults: int = 10,
    calendar: CalendarIntegration = Depends(get_calendar),
) -> dict:
    try:
        events = calendar.list_upcoming(max_results=maxResults)
    except HttpError as e:
        logger.error(f"Error fetching calendar events: {e}")
        REQUESTS_TOTAL.labels(endpoint="/calendar/events", status="error").inc()
        raise HTTPException(status_code=502, detail="Failed to fetch events")
    return {"events": events}


@router.post("/calendar/events", status_code=201)
async def create_event(
    payload: CalendarEventIn,
    calendar: CalendarIntegration = Depends(get_calendar),
) -> dict:
    if not payload.title or not payload.startTime or not payload.endTime:
        raise HTTPException(status_code=400, detail="Missing required fields")

    event = {
        "summary": payload.title,
        "description": payload.description or "",
        "start": {"dateTime": payload.startTime, "timeZone": calendar.timezone_name},
        "end": {"dateTime": payload.endTime, "timeZone": calendar.timezone_name},
    }
    try:
        created = calendar.create_event(event)
    except HttpError as e:
        logger.error(f"Error creating calendar event: {e}")
        REQUESTS_TOTAL.labels(endpoint="/calendar/events", status="error").inc()
        raise HTTPException(status_code=502, detail="Failed to create event")
    REQUESTS_TOTAL.labels(endpoint="/calendar/events", status="created").inc()
    return {"event": created}


@router.post("/calendar/sync")
async def sync_tasks(
    calendar: CalendarIntegration = Depends(get_calendar),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    """Push open, dated tasks to the calendar and remember their event ids."""
    tasks = store.list()
    synced = calendar.sync(tasks)

    linked = 0
    for before, after in zip(tasks, synced):
        if after.calendar_event_id and after.calendar_event_id != before.calendar_event_id:
            store.update(after.id, {"calendar_event_id": after.calendar_event_id})
            linked += 1

    REQUESTS_TOTAL.labels(endpoint="/calendar/sync", status="ok").inc()
    logger.info(f"Calendar sync linked {linked} new events")
    return {
        "synced": sum(1 for t in synced if t.calendar_event_id),
        "linked": linked,
        "tasks": [t.model_dump(by_alias=True) for t in synced],
    }
