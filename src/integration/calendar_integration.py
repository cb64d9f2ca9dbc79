import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from pomotask.clock import DEFAULT_TIMEZONE, get_timezone, parse_iso, to_iso_utc
from pomotask.models import Task

logger = logging.getLogger(__name__)

RRULES = {
    "daily": "RRULE:FREQ=DAILY",
    "weekly": "RRULE:FREQ=WEEKLY",
    "monthly": "RRULE:FREQ=MONTHLY",
    "weekdays": "RRULE:FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR",
}


class CalendarIntegration:
    """Thin wrapper over the Google Calendar v3 events API."""

    def __init__(
        self,
        credentials=None,
        service=None,
        calendar_id: str = "primary",
        timezone_name: str = DEFAULT_TIMEZONE,
        default_duration_min: int = 30,
    ):
        self.credentials = credentials
        self.calendar_id = calendar_id
        self.timezone_name = timezone_name
        self.default_duration_min = default_duration_min
        self._service = service

    @property
    def service(self):
        if self._service is None:
            self._service = build(
                "calendar",
                "v3",
                credentials=self.credentials,
                cache_discovery=False,
            )
        return self._service

    def task_to_event(self, task: Task) -> dict:
        if not task.due_date:
            raise ValueError(f"task {task.id} has no due date")

        zone = get_timezone(self.timezone_name)
        start = parse_iso(task.due_date).astimezone(zone)
        end = start + timedelta(minutes=task.estimated_time or self.default_duration_min)

        event = {
            "summary": task.title,
            "description": task.description or "",
            "start": {"dateTime": start.isoformat(), "timeZone": self.timezone_name},
            "end": {"dateTime": end.isoformat(), "timeZone": self.timezone_name},
        }
        if task.is_recurring and task.recurrence_pattern:
            event["recurrence"] = [RRULES[task.recurrence_pattern]]
        return event

    def list_upcoming(self, max_results: int = 10, now: Optional[datetime] = None) -> list:
        time_min = to_iso_utc(now or datetime.now(timezone.utc))
        res = (
            self.service.events()
            .list(
                calendarId=self.calendar_id,
                timeMin=time_min,
                maxResults=max_results,
                singleEvents=True,
                orderBy="startTime",
            )
            .execute()
        )
        return res.get("items", [])

    def create_event(self, event: dict) -> dict:
        return self.service.events().insert(calendarId=self.calendar_id, body=event).execute()

    def update_event(self, event_id: str, event: dict) -> dict:
        return (
            self.service.events()
            .update(calendarId=self.calendar_id, eventId=event_id, body=event)
            .execute()
        )

    def delete_event(self, event_id: str) -> None:
        self.service.events().delete(calendarId=self.calendar_id, eventId=event_id).execute()

    def sync(self, tasks: List[Task]) -> List[Task]:
        """
        Push open tasks with a due date to the calendar.
        Returns the tasks with calendar_event_id filled in where an event exists.
        """
        synced = []
        for task in tasks:
            if task.completed or not task.due_date:
                synced.append(task)
                continue

            body = self.task_to_event(task)
            try:
                if task.calendar_event_id:
                    event = self.update_event(task.calendar_event_id, body)
                else:
                    event = self.create_event(body)
            except HttpError as e:
                logger.error(f"Calendar sync failed for task {task.id}: {e}")
                synced.append(task)
                continue

            synced.append(task.model_copy(update={"calendar_event_id": event.get("id")}))
        logger.info(f"Synced {len(tasks)} tasks with calendar {self.calendar_id}")
        return synced
