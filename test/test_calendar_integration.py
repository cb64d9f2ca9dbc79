import httplib2
import pytest
from googleapiclient.errors import HttpError

from integration.calendar_integration import CalendarIntegration
from pomotask.models import Task


@pytest.fixture
def integration(calendar_service):
    return CalendarIntegration(service=calendar_service, timezone_name="America/Sao_Paulo")


def test_task_to_event(integration):
    task = Task(title="Estudar", description="Estudar 2 pomodoros", estimated_time=50,
                due_date="2025-06-16T12:00:00.000Z")
    event = integration.task_to_event(task)
    assert event["summary"] == "Estudar"
    assert event["start"] == {"dateTime": "2025-06-16T09:00:00-03:00", "timeZone": "America/Sao_Paulo"}
    assert event["end"]["dateTime"] == "2025-06-16T09:50:00-03:00"
    assert "recurrence" not in event


def test_recurring_task_gets_rrule(integration):
    task = Task(title="Standup", due_date="2025-06-16T12:00:00.000Z",
                is_recurring=True, recurrence_pattern="weekdays")
    event = integration.task_to_event(task)
    assert event["recurrence"] == ["RRULE:FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR"]
    # default duration when there is no estimate
    assert event["end"]["dateTime"] == "2025-06-16T09:30:00-03:00"


def test_task_without_due_date_is_not_an_event(integration):
    with pytest.raises(ValueError):
        integration.task_to_event(Task(title="Sem data"))


def test_sync_creates_and_updates(integration):
    tasks = [
        Task(title="Novo", due_date="2025-06-16T12:00:00.000Z"),
        Task(title="Existente", due_date="2025-06-17T12:00:00.000Z", calendar_event_id="evt-old"),
        Task(title="Sem data"),
        Task(title="Feito", due_date="2025-06-16T12:00:00.000Z", completed=True),
    ]
    synced = integration.sync(tasks)

    events = integration.service.events()
    assert len(events.inserted) == 1
    assert events.updated[0][0] == "evt-old"
    assert [t.calendar_event_id for t in synced] == ["evt-1", "evt-old", None, None]


def test_sync_keeps_going_after_api_error(integration):
    integration.service.events().error = HttpError(httplib2.Response({"status": 500}), b"{}")
    task = Task(title="Novo", due_date="2025-06-16T12:00:00.000Z")
    synced = integration.sync([task])
    assert synced == [task]


def test_list_and_delete(integration):
    items = integration.list_upcoming(max_results=5)
    assert items[0]["summary"] == "Reunião"
    events = integration.service.events()
    assert events.list_kwargs["maxResults"] == 5
    assert events.list_kwargs["calendarId"] == "primary"

    integration.delete_event("evt-1")
    assert events.deleted == ["evt-1"]
