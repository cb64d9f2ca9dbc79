from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


@pytest.fixture
def tz():
    return SAO_PAULO


@pytest.fixture
def friday_morning():
    # Friday 13 June 2025, 10:00 in Sao Paulo (UTC-3, no DST)
    return datetime(2025, 6, 13, 10, 0, tzinfo=SAO_PAULO)


@pytest.fixture
def api_client(tmp_path):
    from fastapi.testclient import TestClient

    from api.dependencies import get_preferences, get_task_store
    from api.main import app
    from pomotask.models import UserPreferences
    from storage.task_store import TaskStore

    store = TaskStore(path=str(tmp_path / "tasks.json"))
    app.dependency_overrides[get_task_store] = lambda: store
    app.dependency_overrides[get_preferences] = lambda: UserPreferences()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class _Call:
    def __init__(self, result):
        self._result = result

    def execute(self):
        return self._result


class _Failing:
    def __init__(self, error):
        self._error = error

    def execute(self):
        raise self._error


class FakeEvents:
    def __init__(self):
        self.inserted = []
        self.updated = []
        self.deleted = []
        self.list_kwargs = None
        self.error = None

    def insert(self, calendarId, body):
        if self.error is not None:
            return _Failing(self.error)
        self.inserted.append((calendarId, body))
        return _Call({"id": f"evt-{len(self.inserted)}", **body})

    def update(self, calendarId, eventId, body):
        self.updated.append((eventId, body))
        return _Call({"id": eventId, **body})

    def delete(self, calendarId, eventId):
        self.deleted.append(eventId)
        return _Call("")

    def list(self, **kwargs):
        if self.error is not None:
            return _Failing(self.error)
        self.list_kwargs = kwargs
        return _Call({"items": [{"id": "evt-1", "summary": "Reunião"}]})


class FakeCalendarService:
    def __init__(self):
        self._events = FakeEvents()

    def events(self):
        return self._events


class FakeTaskLists:
    def __init__(self):
        self.list_kwargs = None

    def list(self, **kwargs):
        self.list_kwargs = kwargs
        return _Call({"items": [{"id": "@default", "title": "Minhas tarefas"}]})


class FakeGoogleTasks:
    def __init__(self):
        self.inserted = []
        self.patched = []
        self.deleted = []
        self.moved = []
        self.list_kwargs = None

    def list(self, **kwargs):
        self.list_kwargs = kwargs
        return _Call({"items": [{"id": "gt-1", "title": "Comprar pão"}]})

    def insert(self, tasklist, body):
        self.inserted.append((tasklist, body))
        return _Call({"id": f"gt-{len(self.inserted)}", **body})

    def patch(self, tasklist, task, body):
        self.patched.append((tasklist, task, body))
        return _Call({"id": task, **body})

    def delete(self, tasklist, task):
        self.deleted.append((tasklist, task))
        return _Call("")

    def move(self, **kwargs):
        self.moved.append(kwargs)
        return _Call({"id": kwargs["task"]})


class FakeTasksService:
    def __init__(self):
        self._tasklists = FakeTaskLists()
        self._tasks = FakeGoogleTasks()

    def tasklists(self):
        return self._tasklists

    def tasks(self):
        return self._tasks


@pytest.fixture
def calendar_service():
    return FakeCalendarService()


@pytest.fixture
def tasks_service():
    return FakeTasksService()


@pytest.fixture
def google_connected(monkeypatch, calendar_service, tasks_service):
    """Pretend an OAuth token exists and route the API clients to the fakes."""
    import integration.calendar_integration as calendar_module
    import integration.google_tasks as google_tasks_module
    from api.dependencies import get_google_credentials
    from api.main import app

    built = []

    def fake_build(name, version, **kwargs):
        built.append((name, version, kwargs["credentials"]))
        return calendar_service if name == "calendar" else tasks_service

    monkeypatch.setattr(calendar_module, "build", fake_build)
    monkeypatch.setattr(google_tasks_module, "build", fake_build)
    app.dependency_overrides[get_google_credentials] = lambda: "token"
    yield built
    app.dependency_overrides.pop(get_google_credentials, None)
