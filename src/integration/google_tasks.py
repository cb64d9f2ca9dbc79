import logging
from typing import Any, Dict, Optional

from googleapiclient.discovery import build

from pomotask.models import Task

logger = logging.getLogger(__name__)

DEFAULT_TASK_LIST = "@default"


class GoogleTasksIntegration:
    """Wrapper over the Google Tasks v1 API (task lists and their tasks)."""

    def __init__(self, credentials=None, service=None):
        self.credentials = credentials
        self._service = service

    @property
    def service(self):
        if self._service is None:
            self._service = build(
                "tasks",
                "v1",
                credentials=self.credentials,
                cache_discovery=False,
            )
        return self._service

    def list_task_lists(self, max_results: int = 100) -> list:
        res = self.service.tasklists().list(maxResults=max_results).execute()
        return res.get("items", [])

    def list_tasks(self, task_list_id: str = DEFAULT_TASK_LIST, show_completed: bool = True) -> list:
        res = (
            self.service.tasks()
            .list(
                tasklist=task_list_id,
                showCompleted=show_completed,
                showHidden=False,
                maxResults=100,
            )
            .execute()
        )
        return res.get("items", [])

    def create_task(
        self,
        title: str,
        notes: Optional[str] = None,
        due: Optional[str] = None,
        status: str = "needsAction",
        task_list_id: str = DEFAULT_TASK_LIST,
    ) -> dict:
        body = {"title": title, "notes": notes, "due": due, "status": status}
        body = {k: v for k, v in body.items() if v is not None}
        return self.service.tasks().insert(tasklist=task_list_id, body=body).execute()

    def update_task(
        self,
        task_id: str,
        updates: Dict[str, Any],
        task_list_id: str = DEFAULT_TASK_LIST,
    ) -> dict:
        return (
            self.service.tasks()
            .patch(tasklist=task_list_id, task=task_id, body=updates)
            .execute()
        )

    def complete_task(self, task_id: str, task_list_id: str = DEFAULT_TASK_LIST) -> dict:
        return self.update_task(task_id, {"status": "completed"}, task_list_id)

    def delete_task(self, task_id: str, task_list_id: str = DEFAULT_TASK_LIST) -> None:
        self.service.tasks().delete(tasklist=task_list_id, task=task_id).execute()

    def move_task(
        self,
        task_id: str,
        task_list_id: str = DEFAULT_TASK_LIST,
        previous: Optional[str] = None,
        parent: Optional[str] = None,
    ) -> dict:
        kwargs = {"tasklist": task_list_id, "task": task_id}
        if previous:
            kwargs["previous"] = previous
        if parent:
            kwargs["parent"] = parent
        return self.service.tasks().move(**kwargs).execute()

    def push(self, task: Task, task_list_id: str = DEFAULT_TASK_LIST) -> dict:
        """Copy a local task into Google Tasks.

        Google Tasks keeps only the date part of `due`; the time of day is
        dropped on their side.
        """
        created = self.create_task(
            title=task.title,
            notes=task.description or None,
            due=task.due_date,
            status="completed" if task.completed else "needsAction",
            task_list_id=task_list_id,
        )
        logger.info(f"Pushed task {task.id} to Google Tasks list {task_list_id} as {created.get('id')}")
        return created
