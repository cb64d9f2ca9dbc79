import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from googleapiclient.errors import HttpError
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.dependencies import get_google_tasks, get_task_store
from api.metrics import INVALID_DATES_TOTAL, REQUESTS_TOTAL
from integration.google_tasks import DEFAULT_TASK_LIST, GoogleTasksIntegration
from storage.task_store import TaskStore
from validation.date_validation import validate_iso_date_string

router = APIRouter()
logger = logging.getLogger(__name__)


class _CamelIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoogleTaskIn(_CamelIn):
    title: Optional[str] = None
    notes: Optional[str] = None
    due: Optional[str] = None
    task_list_id: str = DEFAULT_TASK_LIST


class GoogleTaskUpdateIn(_CamelIn):
    task_id: Optional[str] = None
    task_list_id: str = DEFAULT_TASK_LIST
    title: Optional[str] = None
    notes: Optional[str] = None
    due: Optional[str] = None
    status: Optional[Literal["needsAction", "completed"]] = None


def _check_due(due: Optional[str]) -> None:
    result = validate_iso_date_string(due)
    if not result.valid:
        INVALID_DATES_TOTAL.inc()
        raise HTTPException(status_code=400, detail=result.error)


@router.get("/google-tasks")
async def list_google_tasks(
    taskListId: str = DEFAULT_TASK_LIST,
    showCompleted: bool = True,
    listOnly: bool = False,
    google: GoogleTasksIntegration = Depends(get_google_tasks),
) -> dict:
    try:
        if listOnly:
            return {"taskLists": google.list_task_lists()}
        return {"tasks": google.list_tasks(taskListId, show_completed=showCompleted)}
    except HttpError as e:
        logger.error(f"Error fetching Google Tasks: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch tasks")


@router.post("/google-tasks", status_code=201)
async def create_google_task(
    payload: GoogleTaskIn,
    google: GoogleTasksIntegration = Depends(get_google_tasks),
) -> dict:
    if not payload.title:
        raise HTTPException(status_code=400, detail="Title is required")
    _check_due(payload.due)

    try:
        task = google.create_task(payload.title, notes=payload.notes, due=payload.due,
                                  task_list_id=payload.task_list_id)
    except HttpError as e:
        logger.error(f"Error creating Google Task: {e}")
        raise HTTPException(status_code=502, detail="Failed to create task")
    REQUESTS_TOTAL.labels(endpoint="/google-tasks", status="created").inc()
    return {"task": task}


@router.post("/google-tasks/push/{task_id}", status_code=201)
async def push_local_task(
    task_id: str,
    taskListId: str = DEFAULT_TASK_LIST,
    google: GoogleTasksIntegration = Depends(get_google_tasks),
    store: TaskStore = Depends(get_task_store),
) -> dict:
    """Copy one stored task into a Google Tasks list."""
    task = store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        created = google.push(task, task_list_id=taskListId)
    except HttpError as e:
        logger.error(f"Error pushing task {task_id} to Google Tasks: {e}")
        raise HTTPException(status_code=502, detail="Failed to create task")
    return {"task": created}


@router.put("/google-tasks")
async def update_google_task(
    payload: GoogleTaskUpdateIn,
    google: GoogleTasksIntegration = Depends(get_google_tasks),
) -> dict:
    if not payload.task_id:
        raise HTTPException(status_code=400, detail="Task ID is required")
    updates = payload.model_dump(exclude_unset=True, exclude={"task_id", "task_list_id"})
    if "due" in updates:
        _check_due(updates["due"])

    try:
        task = google.update_task(payload.task_id, updates, payload.task_list_id)
    except HttpError as e:
        logger.error(f"Error updating Google Task: {e}")
        raise HTTPException(status_code=502, detail="Failed to update task")
    return {"task": task}


@router.delete("/google-tasks")
async def delete_google_task(
    taskId: Optional[str] = None,
    taskListId: str = DEFAULT_TASK_LIST,
    google: GoogleTasksIntegration = Depends(get_google_tasks),
) -> dict:
    if not taskId:
        raise HTTPException(status_code=400, detail="Task ID is required")
    try:
        google.delete_task(taskId, taskListId)
    except HttpError as e:
        logger.error(f"Error deleting Google Task: {e}")
        raise HTTPException(status_code=502, detail="Failed to delete task")
    return {"success": True}
