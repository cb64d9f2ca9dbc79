import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from api.dependencies import get_preferences, get_task_store
from api.metrics import INVALID_DATES_TOTAL, RECURRING_SPAWNED_TOTAL, REQUESTS_TOTAL
from pomotask.models import Priority, RecurrencePattern, Task, UserPreferences
from scheduling.recurrence import build_next_occurrence
from storage.task_store import TaskStore
from validation.date_validation import DATE_NOT_IN_CALENDAR_MESSAGE, validate_iso_date_string

router = APIRouter()
logger = logging.getLogger(__name__)


class _CamelIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateTaskIn(_CamelIn):
    id: Optional[str] = None
    title: str
    description: Optional[str] = ""
    priority: Priority = "medium"
    estimated_time: Optional[int] = None
    due_date: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None


class UpdateTaskIn(_CamelIn):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    estimated_time: Optional[int] = None
    due_date: Optional[str] = None
    completed: Optional[bool] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[RecurrencePattern] = None


def _check_due_date(due_date: Optional[str], endpoint: str) -> None:
    result = validate_iso_date_string(due_date)
    if not result.valid:
        INVALID_DATES_TOTAL.inc()
        REQUESTS_TOTAL.labels(endpoint=endpoint, status="rejected").inc()
        raise HTTPException(status_code=400, detail=result.error or DATE_NOT_IN_CALENDAR_MESSAGE)


def _dump(task: Task) -> dict:
    return task.model_dump(by_alias=True)


@router.get("/tasks")
async def list_tasks(store: TaskStore = Depends(get_task_store)) -> dict:
    tasks = store.list()
    return {"tasks": [_dump(t) for t in tasks], "total": len(tasks)}


@router.post("/tasks", status_code=201)
async def create_task(payload: CreateTaskIn, store: TaskStore = Depends(get_task_store)) -> dict:
    _check_due_date(payload.due_date, "/tasks")

    fields = payload.model_dump(exclude_none=True)
    fields["description"] = fields.get("description") or ""
    try:
        task = Task(**fields)
    except ValidationError as e:
        REQUESTS_TOTAL.labels(endpoint="/tasks", status="rejected").inc()
        raise HTTPException(status_code=400, detail=str(e))

    store.add(task)
    REQUESTS_TOTAL.labels(endpoint="/tasks", status="created").inc()
    logger.info(f"Created task {task.id}: {task.title[:50]}")
    return {"task": _dump(task)}


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    payload: UpdateTaskIn,
    store: TaskStore = Depends(get_task_store),
) -> dict:
    changes = payload.model_dump(exclude_unset=True)
    if "due_date" in changes:
        _check_due_date(changes["due_date"], "/tasks/{id}")

    try:
        task = store.update(task_id, changes)
    except ValidationError as e:
        REQUESTS_TOTAL.labels(endpoint="/tasks/{id}", status="rejected").inc()
        raise HTTPException(status_code=400, detail=str(e))

    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    REQUESTS_TOTAL.labels(endpoint="/tasks/{id}", status="updated").inc()
    return {"task": _dump(task)}


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> dict:
    if not store.delete(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"success": True}


@router.post("/tasks/{task_id}/complete")
async def complete_task(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
    prefs: UserPreferences = Depends(get_preferences),
) -> dict:
    """Mark a task done; a recurring task gets its next occurrence created."""
    task = store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    if task.completed:
        return {"task": _dump(task), "nextTask": None}

    task = store.update(task_id, {"completed": True})

    try:
        next_task = build_next_occurrence(task, tz=prefs.timezone)
    except ValueError as e:
        logger.warning(f"No next occurrence for recurring task {task.id}: {e}")
        next_task = None
    if next_task is not None:
        store.add(next_task)
        RECURRING_SPAWNED_TOTAL.inc()
        logger.info(f"Spawned {next_task.id} from recurring task {task.id} (due {next_task.due_date})")

    return {
        "task": _dump(task),
        "nextTask": _dump(next_task) if next_task is not None else None,
    }
