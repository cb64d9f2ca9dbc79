import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from api import state
from api.dependencies import get_preferences, get_task_extractor
from api.metrics import PARSED_FIELDS_TOTAL, REQUEST_LATENCY_SECONDS, REQUESTS_TOTAL
from extraction.task_extractor import TaskExtractor, TaskParseError
from pomotask.models import UserPreferences
from scheduling.recurrence import calculate_next_due_date

router = APIRouter()
logger = logging.getLogger(__name__)


class ParseTaskIn(BaseModel):
    # Left untyped so a missing or non-string value reaches the parser's own check.
    taskText: Any = None


def _count_fields(parsed: dict) -> None:
    for field in ("dueDate", "estimatedTime", "recurrencePattern"):
        if parsed.get(field) is not None:
            PARSED_FIELDS_TOTAL.labels(field=field).inc()
    if parsed.get("priority") != "medium":
        PARSED_FIELDS_TOTAL.labels(field="priority").inc()


@router.post("/parse-task")
async def parse_task(
    payload: ParseTaskIn,
    extractor: TaskExtractor = Depends(get_task_extractor),
) -> dict:
    start = time.time()
    try:
        parsed = extractor.extract(payload.taskText)
    except TaskParseError as e:
        REQUESTS_TOTAL.labels(endpoint="/parse-task", status="rejected").inc()
        raise HTTPException(status_code=400, detail=str(e))

    body = parsed.model_dump(by_alias=True)
    _count_fields(body)
    state.recent_parses.appendleft(
        {**body, "parsedAt": datetime.now(timezone.utc).isoformat()}
    )

    REQUESTS_TOTAL.labels(endpoint="/parse-task", status="ok").inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint="/parse-task").observe(time.time() - start)
    logger.info(f"Parsed task text: {payload.taskText[:50]}...")
    return body


@router.get("/parse-task/recent")
async def recent_parses(limit: int = 20) -> dict:
    """Most recent parse results, newest first."""
    return {
        "parses": list(state.recent_parses)[:limit],
        "total": len(state.recent_parses),
    }


@router.get("/recurrence/next")
async def next_due_date(
    pattern: str,
    due_date: Optional[str] = Query(None, alias="dueDate"),
    prefs: UserPreferences = Depends(get_preferences),
) -> dict:
    try:
        next_due = calculate_next_due_date(due_date, pattern, tz=prefs.timezone)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid due date: {due_date}")
    if next_due is None:
        raise HTTPException(status_code=400, detail=f"Unknown recurrence pattern: {pattern}")
    return {"nextDueDate": next_due}
