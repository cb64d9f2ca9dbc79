from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, tzinfo
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from pomotask.clock import get_timezone, now_local, parse_iso, to_iso_utc
from pomotask.models import Task

logger = logging.getLogger(__name__)

DEFAULT_DUE_TIME = time(9, 0)

RECURRENCE_LABELS = {
    "daily": "Diário",
    "weekly": "Semanal",
    "monthly": "Mensal",
    "weekdays": "Dias úteis",
}

_SATURDAY = 5


def _tomorrow_morning(zone: tzinfo, now: Optional[datetime]) -> datetime:
    tomorrow = now_local(zone, now).date() + timedelta(days=1)
    return datetime.combine(tomorrow, DEFAULT_DUE_TIME, tzinfo=zone)


def calculate_next_due_date(
    current_due_date: Optional[str],
    pattern: str,
    now: Optional[datetime] = None,
    tz: Union[str, tzinfo, None] = None,
) -> Optional[str]:
    """Due date of the next occurrence of a recurring task.

    Arithmetic is done on wall-clock time in `tz`, so a task due at 09:00
    local stays at 09:00 local. Without a current due date the series is
    anchored at tomorrow 09:00. "monthly" clamps to the last day of a shorter
    target month (31 Jan -> 28/29 Feb). Unknown patterns give None; an
    unparseable or out-of-range due date raises ValueError.
    """
    if pattern not in RECURRENCE_LABELS:
        logger.warning(f"Unknown recurrence pattern: {pattern!r}")
        return None

    zone = get_timezone(tz)
    try:
        if current_due_date:
            base = parse_iso(current_due_date).astimezone(zone)
        else:
            base = _tomorrow_morning(zone, now)

        if pattern == "daily":
            next_date = base + timedelta(days=1)
        elif pattern == "weekly":
            next_date = base + timedelta(days=7)
        elif pattern == "monthly":
            next_date = base + relativedelta(months=1)
        else:
            next_date = base + timedelta(days=1)
            while next_date.weekday() >= _SATURDAY:
                next_date += timedelta(days=1)

        return to_iso_utc(next_date)
    except OverflowError:
        raise ValueError(f"next {pattern} occurrence after {current_due_date} is out of range")


def get_recurrence_label(pattern: Optional[str]) -> str:
    return RECURRENCE_LABELS.get(pattern, "") if pattern else ""


def build_next_occurrence(
    task: Task,
    now: Optional[datetime] = None,
    tz: Union[str, tzinfo, None] = None,
) -> Optional[Task]:
    """Successor of a completed recurring task, or None if it does not recur.

    The successor's parent is the first task of the chain, so the chain stays
    flat no matter how many times it has been completed.
    """
    if not task.is_recurring or task.recurrence_pattern is None:
        return None

    next_due = calculate_next_due_date(task.due_date, task.recurrence_pattern, now=now, tz=tz)
    return Task(
        title=task.title,
        description=task.description,
        priority=task.priority,
        estimated_time=task.estimated_time,
        category=task.category,
        tags=list(task.tags),
        due_date=next_due,
        completed=False,
        is_recurring=True,
        recurrence_pattern=task.recurrence_pattern,
        parent_task_id=task.parent_task_id or task.id,
    )
