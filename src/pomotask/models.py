from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pomotask.clock import to_iso_utc
from validation.date_validation import validate_iso_date_string

Priority = Literal["high", "medium", "low"]
RecurrencePattern = Literal["daily", "weekly", "monthly", "weekdays"]


class _CamelModel(BaseModel):
    # Wire format is camelCase (dueDate, isRecurring, ...); Python side stays snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="after")
    def recurrence_consistent(self):
        if self.is_recurring and self.recurrence_pattern is None:
            raise ValueError("recurring task needs a recurrence pattern")
        if not self.is_recurring and self.recurrence_pattern is not None:
            raise ValueError("recurrence pattern set on a non-recurring task")
        return self


class ParsedTask(_CamelModel):
    """Structured result of parsing one free-text task entry."""

    title: str = Field(..., min_length=1)
    description: str
    due_date: Optional[str] = None
    priority: Priority = "medium"
    estimated_time: Optional[int] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None


def _new_id() -> str:
    return uuid.uuid4().hex


def _created_now() -> str:
    return to_iso_utc(datetime.now(timezone.utc))


class Task(_CamelModel):
    id: str = Field(default_factory=_new_id)
    title: str = Field(..., min_length=1)
    description: str = ""
    priority: Priority = "medium"
    estimated_time: Optional[int] = Field(None, gt=0)
    due_date: Optional[str] = None
    completed: bool = False
    created_at: str = Field(default_factory=_created_now)

    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    # Root of the recurring chain, not the immediate predecessor.
    parent_task_id: Optional[str] = None

    calendar_event_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("due_date")
    @classmethod
    def due_date_exists(cls, v: Optional[str]) -> Optional[str]:
        result = validate_iso_date_string(v)
        if not result.valid:
            raise ValueError(result.error)
        return v


class UserPreferences(BaseModel):
    timezone: str = "America/Sao_Paulo"
    calendar_id: str = "primary"
    default_event_duration_min: int = Field(30, gt=0)

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {v}")
        return v
