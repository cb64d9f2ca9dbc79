from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Optional, Union

from extraction.due_date import extract_due_date
from extraction.duration import extract_duration
from extraction.priority import extract_priority
from extraction.recurrence import extract_recurrence
from extraction.title import extract_title
from pomotask.clock import get_timezone
from pomotask.models import ParsedTask

logger = logging.getLogger(__name__)


class TaskParseError(ValueError):
    """Raised when there is no task text to parse."""


class TaskExtractor:
    """Runs the independent extractors over one entry and assembles a ParsedTask."""

    def __init__(self, timezone: Union[str, tzinfo, None] = None):
        self.timezone = get_timezone(timezone)

    def extract(self, text, now: Optional[datetime] = None) -> ParsedTask:
        if not isinstance(text, str) or not text.strip():
            raise TaskParseError("Task text is required")

        is_recurring, pattern = extract_recurrence(text)
        parsed = ParsedTask(
            title=extract_title(text),
            description=text,
            due_date=extract_due_date(text, now=now, tz=self.timezone),
            priority=extract_priority(text),
            estimated_time=extract_duration(text),
            is_recurring=is_recurring,
            recurrence_pattern=pattern,
        )
        logger.debug(f"Parsed task {text[:50]!r}: {parsed.model_dump()}")
        return parsed


def parse_task(
    text,
    now: Optional[datetime] = None,
    tz: Union[str, tzinfo, None] = None,
) -> ParsedTask:
    return TaskExtractor(timezone=tz).extract(text, now=now)
