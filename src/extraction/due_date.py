from __future__ import annotations

import logging
import re
from datetime import MAXYEAR, date, datetime, time, timedelta, tzinfo
from typing import Optional, Union

from pomotask.clock import get_timezone, now_local, to_iso_utc
from validation.date_validation import is_valid_date

logger = logging.getLogger(__name__)

DEFAULT_DUE_TIME = time(9, 0)

# Python weekday numbers (Monday == 0); checked in this order.
WEEKDAYS = (
    ("domingo", 6),
    ("segunda", 0),
    ("terça", 1),
    ("terca", 1),
    ("quarta", 2),
    ("quinta", 3),
    ("sexta", 4),
    ("sábado", 5),
    ("sabado", 5),
)

TODAY_RE = re.compile(r"\bhoje\b")
TOMORROW_RE = re.compile(r"\bamanh[ãa]\b")
NEXT_WEEK_RE = re.compile(r"\bpr[óo]xima\s+semana\b")
NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}))?\b")
DAY_OF_MONTH_RE = re.compile(r"\bdia\s+(\d{1,2})\b")

# Most specific first: "às 14h30", then "14:30", then "14h30".
TIME_OF_DAY_PATTERNS = (
    re.compile(r"\b(?:às|as)\s*(\d{1,2})(?::(\d{2}))?\s*(?:horas|h)?\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2}):(\d{2})\b"),
    re.compile(r"\b(\d{1,2})h(\d{2})\b", re.IGNORECASE),
)


def strip_time_of_day(text: str) -> str:
    """Remove every time-of-day expression from `text`."""
    for pattern in TIME_OF_DAY_PATTERNS:
        text = pattern.sub(" ", text)
    return text


def extract_time_of_day(text: str) -> Optional[time]:
    for pattern in TIME_OF_DAY_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        hours = int(match.group(1))
        minutes = int(match.group(2)) if match.group(2) else 0
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return time(hours, minutes)
    return None


def _next_weekday(base: date, weekday: int) -> date:
    delta = (weekday - base.weekday()) % 7
    return base + timedelta(days=delta or 7)


def _next_day_of_month(day: int, now: datetime) -> Optional[date]:
    # Day N counts as passed once its local midnight is behind `now`.
    year, month = now.year, now.month
    passed = True
    if is_valid_date(day, month, year):
        passed = datetime.combine(date(year, month, day), time(0, 0), tzinfo=now.tzinfo) < now
    if passed:
        month += 1
        if month > 12:
            month = 1
            year += 1
        if year > MAXYEAR or not is_valid_date(day, month, year):
            logger.info(f"Day {day} does not exist in {month:02d}/{year}; no due date")
            return None
    return date(year, month, day)


def extract_calendar_date(text: str, now: datetime) -> Optional[date]:
    """Find the single date expression in `text`, first match by precedence.

    `now` is the current local wall-clock time.
    """
    lower_text = text.lower()
    today = now.date()

    if TODAY_RE.search(lower_text):
        return today
    if TOMORROW_RE.search(lower_text):
        return today + timedelta(days=1)

    for name, weekday in WEEKDAYS:
        if re.search(rf"\b{name}\b", lower_text):
            return _next_weekday(today, weekday)

    if NEXT_WEEK_RE.search(lower_text):
        return today + timedelta(days=7)

    match = NUMERIC_DATE_RE.search(lower_text)
    if match:
        day = int(match.group(1))
        month = int(match.group(2))
        year = int(match.group(3)) if match.group(3) else today.year
        if not is_valid_date(day, month, year):
            logger.info(f"Ignoring impossible date {match.group(0)!r}")
            return None
        return date(year, month, day)

    match = DAY_OF_MONTH_RE.search(lower_text)
    if match:
        return _next_day_of_month(int(match.group(1)), now)

    return None


def extract_due_date(
    text: str,
    now: Optional[datetime] = None,
    tz: Union[str, tzinfo, None] = None,
) -> Optional[str]:
    """Return the due instant as an ISO-8601 UTC string, or None.

    Relative expressions are resolved against `now` in the wall-clock zone
    `tz`; the time of day defaults to 09:00 there.
    """
    zone = get_timezone(tz)
    local_now = now_local(zone, now)

    found = extract_calendar_date(text, local_now)
    if found is None:
        return None

    at = extract_time_of_day(text)
    if at is None:
        at = DEFAULT_DUE_TIME
    due = datetime.combine(found, at, tzinfo=zone)
    try:
        iso = to_iso_utc(due)
    except OverflowError:
        logger.info(f"Due date {due.isoformat()} is outside the supported range; no due date")
        return None
    logger.debug(f"Resolved due date {iso} from {text!r}")
    return iso
