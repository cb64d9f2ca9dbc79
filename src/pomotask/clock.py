from __future__ import annotations

import os
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

# Wall-clock zone used for "today", the default 09:00 and recurrence arithmetic.
DEFAULT_TIMEZONE = os.getenv("TASKS_TIMEZONE", "America/Sao_Paulo")


def get_timezone(tz: Union[str, tzinfo, None] = None) -> tzinfo:
    if tz is None:
        return ZoneInfo(DEFAULT_TIMEZONE)
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def now_local(tz: Union[str, tzinfo, None] = None, now: Optional[datetime] = None) -> datetime:
    """Return `now` (or the current instant) as an aware datetime in `tz`.

    A naive `now` is taken to be wall-clock time in `tz` already.
    """
    zone = get_timezone(tz)
    if now is None:
        return datetime.now(timezone.utc).astimezone(zone)
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)


def to_iso_utc(dt: datetime) -> str:
    """Render an aware datetime as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def parse_iso(text: str) -> datetime:
    """Parse an ISO-8601 string; naive values are read as UTC.

    Raises ValueError when the string is not a parseable ISO timestamp.
    """
    dt = date_parser.isoparse(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
