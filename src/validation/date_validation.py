"""Strict proleptic-Gregorian date checks.

Nothing here builds a ``date``/``datetime`` from untrusted day/month/year
parts; callers validate first and construct afterwards, so an impossible date
such as 31/11 can never be normalised into 1/12 along the way.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timezone
from numbers import Integral
from typing import Optional

from pomotask.clock import now_local, parse_iso

logger = logging.getLogger(__name__)

DATE_NOT_IN_CALENDAR_MESSAGE = "A data inserida não existe no calendário (ex: 31 de Novembro)."
INVALID_FORMAT_MESSAGE = "Invalid date format. Use DD/MM or DD/MM/YYYY"

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_DATE_STRING_RE = re.compile(r"^(\d{1,2})/(\d{1,2})(?:/(\d{4}))?$")
_ISO_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


@dataclass(frozen=True)
class DateStringValidation:
    valid: bool
    day: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class IsoValidation:
    valid: bool
    error: Optional[str] = None


def _as_int(value) -> Optional[int]:
    # bool is an Integral subclass but never a calendar component
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0)


def days_in_month(month: int, year: int) -> int:
    """Number of days in `month` (1-12) of `year`; 0 for an out-of-range month."""
    month = _as_int(month)
    if month is None or month < 1 or month > 12:
        return 0
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def is_valid_date(day, month, year) -> bool:
    """Total predicate: True only for a real calendar date, never raises.

    >>> is_valid_date(31, 11, 2025)
    False
    >>> is_valid_date(29, 2, 2024)
    True
    """
    day, month, year = _as_int(day), _as_int(month), _as_int(year)
    if day is None or month is None or year is None:
        return False
    if year < 1:
        return False
    if month < 1 or month > 12:
        return False
    if day < 1:
        return False
    return day <= days_in_month(month, year)


def validate_date_string(text: str, year: Optional[int] = None) -> DateStringValidation:
    """Validate a DD/MM or DD/MM/YYYY string.

    `year` is used when the string carries none; it defaults to the current
    year in the configured timezone.
    """
    match = _DATE_STRING_RE.match(text or "")
    if not match:
        return DateStringValidation(valid=False, error=INVALID_FORMAT_MESSAGE)

    day = int(match.group(1))
    month = int(match.group(2))
    if match.group(3):
        year = int(match.group(3))
    elif year is None:
        year = now_local().year

    if not is_valid_date(day, month, year):
        return DateStringValidation(
            valid=False,
            day=day,
            month=month,
            year=year,
            error=DATE_NOT_IN_CALENDAR_MESSAGE,
        )
    return DateStringValidation(valid=True, day=day, month=month, year=year)


def validate_iso_date_string(iso: Optional[str]) -> IsoValidation:
    """Check an inbound ISO due date before it is persisted.

    A missing value is always acceptable. The year/month/day are read from the
    literal ``YYYY-MM-DD`` prefix and must both exist in the calendar and match
    the parsed instant in UTC.
    """
    if not iso:
        return IsoValidation(valid=True)

    rejected = IsoValidation(valid=False, error=DATE_NOT_IN_CALENDAR_MESSAGE)

    match = _ISO_PREFIX_RE.match(iso) if isinstance(iso, str) else None
    if match:
        year, month, day = (int(g) for g in match.groups())
        if not is_valid_date(day, month, year):
            logger.info(f"Rejected impossible calendar date: {iso}")
            return rejected

    try:
        parsed = parse_iso(iso)
    except (TypeError, ValueError, OverflowError):
        logger.info(f"Rejected unparseable date: {iso!r}")
        return rejected

    try:
        utc = parsed.astimezone(timezone.utc)
    except OverflowError:
        logger.info(f"Rejected date outside the supported range: {iso}")
        return rejected

    if not match:
        # Parseable but not in the YYYY-MM-DD shape; nothing literal to compare.
        return IsoValidation(valid=True)

    if (utc.year, utc.month, utc.day) != (year, month, day):
        logger.info(f"Rejected date that does not round-trip: {iso}")
        return rejected

    return IsoValidation(valid=True)
