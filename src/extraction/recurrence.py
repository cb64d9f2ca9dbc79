from __future__ import annotations

import re
from typing import Optional, Tuple

from pomotask.models import RecurrencePattern

DAILY_PATTERNS = (
    "todo dia", "todos os dias", "diariamente", "diário", "diaria",
    "every day", "daily", "cada dia",
)

WEEKDAYS_PATTERNS = (
    "todos os dias úteis", "todos os dias uteis",
    "dias úteis", "dias uteis", "dia útil", "dia util",
    "de segunda a sexta", "segunda a sexta", "weekdays",
)

WEEKLY_PATTERNS = (
    "toda semana", "todas as semanas", "semanalmente", "semanal",
    "every week", "weekly", "cada semana",
)

# Recurs on one named day; tracked as plain weekly.
SPECIFIC_DAY_PATTERNS = (
    "toda segunda", "toda terça", "toda terca", "toda quarta", "toda quinta",
    "toda sexta", "todo sábado", "todo sabado", "todo domingo",
    "every monday", "every tuesday", "every wednesday", "every thursday",
    "every friday", "every saturday", "every sunday",
)

MONTHLY_PATTERNS = (
    "todo mês", "todo mes", "todos os meses", "mensalmente", "mensal",
    "every month", "monthly", "cada mês", "cada mes",
)

# First matching group wins; weekdays is tried before weekly.
PATTERN_GROUPS: Tuple[Tuple[RecurrencePattern, Tuple[str, ...]], ...] = (
    ("daily", DAILY_PATTERNS),
    ("weekdays", WEEKDAYS_PATTERNS),
    ("weekly", WEEKLY_PATTERNS),
    ("weekly", SPECIFIC_DAY_PATTERNS),
    ("monthly", MONTHLY_PATTERNS),
)

ALL_RECURRENCE_PHRASES = tuple(
    phrase for _, phrases in PATTERN_GROUPS for phrase in phrases
)

# "todos os dias" followed by "úteis" belongs to the weekdays group.
_WORKING_DAY_SUFFIX = re.compile(r"\s+(?:úteis|uteis|útil|util)\b")


def _contains(lower_text: str, phrase: str, pattern: RecurrencePattern) -> bool:
    start = lower_text.find(phrase)
    while start != -1:
        end = start + len(phrase)
        if pattern != "daily" or not _WORKING_DAY_SUFFIX.match(lower_text, end):
            return True
        start = lower_text.find(phrase, start + 1)
    return False


def extract_recurrence(text: str) -> Tuple[bool, Optional[RecurrencePattern]]:
    """Return (is_recurring, pattern) for the first pattern group that matches."""
    lower_text = text.lower()
    for pattern, phrases in PATTERN_GROUPS:
        if any(_contains(lower_text, phrase, pattern) for phrase in phrases):
            return True, pattern
    return False, None
