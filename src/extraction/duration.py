from __future__ import annotations

import re
from typing import Optional

from extraction.due_date import strip_time_of_day

# Every pattern is tried and matches are summed: "1 hora e 30 minutos" -> 90.
DURATION_PATTERNS = (
    (re.compile(r"(\d+)\s*(?:horas|hora|h)\b"), 60),
    (re.compile(r"(\d+)\s*(?:minutos|minuto|min)\b"), 1),
    (re.compile(r"(\d+)\s*(?:pomodoros|pomodoro)\b"), 25),
)

# Fallback estimates by task type; first keyword found wins.
DEFAULT_DURATIONS = {
    "reunião": 60,
    "reuniao": 60,
    "meeting": 60,
    "call": 30,
    "ligação": 30,
    "ligacao": 30,
    "email": 15,
    "e-mail": 15,
    "review": 30,
    "revisão": 30,
    "revisao": 30,
}


def extract_duration(text: str) -> Optional[int]:
    """Estimated effort in whole minutes, or None when nothing hints at it."""
    # "às 14h" is a time of day, not fourteen hours of work.
    lower_text = strip_time_of_day(text.lower())

    total_minutes = 0
    found = False
    for regex, multiplier in DURATION_PATTERNS:
        match = regex.search(lower_text)
        if match:
            total_minutes += int(match.group(1)) * multiplier
            found = True

    if found:
        return total_minutes

    for keyword, minutes in DEFAULT_DURATIONS.items():
        if keyword in lower_text:
            return minutes
    return None
