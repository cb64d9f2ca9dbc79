from __future__ import annotations

import re

from extraction.due_date import TIME_OF_DAY_PATTERNS
from extraction.priority import HIGH_PRIORITY_KEYWORDS, LOW_PRIORITY_KEYWORDS
from extraction.recurrence import ALL_RECURRENCE_PHRASES

MIN_TITLE_LENGTH = 3
FALLBACK_TITLE_LENGTH = 50


def _word_group(phrases) -> re.Pattern:
    # Longest first so "todos os dias úteis" goes before "todos os dias".
    ordered = sorted(phrases, key=len, reverse=True)
    return re.compile(
        r"\b(?:" + "|".join(re.escape(p) for p in ordered) + r")\b",
        re.IGNORECASE,
    )


# "!!" goes with the exclamation pattern.
_PRIORITY_WORDS = [k for k in HIGH_PRIORITY_KEYWORDS + LOW_PRIORITY_KEYWORDS if k != "!!"]

PATTERNS_TO_REMOVE = (
    _word_group(_PRIORITY_WORDS),
    re.compile(r"\b(?:hoje|amanhã|amanha|próxima\s+semana|proxima\s+semana)\b", re.IGNORECASE),
    # time of day before durations, or "às 14h" would lose only its "14h"
    *TIME_OF_DAY_PATTERNS,
    re.compile(
        r"\b\d+\s*(?:horas|hora|h|minutos|minuto|min|pomodoros|pomodoro)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b\d{1,2}/\d{1,2}(?:/\d{4})?\b"),
    re.compile(r"\bdia\s+\d{1,2}\b", re.IGNORECASE),
    re.compile(r"!+"),
    _word_group(ALL_RECURRENCE_PHRASES),
)

_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.;:])")
_EDGE_PUNCT = " ,.;:-"


def extract_title(text: str) -> str:
    title = text
    for pattern in PATTERNS_TO_REMOVE:
        title = pattern.sub(" ", title)

    title = re.sub(r"\s+", " ", title).strip()
    title = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", title).strip(_EDGE_PUNCT)

    if title:
        title = title[0].upper() + title[1:]

    if len(title) < MIN_TITLE_LENGTH:
        title = text[:FALLBACK_TITLE_LENGTH] + ("..." if len(text) > FALLBACK_TITLE_LENGTH else "")
    return title
