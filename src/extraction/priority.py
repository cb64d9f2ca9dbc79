from __future__ import annotations

from pomotask.models import Priority

HIGH_PRIORITY_KEYWORDS = (
    "urgente", "urgência", "importante", "crítico", "crítica",
    "prioridade alta", "alta prioridade", "asap", "imediato",
    "imediatamente", "hoje", "agora", "!!",
)

LOW_PRIORITY_KEYWORDS = (
    "baixa prioridade", "prioridade baixa", "quando possível",
    "quando puder", "sem pressa", "eventualmente", "opcional",
)


def extract_priority(text: str) -> Priority:
    """High keywords win over low ones; plain substring tests on lower-cased text."""
    lower_text = text.lower()

    if any(keyword in lower_text for keyword in HIGH_PRIORITY_KEYWORDS):
        return "high"
    if any(keyword in lower_text for keyword in LOW_PRIORITY_KEYWORDS):
        return "low"
    return "medium"
