from __future__ import annotations

import json
import logging
from pathlib import Path

from pomotask.models import UserPreferences

logger = logging.getLogger(__name__)


class PreferencesStore:
    def __init__(self, path: str = "data/preferences.json"):
        self.path = Path(path)

    def load(self) -> UserPreferences:
        try:
            if not self.path.exists():
                return UserPreferences()
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return UserPreferences(**data)
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid preferences file {self.path}, using defaults: {e}")
            return UserPreferences()

    def save(self, prefs: UserPreferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(prefs.model_dump(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
