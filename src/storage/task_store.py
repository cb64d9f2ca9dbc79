from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from pomotask.models import Task

logger = logging.getLogger(__name__)


class TaskStoreError(RuntimeError):
    """The store file exists but cannot be read back without losing records."""


class TaskStore:
    """Tasks persisted as one JSON document on disk.

    Reads are lenient: an unreadable file lists as empty and a bad record is
    skipped. Writes refuse to run on such a file, since saving would drop
    whatever could not be read.
    """

    def __init__(self, path: str = "data/tasks.json"):
        self.path = Path(path)

    def _load(self, strict: bool = False) -> List[Task]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            items = data.get("tasks", [])
            if not isinstance(items, list):
                raise ValueError("'tasks' is not a list")
        except (ValueError, AttributeError) as e:
            if strict:
                raise TaskStoreError(f"Could not read task store {self.path}: {e}") from e
            logger.warning(f"Could not read task store {self.path}: {e}")
            return []

        tasks = []
        for item in items:
            try:
                tasks.append(Task.model_validate(item))
            except ValidationError as e:
                if strict:
                    raise TaskStoreError(f"Invalid task record in {self.path}: {e}") from e
                logger.warning(f"Skipping invalid task record in {self.path}: {e}")
        return tasks

    def _save(self, tasks: List[Task]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"tasks": [t.model_dump(by_alias=True) for t in tasks]}
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def list(self) -> List[Task]:
        return self._load()

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._load():
            if task.id == task_id:
                return task
        return None

    def add(self, task: Task) -> Task:
        tasks = self._load(strict=True)
        tasks.append(task)
        self._save(tasks)
        return task

    def update(self, task_id: str, changes: Dict[str, Any]) -> Optional[Task]:
        """Apply `changes` (snake_case field names) and re-validate the record.

        Raises ValueError (pydantic.ValidationError) if the result is invalid,
        e.g. a due date that does not exist in the calendar.
        """
        tasks = self._load(strict=True)
        for i, task in enumerate(tasks):
            if task.id != task_id:
                continue
            merged = {**task.model_dump(), **changes, "id": task.id}
            updated = Task.model_validate(merged)
            tasks[i] = updated
            self._save(tasks)
            return updated
        return None

    def delete(self, task_id: str) -> bool:
        tasks = self._load(strict=True)
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._save(remaining)
        return True
