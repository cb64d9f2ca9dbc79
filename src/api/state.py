from collections import deque
from typing import Optional, Deque, Dict, Any

from pomotask.models import UserPreferences
from storage.task_store import TaskStore

# In-memory storage for recent parse results (for display purposes)
recent_parses: Deque[Dict[str, Any]] = deque(maxlen=100)

# Global instances, created lazily by api.dependencies
task_store: Optional[TaskStore] = None
preferences: Optional[UserPreferences] = None
