import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException
from google.oauth2.credentials import Credentials

from api import state
from extraction.task_extractor import TaskExtractor
from integration.calendar_integration import CalendarIntegration
from integration.google_tasks import GoogleTasksIntegration
from pomotask.models import UserPreferences
from storage.preferences_store import PreferencesStore
from storage.task_store import TaskStore

logger = logging.getLogger(__name__)

# Configuration
TASKS_STORE_PATH = os.getenv("TASKS_STORE_PATH", "data/tasks.json")
PREFERENCES_PATH = os.getenv("PREFERENCES_PATH", "data/preferences.json")
GOOGLE_CREDENTIALS_PATH = os.getenv("GOOGLE_CREDENTIALS_PATH", "data/google_token.json")

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/tasks",
]


def get_task_store() -> TaskStore:
    if state.task_store is None:
        state.task_store = TaskStore(TASKS_STORE_PATH)
    return state.task_store


def get_preferences() -> UserPreferences:
    if state.preferences is None:
        state.preferences = PreferencesStore(PREFERENCES_PATH).load()
    return state.preferences


def get_task_extractor(prefs: UserPreferences = Depends(get_preferences)) -> TaskExtractor:
    return TaskExtractor(timezone=prefs.timezone)


def get_google_credentials() -> Optional[Credentials]:
    """Authorized-user token file written by an OAuth consent flow, if any."""
    path = Path(GOOGLE_CREDENTIALS_PATH)
    if not path.exists():
        return None
    try:
        return Credentials.from_authorized_user_file(str(path), GOOGLE_SCOPES)
    except (ValueError, OSError) as e:
        logger.error(f"Could not load Google credentials from {path}: {e}")
        return None


def _require(credentials: Optional[Credentials]) -> Credentials:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Google account is not connected")
    return credentials


def get_calendar(
    prefs: UserPreferences = Depends(get_preferences),
    credentials: Optional[Credentials] = Depends(get_google_credentials),
) -> CalendarIntegration:
    return CalendarIntegration(
        credentials=_require(credentials),
        calendar_id=prefs.calendar_id,
        timezone_name=prefs.timezone,
        default_duration_min=prefs.default_event_duration_min,
    )


def get_google_tasks(
    credentials: Optional[Credentials] = Depends(get_google_credentials),
) -> GoogleTasksIntegration:
    return GoogleTasksIntegration(credentials=_require(credentials))
