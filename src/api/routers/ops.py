import os
import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api import state
from api.dependencies import get_preferences
from pomotask.models import UserPreferences

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(prefs: UserPreferences = Depends(get_preferences)) -> dict:
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "profile": os.getenv("DEPLOYMENT_PROFILE", "unknown"),
        "timezone": prefs.timezone,
        "recent_parses": len(state.recent_parses),
    }


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
