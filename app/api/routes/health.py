"""Health check endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.dependencies import get_session
from app.config import settings
from app.middleware.performance import metrics
from app.services.kitchen_session import KitchenSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(session: KitchenSession = Depends(get_session)) -> Dict[str, Any]:
    """
    Readiness check.

    Ready once the saved recipe bucket has been loaded; reports whether a
    Gemini API key is configured.
    """
    ready = session.saved_recipes.loaded
    return {
        "status": "ready" if ready else "starting",
        "dependencies": {
            "saved_recipes": "loaded" if ready else "not_loaded",
            "gemini": "configured" if settings.gemini_api_key else "missing_api_key",
        },
    }


@router.get("/metrics")
async def performance_metrics() -> Dict[str, Any]:
    """Request counts, durations and error rates since startup."""
    return {
        "status": "ok",
        **metrics.get_summary(),
    }
