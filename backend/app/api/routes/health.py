"""
ThreatLens Health API Routes

Health check and classifier status endpoints.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.dependencies import get_detector, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(
    settings = Depends(get_settings),
):
    """
    Basic health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "threatlens-api",
        "version": settings.app_version,
    }


@router.get("/ready")
async def readiness_check(
    detector = Depends(get_detector),
):
    """
    Readiness check - reports classifier status and cache size.

    The API answers predictions before the classifier is ready (using the
    rule-based fallback), so this reports "degraded" rather than failing.

    Returns:
        Readiness status with component checks
    """
    status = detector.get_status()

    return {
        "status": "ready" if status.is_ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "model": status.model_dump(by_alias=True),
        "checks": {
            "classifier": {
                "model_id": detector.classifier.model_id,
                "provider": detector.classifier.provider_name,
                "status": "ready" if status.is_ready else ("loading" if status.is_loading else "not_loaded"),
            },
            "cache": {
                "size": len(detector.cache),
                "max_size": detector.cache.max_size,
            },
        },
    }


@router.get("/live")
async def liveness_check():
    """
    Liveness check - basic ping.

    Returns:
        Alive status
    """
    return {"status": "alive"}
