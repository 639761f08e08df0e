"""
ThreatLens API Routes

All API route modules.
"""

from fastapi import APIRouter

from .health import router as health_router
from .predict import router as predict_router
from .dataset import router as dataset_router
from .dataset import evaluate_router


def get_api_router() -> APIRouter:
    """Create and return the main API router."""
    api_router = APIRouter(prefix="/api/v1")

    api_router.include_router(health_router)
    api_router.include_router(predict_router)
    api_router.include_router(dataset_router)
    api_router.include_router(evaluate_router)

    return api_router


__all__ = [
    'get_api_router',
    'health_router',
    'predict_router',
    'dataset_router',
    'evaluate_router',
]
