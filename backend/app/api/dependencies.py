"""
ThreatLens API Dependencies

FastAPI dependency injection for settings and the threat detector.
"""

import logging

from fastapi import HTTPException

from app.config import Settings, get_settings
from app.services.detection import ThreatDetector, get_threat_detector
from app.utils.exceptions import BatchTooLargeError

logger = logging.getLogger(__name__)


def get_detector() -> ThreatDetector:
    """Get the threat detector singleton."""
    return get_threat_detector()


def check_text_length(text: str, settings: Settings) -> None:
    """
    Reject messages longer than the configured limit.

    Raises:
        HTTPException: 413 if the text is too long
    """
    if len(text) > settings.max_text_length:
        raise HTTPException(
            status_code=413,
            detail=f"Text too long. Maximum length is {settings.max_text_length} characters.",
        )


def check_batch_size(size: int, settings: Settings) -> None:
    """
    Reject batches above the configured limit.

    Raises:
        BatchTooLargeError: If the batch is too large
    """
    if size > settings.max_batch_size:
        raise BatchTooLargeError(
            f"Batch too large. Maximum is {settings.max_batch_size} messages, got {size}."
        )


__all__ = [
    'get_settings',
    'get_detector',
    'check_text_length',
    'check_batch_size',
]
