"""
ThreatLens Utilities Package
============================

Common constants and exceptions used throughout the application.
"""

from app.utils.constants import (
    APP_NAME,
    APP_FULL_NAME,
    APP_VERSION,
    APP_DESCRIPTION,
    PREDICTION_CACHE_MAX_SIZE,
    THREAT_LABEL_THRESHOLD,
    RISK_LEVEL_THRESHOLDS,
)

from app.utils.exceptions import (
    ThreatLensBaseException,
    ClassifierError,
    ClassifierLoadError,
    ClassifierNotReadyError,
    ClassifierTimeoutError,
    ClassifierOutputError,
    ValidationError,
    BatchTooLargeError,
    DatasetError,
    CSVFormatError,
)

__all__ = [
    # Constants
    'APP_NAME',
    'APP_FULL_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
    'PREDICTION_CACHE_MAX_SIZE',
    'THREAT_LABEL_THRESHOLD',
    'RISK_LEVEL_THRESHOLDS',

    # Exceptions
    'ThreatLensBaseException',
    'ClassifierError',
    'ClassifierLoadError',
    'ClassifierNotReadyError',
    'ClassifierTimeoutError',
    'ClassifierOutputError',
    'ValidationError',
    'BatchTooLargeError',
    'DatasetError',
    'CSVFormatError',
]
