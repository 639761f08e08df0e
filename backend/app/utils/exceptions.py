"""
ThreatLens Custom Exceptions

Centralized exception classes for error handling.
"""


class ThreatLensBaseException(Exception):
    """Base exception for all ThreatLens errors."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# Classifier Exceptions
# ============================================================================

class ClassifierError(ThreatLensBaseException):
    """Error with the external sentiment classifier."""
    pass


class ClassifierLoadError(ClassifierError):
    """Classifier model could not be loaded."""
    pass


class ClassifierNotReadyError(ClassifierError):
    """Classifier was used before it finished loading."""
    pass


class ClassifierTimeoutError(ClassifierError):
    """Classifier inference did not finish in time."""
    pass


class ClassifierOutputError(ClassifierError):
    """Classifier returned output in an unexpected shape."""
    pass


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationError(ThreatLensBaseException):
    """Input validation failed."""
    pass


class BatchTooLargeError(ValidationError):
    """Batch exceeds maximum size limit."""
    pass


# ============================================================================
# Dataset Exceptions
# ============================================================================

class DatasetError(ThreatLensBaseException):
    """Error building or reading a dataset."""
    pass


class CSVFormatError(DatasetError):
    """CSV content is empty or missing required columns."""
    pass
