"""
ThreatLens Dataset Data Models

Pydantic models for labelled messages and evaluation results.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.prediction import Prediction, ThreatLabel


class ThreatType(str, Enum):
    """Threat category of a labelled message."""
    RANSOMWARE = "ransomware"
    PHISHING = "phishing"
    DDOS = "ddos"
    CREDENTIAL_THEFT = "credential_theft"
    OTHER = "other"
    NONE = ""


class ThreatMessage(BaseModel):
    """A labelled message, synthetic or uploaded."""
    id: str = Field(..., description="Message identifier")
    text: str = Field(..., description="Message text")
    label: ThreatLabel = Field(..., description="Ground-truth label")
    type: ThreatType = Field(ThreatType.NONE, description="Threat category, empty for benign")
    timestamp: datetime = Field(..., description="Message timestamp")


class BatchRow(BaseModel):
    """One row read from an uploaded batch CSV."""
    id: str
    text: str
    label: Optional[ThreatLabel] = None
    type: Optional[str] = None


class BatchResult(BaseModel):
    """Prediction for one batch row, with its ground truth when known."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str
    text: str
    prediction: Prediction
    original_label: Optional[ThreatLabel] = None
    original_type: Optional[str] = None


class EvaluationMetrics(BaseModel):
    """Classification quality over predictions with ground truth."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    total: int = Field(0, ge=0, description="Predictions with a ground-truth label")
    correct: int = Field(0, ge=0)
    accuracy: float = Field(0.0, ge=0.0, le=1.0)
    precision: float = Field(0.0, ge=0.0, le=1.0)
    recall: float = Field(0.0, ge=0.0, le=1.0)
    f1_score: float = Field(0.0, ge=0.0, le=1.0)
    confusion_matrix: List[List[int]] = Field(
        default_factory=lambda: [[0, 0], [0, 0]],
        description="[[tn, fp], [fn, tp]] with threat as the positive class",
    )
