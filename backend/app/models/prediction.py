"""
ThreatLens Prediction Data Models

Pydantic models for threat predictions and the intermediate values
produced while scoring a message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ThreatLabel(str, Enum):
    """Binary message classification."""
    THREAT = "threat"
    BENIGN = "benign"


class RiskLevel(str, Enum):
    """Risk level bucket for triage."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PredictionSource(str, Enum):
    """Which path produced a prediction."""
    MODEL = "model"
    CACHE = "cache"
    FALLBACK = "fallback"
    ERROR = "error"


class ExtractedEntities(BaseModel):
    """Structured mentions pulled out of a message by pattern matching."""
    model_config = ConfigDict(frozen=True)

    targets: List[str] = Field(default_factory=list, description="Domains treated as attack targets")
    dates: List[str] = Field(default_factory=list, description="Date and time expressions")
    tools: List[str] = Field(default_factory=list, description="Named attack tools (lowercased)")
    urls: List[str] = Field(default_factory=list, description="URLs and domains")
    ips: List[str] = Field(default_factory=list, description="Dotted-quad IPv4 addresses")


class Prediction(BaseModel):
    """
    Final threat prediction for one message.

    Serialized with camelCase aliases (riskScore, riskLevel, processingTime).
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    label: ThreatLabel = Field(..., description="threat iff risk_score > 0.5")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Prediction confidence 0-1")
    risk_score: float = Field(..., ge=0.0, le=1.0, description="Risk score 0-1")
    risk_level: RiskLevel = Field(..., description="Risk level derived from risk_score")
    entities: ExtractedEntities = Field(default_factory=ExtractedEntities)
    explanation: str = Field("", description="Rule trigger descriptions in evaluation order")
    features: List[str] = Field(default_factory=list, description="Top extracted features")
    processing_time: float = Field(0.0, ge=0.0, description="Wall-clock milliseconds")
    source: PredictionSource = Field(PredictionSource.MODEL, description="Producing path")


class ModelStatus(BaseModel):
    """Classifier lifecycle status."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    is_ready: bool = False
    is_loading: bool = False


@dataclass(frozen=True)
class RiskIndicators:
    """Keyword counts and flags computed from one message."""
    high_risk_count: int = 0
    medium_risk_count: int = 0
    tool_count: int = 0
    urgency_score: int = 0
    commercial_score: int = 0


@dataclass(frozen=True)
class EnhancedScore:
    """Output of the rule-based score enhancer."""
    risk_score: float
    confidence: float
    explanation: str
    triggered_rules: List[str]
