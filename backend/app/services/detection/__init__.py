"""
ThreatLens Detection Module

Threat prediction for short messages:
- Sentiment classifier probability as the base signal
- Additive keyword and attack-pattern boosts
- Bounded FIFO prediction cache
- Rule-only fallback when the classifier is unavailable
"""

from .engine import (
    ThreatDetector,
    build_threat_detector,
    init_threat_detector,
    get_threat_detector,
    reset_threat_detector,
    safe_default_prediction,
)

from .scorer import RiskScorer, get_risk_level, get_label, clamp

from .cache import PredictionCache

from .fallback import FallbackPredictor

__all__ = [
    # Engine
    'ThreatDetector',
    'build_threat_detector',
    'init_threat_detector',
    'get_threat_detector',
    'reset_threat_detector',
    'safe_default_prediction',

    # Scorer
    'RiskScorer',
    'get_risk_level',
    'get_label',
    'clamp',

    # Cache
    'PredictionCache',

    # Fallback
    'FallbackPredictor',
]
