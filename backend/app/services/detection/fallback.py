"""
ThreatLens Fallback Predictor

Rule-only prediction used when the sentiment classifier is unavailable.
"""

import logging
import time
from typing import List

from app.models.prediction import Prediction, PredictionSource
from app.services.nlp import ProcessedText
from app.utils.constants import (
    FALLBACK_BASE_CONFIDENCE,
    FALLBACK_BASE_RISK,
    FALLBACK_COMMERCIAL_BOOST,
    FALLBACK_COMMERCIAL_KEYWORDS,
    FALLBACK_CONFIDENCE_PER_KEYWORD,
    FALLBACK_MAX_CONFIDENCE,
    FALLBACK_THREAT_KEYWORD_BOOST,
    FALLBACK_THREAT_KEYWORDS,
    FALLBACK_URGENCY_BOOST,
    FALLBACK_URGENCY_KEYWORDS,
    TOP_FEATURES_COUNT,
)

from .scorer import get_label, get_risk_level

logger = logging.getLogger(__name__)


class FallbackPredictor:
    """Keyword-list predictor with the same output shape as the model path."""

    def predict(self, processed: ProcessedText, started_at: float) -> Prediction:
        """
        Score a message from keyword lists alone.

        Args:
            processed: Normalized text, features and entities for the message
            started_at: time.perf_counter() value when the request started

        Returns:
            Prediction with source FALLBACK
        """
        cleaned = processed.cleaned
        risk_score = FALLBACK_BASE_RISK
        explanation_parts: List[str] = ["Using rule-based fallback"]

        found_threats = [kw for kw in FALLBACK_THREAT_KEYWORDS if kw in cleaned]
        if found_threats:
            risk_score += len(found_threats) * FALLBACK_THREAT_KEYWORD_BOOST
            explanation_parts.append(f"Threat keywords: {', '.join(found_threats)}")

        if any(kw in cleaned for kw in FALLBACK_COMMERCIAL_KEYWORDS):
            risk_score += FALLBACK_COMMERCIAL_BOOST
            explanation_parts.append("Commercial language detected")

        if any(kw in cleaned for kw in FALLBACK_URGENCY_KEYWORDS):
            risk_score += FALLBACK_URGENCY_BOOST
            explanation_parts.append("Urgency indicators found")

        risk_score = min(risk_score, 1.0)
        confidence = min(
            len(found_threats) * FALLBACK_CONFIDENCE_PER_KEYWORD + FALLBACK_BASE_CONFIDENCE,
            FALLBACK_MAX_CONFIDENCE,
        )

        return Prediction(
            label=get_label(risk_score),
            confidence=confidence,
            risk_score=risk_score,
            risk_level=get_risk_level(risk_score),
            entities=processed.entities,
            explanation='; '.join(explanation_parts),
            features=processed.features[:TOP_FEATURES_COUNT],
            processing_time=(time.perf_counter() - started_at) * 1000,
            source=PredictionSource.FALLBACK,
        )
