"""
ThreatLens Risk Scorer

Turns a sentiment-derived threat probability into a bounded risk score,
confidence and explanation using additive keyword and pattern boosts.
"""

import logging
import re
from typing import List, Tuple

from app.models.prediction import EnhancedScore, RiskIndicators, RiskLevel, ThreatLabel
from app.utils.constants import (
    ATTACK_PATTERNS,
    ATTACK_PATTERN_BOOST,
    COMMERCIAL_BOOST,
    HIGH_RISK_BOOST_CAP,
    HIGH_RISK_BOOST_PER_HIT,
    MAX_RULE_CONFIDENCE,
    RISK_LEVEL_THRESHOLDS,
    RULE_CONFIDENCE_STEP,
    RULE_DESCRIPTIONS,
    THREAT_LABEL_THRESHOLD,
    TOOL_BOOST_CAP,
    TOOL_BOOST_PER_HIT,
    URGENCY_BOOST,
)

logger = logging.getLogger(__name__)


COMPILED_ATTACK_PATTERNS: List[Tuple[str, "re.Pattern[str]", str]] = [
    (name, re.compile(pattern, re.IGNORECASE), description)
    for name, pattern, description in ATTACK_PATTERNS
]


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def get_risk_level(score: float) -> RiskLevel:
    """
    Get risk level from a 0-1 risk score.

    Args:
        score: Risk score 0-1

    Returns:
        HIGH for >= 0.7, MEDIUM for >= 0.4, LOW otherwise
    """
    for level_name, min_score in RISK_LEVEL_THRESHOLDS:
        if score >= min_score:
            return RiskLevel(level_name)
    return RiskLevel.LOW


def get_label(score: float) -> ThreatLabel:
    """Threat iff the score is strictly above the label threshold."""
    return ThreatLabel.THREAT if score > THREAT_LABEL_THRESHOLD else ThreatLabel.BENIGN


def _percent(boost: float) -> str:
    return f"+{boost * 100:.0f}%"


class RiskScorer:
    """
    Rule-based enhancement of classifier output.

    Rules run in a fixed order; each triggered rule adds to the risk
    score and contributes one clause to the explanation.
    """

    def enhance(
        self,
        text: str,
        base_threat_probability: float,
        indicators: RiskIndicators,
    ) -> EnhancedScore:
        """
        Enhance a base threat probability with keyword and pattern rules.

        Args:
            text: Raw message text, used for attack-pattern matching
            base_threat_probability: Threat probability from the classifier
            indicators: Risk indicators for the same text

        Returns:
            EnhancedScore with clamped risk score and confidence
        """
        risk_score = base_threat_probability
        confidence = abs(base_threat_probability - 0.5) * 2
        triggered: List[str] = []
        explanation_parts: List[str] = []

        if indicators.high_risk_count > 0:
            boost = min(indicators.high_risk_count * HIGH_RISK_BOOST_PER_HIT, HIGH_RISK_BOOST_CAP)
            risk_score += boost
            triggered.append("high_risk")
            explanation_parts.append(f"{RULE_DESCRIPTIONS['high_risk']} ({_percent(boost)})")

        if indicators.tool_count > 0:
            boost = min(indicators.tool_count * TOOL_BOOST_PER_HIT, TOOL_BOOST_CAP)
            risk_score += boost
            triggered.append("tools")
            explanation_parts.append(f"{RULE_DESCRIPTIONS['tools']} ({_percent(boost)})")

        if indicators.commercial_score > 0:
            risk_score += COMMERCIAL_BOOST
            triggered.append("commercial")
            explanation_parts.append(f"{RULE_DESCRIPTIONS['commercial']} ({_percent(COMMERCIAL_BOOST)})")

        if indicators.urgency_score > 0:
            risk_score += URGENCY_BOOST
            triggered.append("urgency")
            explanation_parts.append(f"{RULE_DESCRIPTIONS['urgency']} ({_percent(URGENCY_BOOST)})")

        for name, pattern, description in COMPILED_ATTACK_PATTERNS:
            if pattern.search(text or ''):
                risk_score += ATTACK_PATTERN_BOOST
                triggered.append(name)
                explanation_parts.append(f"{description} ({_percent(ATTACK_PATTERN_BOOST)})")

        risk_score = clamp(risk_score)
        confidence = clamp(
            min(confidence + RULE_CONFIDENCE_STEP * len(explanation_parts), MAX_RULE_CONFIDENCE)
        )

        if explanation_parts:
            explanation = f"Model prediction enhanced by rules: {', '.join(explanation_parts)}"
        else:
            explanation = (
                f"Base model prediction ({base_threat_probability * 100:.1f}% threat probability)"
            )

        logger.debug(f"Enhanced score={risk_score:.3f} rules={triggered}")

        return EnhancedScore(
            risk_score=risk_score,
            confidence=confidence,
            explanation=explanation,
            triggered_rules=triggered,
        )

    def get_risk_level(self, score: float) -> RiskLevel:
        return get_risk_level(score)

    def get_label(self, score: float) -> ThreatLabel:
        return get_label(score)
