"""
ThreatLens NLP Module

Deterministic text transforms used before and alongside classification.
"""

from .text_processor import (
    ProcessedText,
    normalize_text,
    extract_features,
    extract_entities,
    calculate_risk_indicators,
    count_occurrences,
    process_text,
)

__all__ = [
    'ProcessedText',
    'normalize_text',
    'extract_features',
    'extract_entities',
    'calculate_risk_indicators',
    'count_occurrences',
    'process_text',
]
