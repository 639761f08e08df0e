"""
ThreatLens Services Package

Business logic modules for threat message analysis:
- nlp: Text normalization, features, entities, risk indicators
- classifier: Sentiment classifier providers
- detection: Prediction engine, scoring, cache and fallback
- dataset: Synthetic data and CSV import/export
- evaluation: Accuracy metrics against labelled data
"""

# Services are imported explicitly when needed to avoid circular imports
# Example: from app.services.detection import get_threat_detector

__all__ = [
    'nlp',
    'classifier',
    'detection',
    'dataset',
    'evaluation',
]
