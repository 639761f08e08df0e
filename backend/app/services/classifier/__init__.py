"""
ThreatLens Classifier Module

External sentiment classifiers used as the base threat signal.
"""

from .base import (
    BaseClassifierProvider,
    ClassifierResult,
    ClassifierOutcome,
    parse_classifier_output,
)

from .huggingface_provider import HuggingFaceClassifier

__all__ = [
    'BaseClassifierProvider',
    'ClassifierResult',
    'ClassifierOutcome',
    'parse_classifier_output',
    'HuggingFaceClassifier',
]
