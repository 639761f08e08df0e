"""
ThreatLens Test Configuration

Pytest fixtures and configuration.
"""

import os

# Never download a model from the API lifespan during tests
os.environ.setdefault("WARM_UP_ON_STARTUP", "false")

import threading
import time
from typing import Any, Optional

import pytest

from app.services.classifier import BaseClassifierProvider
from app.services.detection import ThreatDetector
from app.utils.exceptions import ClassifierLoadError


class StubClassifier(BaseClassifierProvider):
    """
    In-process classifier standing in for the Hugging Face pipeline.

    Returns a fixed label/score, or raw output when given, and counts calls.
    """

    provider_name = "stub"

    def __init__(
        self,
        label: str = "NEGATIVE",
        score: float = 0.9,
        raw_output: Any = None,
        fail_load: bool = False,
        fail_classify: bool = False,
        delay: float = 0.0,
        load_delay: float = 0.0,
        timeout: float = 5.0,
    ):
        super().__init__(model_id="stub-sentiment", timeout=timeout)
        self.label = label
        self.score = score
        self.raw_output = raw_output
        self.fail_load = fail_load
        self.fail_classify = fail_classify
        self.delay = delay
        self.load_delay = load_delay
        self.load_calls = 0
        self.classify_calls = 0
        self._loaded = False
        self._counter_lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        with self._counter_lock:
            self.load_calls += 1
        if self.load_delay:
            time.sleep(self.load_delay)
        if self.fail_load:
            raise ClassifierLoadError("stub load failure")
        self._loaded = True

    def classify(self, text: str) -> Any:
        with self._counter_lock:
            self.classify_calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.fail_classify:
            raise RuntimeError("stub inference failure")
        if self.raw_output is not None:
            return self.raw_output
        return [{"label": self.label, "score": self.score}]


def make_detector(
    classifier: Optional[StubClassifier] = None,
    cache_max_size: int = 100,
    **classifier_kwargs,
) -> ThreatDetector:
    """Create a detector around a stub classifier."""
    classifier = classifier or StubClassifier(**classifier_kwargs)
    return ThreatDetector(classifier=classifier, cache_max_size=cache_max_size)


@pytest.fixture
def stub_classifier():
    """Negative-sentiment stub with score 0.9."""
    return StubClassifier()


@pytest.fixture
def detector(stub_classifier):
    """Detector backed by the default stub classifier."""
    return ThreatDetector(classifier=stub_classifier)


@pytest.fixture
def failing_detector():
    """Detector whose classifier cannot load."""
    return make_detector(fail_load=True)
