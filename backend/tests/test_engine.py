"""
ThreatLens - Detection Engine Tests

Tests for the prediction pipeline, caching, classifier lifecycle,
fallback and batch prediction.
"""

import asyncio

import pytest

from app.config import Settings
from app.models.prediction import PredictionSource, RiskLevel, ThreatLabel
from app.services.dataset import generate_synthetic_dataset
from app.services.detection import (
    ThreatDetector,
    get_threat_detector,
    init_threat_detector,
    reset_threat_detector,
)
from app.utils.constants import SAFE_DEFAULT_EXPLANATION
from app.utils.exceptions import ClassifierLoadError

from conftest import StubClassifier, make_detector

DDOS_EXAMPLE = "Plan DDoS on examplebank.com this Friday at 3 AM UTC"


class TestPredict:
    """Tests for single-message prediction."""

    def test_threat_message(self, detector):
        """Negative sentiment plus rules yields a high-risk threat."""
        prediction = asyncio.run(detector.predict(DDOS_EXAMPLE))

        assert prediction.label == ThreatLabel.THREAT
        assert prediction.risk_score == 1.0
        assert prediction.risk_level == RiskLevel.HIGH
        assert prediction.confidence == pytest.approx(0.95)
        assert prediction.source == PredictionSource.MODEL
        assert prediction.explanation == (
            "Model prediction enhanced by rules: "
            "High-risk keywords detected (+20%), "
            "DDoS attack pattern detected (+30%)"
        )
        assert prediction.entities.targets == ["examplebank.com"]
        assert prediction.entities.dates == ["Friday"]
        assert prediction.features[:3] == ["plan", "ddos", "examplebank.com"]
        assert len(prediction.features) <= 10

    def test_positive_sentiment_is_inverted(self):
        """A confident positive label maps to a low threat probability."""
        detector = make_detector(label="POSITIVE", score=0.99)
        prediction = asyncio.run(
            detector.predict("Great conference talk on network security best practices")
        )

        assert prediction.risk_score == pytest.approx(0.01)
        assert prediction.label == ThreatLabel.BENIGN
        assert prediction.risk_level == RiskLevel.LOW
        assert prediction.explanation == "Base model prediction (1.0% threat probability)"

    def test_urgency_boost_on_benign(self):
        """Urgency words boost an otherwise benign message."""
        detector = make_detector(label="POSITIVE", score=0.99)
        prediction = asyncio.run(
            detector.predict("Reminder: team meeting tomorrow, bring slides")
        )

        assert prediction.risk_score == pytest.approx(0.16)
        assert prediction.label == ThreatLabel.BENIGN
        assert prediction.explanation == (
            "Model prediction enhanced by rules: Urgency indicators found (+15%)"
        )

    def test_none_and_empty_text(self, detector):
        """None is treated as an empty message."""
        async def run():
            empty = await detector.predict("")
            missing = await detector.predict(None)
            return empty, missing

        empty, missing = asyncio.run(run())

        assert empty.features == []
        assert empty.entities.urls == []
        assert missing.risk_score == empty.risk_score
        assert missing.label == empty.label

    def test_outputs_bounded(self, detector):
        """Scores stay in range and labels agree with scores."""
        messages = generate_synthetic_dataset(count=50, seed=7)

        async def run():
            return [await detector.predict(m.text) for m in messages]

        for prediction in asyncio.run(run()):
            assert 0.0 <= prediction.risk_score <= 1.0
            assert 0.0 <= prediction.confidence <= 1.0
            assert prediction.processing_time >= 0.0
            assert (prediction.label == ThreatLabel.THREAT) == (prediction.risk_score > 0.5)


class TestCaching:
    """Tests for prediction caching."""

    def test_repeat_is_cache_hit(self, detector, stub_classifier):
        """Same text twice calls the classifier once with identical results."""
        async def run():
            first = await detector.predict(DDOS_EXAMPLE)
            second = await detector.predict(DDOS_EXAMPLE)
            return first, second

        first, second = asyncio.run(run())

        assert stub_classifier.classify_calls == 1
        assert second.source == PredictionSource.CACHE
        assert second.model_dump(exclude={"processing_time", "source"}) == \
            first.model_dump(exclude={"processing_time", "source"})

    def test_key_ignores_case_and_padding(self, detector, stub_classifier):
        """Case and surrounding whitespace map to the same entry."""
        async def run():
            await detector.predict(DDOS_EXAMPLE)
            return await detector.predict(f"  {DDOS_EXAMPLE.upper()}  ")

        prediction = asyncio.run(run())

        assert stub_classifier.classify_calls == 1
        assert prediction.source == PredictionSource.CACHE

    def test_concurrent_identical_requests_share_work(self):
        """Concurrent predictions for one text run the classifier once."""
        classifier = StubClassifier(delay=0.05)
        detector = make_detector(classifier)

        async def run():
            return await asyncio.gather(*[detector.predict(DDOS_EXAMPLE) for _ in range(5)])

        predictions = asyncio.run(run())

        assert classifier.classify_calls == 1
        assert classifier.load_calls == 1
        assert len({p.risk_score for p in predictions}) == 1

    def test_eviction(self):
        """The cache never exceeds its bound and drops the oldest entry."""
        detector = make_detector(cache_max_size=3)

        async def run():
            for text in ["one message", "two message", "three message", "four message"]:
                await detector.predict(text)

        asyncio.run(run())

        assert len(detector.cache) == 3
        assert "one message" not in detector.cache
        assert "four message" in detector.cache

    def test_default_eviction_bound(self):
        """A default detector caches at most 100 predictions."""
        detector = ThreatDetector(classifier=StubClassifier())

        async def run():
            for i in range(101):
                await detector.predict(f"distinct message number {i}")

        asyncio.run(run())

        assert len(detector.cache) == 100
        assert "distinct message number 0" not in detector.cache
        assert "distinct message number 100" in detector.cache

    def test_cached_processing_time_is_zero(self, detector):
        """The stored copy carries no processing time."""
        asyncio.run(detector.predict(DDOS_EXAMPLE))

        stored = detector.cache.get(detector.cache.make_key(DDOS_EXAMPLE))
        assert stored.processing_time == 0.0


class TestInitialization:
    """Tests for classifier lifecycle."""

    def test_status_before_and_after(self, detector):
        """Test status flags through initialization."""
        assert detector.get_status().is_ready is False
        assert detector.get_status().is_loading is False

        asyncio.run(detector.initialize())

        status = detector.get_status()
        assert status.is_ready is True
        assert status.is_loading is False

    def test_single_flight(self):
        """Concurrent initialize calls load the model once."""
        classifier = StubClassifier(load_delay=0.05)
        detector = make_detector(classifier)

        async def run():
            await asyncio.gather(*[detector.initialize() for _ in range(3)])

        asyncio.run(run())

        assert classifier.load_calls == 1
        assert detector.is_ready

    def test_already_ready_is_noop(self, detector, stub_classifier):
        """A second initialize after success does nothing."""
        async def run():
            await detector.initialize()
            await detector.initialize()

        asyncio.run(run())
        assert stub_classifier.load_calls == 1

    def test_retry_after_failure(self):
        """A failed load is retried on the next call."""
        classifier = StubClassifier(fail_load=True)
        detector = make_detector(classifier)

        with pytest.raises(ClassifierLoadError):
            asyncio.run(detector.initialize())

        classifier.fail_load = False
        asyncio.run(detector.initialize())

        assert classifier.load_calls == 2
        assert detector.is_ready


class TestFallback:
    """Tests for degraded prediction paths."""

    def test_load_failure_uses_fallback(self, failing_detector):
        """An unloadable classifier degrades to the rule-based fallback."""
        prediction = asyncio.run(failing_detector.predict(DDOS_EXAMPLE))

        assert prediction.source == PredictionSource.FALLBACK
        assert prediction.risk_score == pytest.approx(0.3)
        assert prediction.label == ThreatLabel.BENIGN
        assert prediction.risk_level == RiskLevel.LOW
        assert prediction.explanation.startswith("Using rule-based fallback")

    def test_fallback_not_cached(self, failing_detector):
        """Fallback results are recomputed so a recovered model is used."""
        asyncio.run(failing_detector.predict(DDOS_EXAMPLE))
        assert len(failing_detector.cache) == 0

    def test_inference_error_uses_fallback(self):
        """An exception during inference degrades to the fallback."""
        detector = make_detector(fail_classify=True)
        prediction = asyncio.run(detector.predict(DDOS_EXAMPLE))

        assert prediction.source == PredictionSource.FALLBACK

    def test_timeout_uses_fallback(self):
        """A hung classifier is abandoned after its timeout."""
        detector = make_detector(delay=0.5, timeout=0.05)
        prediction = asyncio.run(detector.predict(DDOS_EXAMPLE))

        assert prediction.source == PredictionSource.FALLBACK

    @pytest.mark.parametrize("raw_output", [
        [],
        {"label": "NEGATIVE", "score": 1.7},
        [{"label": "", "score": 0.5}],
        "NEGATIVE",
    ])
    def test_malformed_output_uses_fallback(self, raw_output):
        """Unusable classifier output is treated as a failure."""
        detector = make_detector(raw_output=raw_output)
        prediction = asyncio.run(detector.predict(DDOS_EXAMPLE))

        assert prediction.source == PredictionSource.FALLBACK


class TestBatchPredict:
    """Tests for sequential batch prediction."""

    def test_order_and_length(self, detector):
        """One prediction per input, in order."""
        texts = [DDOS_EXAMPLE, "Team lunch next Friday", None, ""]
        predictions = asyncio.run(detector.batch_predict(texts))

        assert len(predictions) == 4
        assert predictions[0].entities.targets == ["examplebank.com"]

    def test_empty_and_none(self, detector):
        """Empty or missing input gives an empty list."""
        assert asyncio.run(detector.batch_predict([])) == []
        assert asyncio.run(detector.batch_predict(None)) == []

    def test_failing_item_gets_safe_default(self, detector):
        """A failing item becomes a benign default and the batch continues."""
        original_predict = detector.predict

        async def flaky_predict(text):
            if text == "boom":
                raise RuntimeError("unexpected")
            return await original_predict(text)

        detector.predict = flaky_predict
        predictions = asyncio.run(detector.batch_predict(["boom", DDOS_EXAMPLE]))

        assert predictions[0].label == ThreatLabel.BENIGN
        assert predictions[0].risk_score == pytest.approx(0.1)
        assert predictions[0].explanation == SAFE_DEFAULT_EXPLANATION
        assert predictions[0].source == PredictionSource.ERROR
        assert predictions[1].label == ThreatLabel.THREAT

    def test_large_batch(self, stub_classifier):
        """Batches longer than the yield interval complete."""
        detector = ThreatDetector(classifier=stub_classifier, batch_yield_interval=3)
        texts = [f"message number {i}" for i in range(25)]

        predictions = asyncio.run(detector.batch_predict(texts))

        assert len(predictions) == 25
        assert stub_classifier.classify_calls == 25


class TestDetectorSingleton:
    """Tests for the module-level detector singleton."""

    def teardown_method(self):
        reset_threat_detector()

    def test_init_and_get(self):
        """Test init returns the instance get returns."""
        classifier = StubClassifier()
        detector = init_threat_detector(Settings(cache_max_size=7), classifier=classifier)

        assert get_threat_detector() is detector
        assert detector.classifier is classifier
        assert detector.cache.max_size == 7

    def test_default_uses_huggingface(self):
        """Without an override the configured provider is built lazily."""
        detector = init_threat_detector(Settings())

        assert detector.classifier.provider_name == "huggingface"
        assert detector.is_ready is False
