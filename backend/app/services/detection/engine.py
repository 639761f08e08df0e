"""
ThreatLens Detection Engine

Main prediction engine: runs text processing, the sentiment classifier,
rule-based enhancement, caching and the rule-only fallback.
"""

import asyncio
import logging
import time
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from app.models.prediction import (
    ExtractedEntities,
    ModelStatus,
    Prediction,
    PredictionSource,
    RiskLevel,
    ThreatLabel,
)
from app.services.classifier import BaseClassifierProvider, HuggingFaceClassifier
from app.services.nlp import calculate_risk_indicators, process_text
from app.utils.constants import (
    BATCH_YIELD_INTERVAL,
    PREDICTION_CACHE_MAX_SIZE,
    SAFE_DEFAULT_CONFIDENCE,
    SAFE_DEFAULT_EXPLANATION,
    SAFE_DEFAULT_RISK,
    TOP_FEATURES_COUNT,
)
from app.utils.exceptions import ClassifierError, ClassifierLoadError

from .cache import PredictionCache
from .fallback import FallbackPredictor
from .scorer import RiskScorer

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)


def _elapsed_ms(started_at: float) -> float:
    return (time.perf_counter() - started_at) * 1000


def safe_default_prediction() -> Prediction:
    """Benign placeholder used when a batch item cannot be predicted."""
    return Prediction(
        label=ThreatLabel.BENIGN,
        confidence=SAFE_DEFAULT_CONFIDENCE,
        risk_score=SAFE_DEFAULT_RISK,
        risk_level=RiskLevel.LOW,
        entities=ExtractedEntities(),
        explanation=SAFE_DEFAULT_EXPLANATION,
        features=[],
        processing_time=0.0,
        source=PredictionSource.ERROR,
    )


class ThreatDetector:
    """
    Threat prediction service.

    Owns its classifier handle and prediction cache. Classifier loading is
    lazy and single-flight: concurrent callers await the same load. Concurrent
    predictions for the same cache key share one computation.
    """

    def __init__(
        self,
        classifier: BaseClassifierProvider,
        cache_max_size: int = PREDICTION_CACHE_MAX_SIZE,
        batch_yield_interval: int = BATCH_YIELD_INTERVAL,
    ):
        """
        Initialize detector.

        Args:
            classifier: Sentiment classifier provider
            cache_max_size: Maximum cached predictions
            batch_yield_interval: Yield to the event loop every N batch items
        """
        self.classifier = classifier
        self.cache = PredictionCache(max_size=cache_max_size)
        self.batch_yield_interval = max(1, batch_yield_interval)
        self.scorer = RiskScorer()
        self.fallback = FallbackPredictor()

        self._init_task: Optional[asyncio.Future] = None
        self._in_flight: Dict[str, asyncio.Future] = {}

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_ready(self) -> bool:
        return self.classifier.is_loaded

    @property
    def is_loading(self) -> bool:
        return self._init_task is not None and not self._init_task.done()

    def get_status(self) -> ModelStatus:
        """Get classifier status without suspending."""
        return ModelStatus(is_ready=self.is_ready, is_loading=self.is_loading)

    async def initialize(self) -> None:
        """
        Load the classifier once.

        Concurrent calls await the same load. A failed load is not
        remembered, so a later call retries.

        Raises:
            ClassifierLoadError: If the classifier cannot be loaded
        """
        if self.is_ready:
            return

        if self._init_task is None or self._init_task.done():
            self._init_task = asyncio.ensure_future(self._load_classifier())

        await asyncio.shield(self._init_task)

    async def _load_classifier(self) -> None:
        logger.info(f"Loading threat detection model ({self.classifier.model_id})...")
        started_at = time.perf_counter()
        try:
            await self.classifier.load_async()
        except ClassifierLoadError:
            logger.error(f"Failed to load classifier {self.classifier.model_id}")
            raise
        except Exception as e:
            logger.error(f"Failed to load classifier {self.classifier.model_id}: {e}")
            raise ClassifierLoadError(f"Failed to load classifier: {e}") from e

        logger.info(f"Threat detection model loaded in {_elapsed_ms(started_at):.0f}ms")

    async def _ensure_initialized(self) -> None:
        try:
            await self.initialize()
        except ClassifierError as e:
            logger.warning(f"Classifier unavailable, predictions will use fallback: {e}")

    # =========================================================================
    # Prediction
    # =========================================================================

    async def predict(self, text: Optional[str]) -> Prediction:
        """
        Predict threat level for a message.

        Args:
            text: Raw message text

        Returns:
            Prediction; classifier failures degrade to the rule-based fallback
        """
        started_at = time.perf_counter()
        text = text or ''

        key = self.cache.make_key(text)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for '{key[:40]}'")
            return cached.model_copy(update={
                "processing_time": _elapsed_ms(started_at),
                "source": PredictionSource.CACHE,
            })

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._predict_uncached(text, key))
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.debug(f"Joining in-flight prediction for '{key[:40]}'")

        prediction = await asyncio.shield(task)
        return prediction.model_copy(update={"processing_time": _elapsed_ms(started_at)})

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _predict_uncached(self, text: str, key: str) -> Prediction:
        started_at = time.perf_counter()

        await self._ensure_initialized()

        processed = process_text(text)
        indicators = calculate_risk_indicators(text)

        outcome = await self.classifier.predict(text)
        if not outcome.ok:
            logger.warning(f"Prediction error, using rule-based fallback: {outcome.error}")
            return self.fallback.predict(processed, started_at)

        enhanced = self.scorer.enhance(text, outcome.result.threat_probability, indicators)

        prediction = Prediction(
            label=self.scorer.get_label(enhanced.risk_score),
            confidence=enhanced.confidence,
            risk_score=enhanced.risk_score,
            risk_level=self.scorer.get_risk_level(enhanced.risk_score),
            entities=processed.entities,
            explanation=enhanced.explanation,
            features=processed.features[:TOP_FEATURES_COUNT],
            processing_time=_elapsed_ms(started_at),
            source=PredictionSource.MODEL,
        )

        self.cache.set(key, prediction)
        return prediction

    async def batch_predict(self, texts: Optional[Iterable[Optional[str]]]) -> List[Prediction]:
        """
        Predict a batch sequentially, in input order.

        Never raises: a failing item becomes a safe benign default.

        Args:
            texts: Messages to classify

        Returns:
            One prediction per input item
        """
        results: List[Prediction] = []

        for index, text in enumerate(texts or []):
            if index and index % self.batch_yield_interval == 0:
                await asyncio.sleep(0)

            try:
                results.append(await self.predict(text))
            except Exception as e:
                logger.error(f"Error predicting message {index}: {e}")
                results.append(safe_default_prediction())

        return results


# Singleton instance
_threat_detector: Optional[ThreatDetector] = None


def build_threat_detector(settings: "Settings") -> ThreatDetector:
    """Build a detector with the Hugging Face classifier from settings."""
    classifier = HuggingFaceClassifier(
        model_id=settings.classifier_model_id,
        task=settings.classifier_task,
        device=settings.classifier_device,
        timeout=settings.classifier_timeout_seconds,
    )
    return ThreatDetector(
        classifier=classifier,
        cache_max_size=settings.cache_max_size,
        batch_yield_interval=settings.batch_yield_interval,
    )


def init_threat_detector(
    settings: Optional["Settings"] = None,
    classifier: Optional[BaseClassifierProvider] = None,
) -> ThreatDetector:
    """
    Initialize the threat detector singleton.

    Args:
        settings: Settings to build from (defaults to get_settings())
        classifier: Optional classifier overriding the configured one

    Returns:
        The new ThreatDetector
    """
    global _threat_detector
    from app.config import get_settings

    settings = settings or get_settings()
    if classifier is None:
        _threat_detector = build_threat_detector(settings)
    else:
        _threat_detector = ThreatDetector(
            classifier=classifier,
            cache_max_size=settings.cache_max_size,
            batch_yield_interval=settings.batch_yield_interval,
        )
    return _threat_detector


def get_threat_detector() -> ThreatDetector:
    """Get the threat detector singleton."""
    global _threat_detector
    if _threat_detector is None:
        init_threat_detector()
    return _threat_detector


def reset_threat_detector() -> None:
    """Drop the singleton so the next access rebuilds it."""
    global _threat_detector
    _threat_detector = None
