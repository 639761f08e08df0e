"""
ThreatLens Classifier Provider Base Class

Abstract base class for sentiment classifiers, plus the validated
result types returned across the classifier boundary.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from app.utils.constants import CLASSIFIER_TIMEOUT, NEGATIVE_SENTIMENT_LABELS
from app.utils.exceptions import (
    ClassifierError,
    ClassifierNotReadyError,
    ClassifierOutputError,
    ClassifierTimeoutError,
)

logger = logging.getLogger(__name__)


class ClassifierResult(BaseModel):
    """Top label and score returned by a sentiment classifier."""
    label: str = Field(..., min_length=1, description="Sentiment label, e.g. NEGATIVE")
    score: float = Field(..., ge=0.0, le=1.0, description="Probability of the label")

    @property
    def is_negative(self) -> bool:
        return self.label.strip().lower() in NEGATIVE_SENTIMENT_LABELS

    @property
    def threat_probability(self) -> float:
        """Negative sentiment is read as threat probability."""
        return self.score if self.is_negative else 1.0 - self.score


@dataclass(frozen=True)
class ClassifierOutcome:
    """Success or failure of one classifier invocation."""
    result: Optional[ClassifierResult] = None
    error: Optional[ClassifierError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @classmethod
    def success(cls, result: ClassifierResult) -> "ClassifierOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, error: ClassifierError) -> "ClassifierOutcome":
        return cls(error=error)


def parse_classifier_output(raw: Any) -> ClassifierResult:
    """
    Validate raw classifier output.

    Accepts a non-empty list whose first item carries ``label`` and
    ``score``, or a single such mapping.

    Args:
        raw: Output of the underlying classifier

    Returns:
        ClassifierResult for the top item

    Raises:
        ClassifierOutputError: If the output shape is not recognised
    """
    if isinstance(raw, (list, tuple)):
        if not raw:
            raise ClassifierOutputError("Classifier returned no results")
        raw = raw[0]

    if not isinstance(raw, dict):
        raise ClassifierOutputError(f"Unexpected classifier output type: {type(raw).__name__}")

    try:
        return ClassifierResult(label=raw.get("label"), score=raw.get("score"))
    except PydanticValidationError as e:
        raise ClassifierOutputError(f"Invalid classifier output: {e}") from e


class BaseClassifierProvider(ABC):
    """
    Abstract base class for classifier providers.

    Subclasses implement blocking ``load`` and ``classify``; the async
    wrappers here move that work off the event loop. Inference runs on a
    single dedicated worker, so calls are serialized and a call abandoned
    by its timeout is dropped if it has not started yet.
    """

    provider_name: str = "base"

    def __init__(self, model_id: str, timeout: float = CLASSIFIER_TIMEOUT):
        """
        Initialize provider.

        Args:
            model_id: Model identifier understood by the provider
            timeout: Inference timeout in seconds
        """
        self.model_id = model_id
        self.timeout = timeout
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=f"classifier-{self.provider_name}",
        )

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Whether the model is ready for inference."""
        pass

    @abstractmethod
    def load(self) -> None:
        """
        Load the model. Blocking.

        Raises:
            ClassifierLoadError: If the model cannot be loaded
        """
        pass

    @abstractmethod
    def classify(self, text: str) -> Any:
        """
        Run inference on raw text. Blocking.

        Returns:
            Raw provider output, validated by parse_classifier_output
        """
        pass

    async def load_async(self) -> None:
        """Load the model in a worker thread."""
        await asyncio.to_thread(self.load)

    async def predict(self, text: str) -> ClassifierOutcome:
        """
        Classify text with a timeout, never raising.

        Args:
            text: Raw message text

        Returns:
            ClassifierOutcome holding a result or the failure
        """
        if not self.is_loaded:
            return ClassifierOutcome.failure(
                ClassifierNotReadyError(f"Classifier {self.model_id} is not loaded")
            )

        future = self._executor.submit(self.classify, text)

        try:
            raw = await asyncio.wait_for(asyncio.wrap_future(future), timeout=self.timeout)
            return ClassifierOutcome.success(parse_classifier_output(raw))

        except asyncio.TimeoutError:
            future.cancel()
            return ClassifierOutcome.failure(
                ClassifierTimeoutError(f"Classifier timed out after {self.timeout}s")
            )
        except ClassifierError as e:
            return ClassifierOutcome.failure(e)
        except Exception as e:
            return ClassifierOutcome.failure(ClassifierError(f"Classifier failed: {e}"))
