"""
ThreatLens Hugging Face Classifier Provider

Sentiment classification through a transformers text-classification pipeline.
"""

import logging
from typing import Any, Optional

from app.utils.constants import (
    CLASSIFIER_TIMEOUT,
    DEFAULT_CLASSIFIER_MODEL,
    DEFAULT_CLASSIFIER_TASK,
)
from app.utils.exceptions import ClassifierLoadError, ClassifierNotReadyError

from .base import BaseClassifierProvider

logger = logging.getLogger(__name__)


class HuggingFaceClassifier(BaseClassifierProvider):
    """
    transformers pipeline provider.

    Tries the configured device first and falls back to CPU when the
    accelerator is unavailable.
    """

    provider_name = "huggingface"

    def __init__(
        self,
        model_id: str = DEFAULT_CLASSIFIER_MODEL,
        task: str = DEFAULT_CLASSIFIER_TASK,
        device: Optional[str] = None,
        timeout: float = CLASSIFIER_TIMEOUT,
    ):
        super().__init__(model_id=model_id, timeout=timeout)
        self.task = task
        self.device = device
        self._pipeline = None

    @property
    def is_loaded(self) -> bool:
        return self._pipeline is not None

    def _build_pipeline(self, device: Optional[str]) -> Any:
        try:
            from transformers import pipeline
        except ImportError as exc:
            raise ClassifierLoadError(
                "transformers is required for the huggingface classifier "
                "(pip install 'threatlens[ml]')"
            ) from exc

        kwargs = {"model": self.model_id}
        if device:
            kwargs["device"] = device
        return pipeline(self.task, **kwargs)

    def load(self) -> None:
        if self.is_loaded:
            return

        self.logger.info(f"Loading classifier {self.model_id} (device={self.device or 'default'})")

        try:
            self._pipeline = self._build_pipeline(self.device)
        except ClassifierLoadError:
            raise
        except Exception as e:
            if not self.device or self.device == "cpu":
                raise ClassifierLoadError(f"Failed to load {self.model_id}: {e}") from e

            self.logger.warning(f"Device {self.device} not available, falling back to CPU: {e}")
            try:
                self._pipeline = self._build_pipeline("cpu")
            except Exception as cpu_error:
                raise ClassifierLoadError(
                    f"Failed to load {self.model_id} on CPU: {cpu_error}"
                ) from cpu_error

        self.logger.info(f"Classifier {self.model_id} loaded")

    def classify(self, text: str) -> Any:
        if self._pipeline is None:
            raise ClassifierNotReadyError(f"Classifier {self.model_id} is not loaded")

        return self._pipeline(text, truncation=True)
