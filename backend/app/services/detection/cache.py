"""
ThreatLens Prediction Cache

Bounded FIFO cache of predictions keyed by lowercased, trimmed text.
"""

import logging
import threading
from collections import OrderedDict
from typing import Optional

from app.models.prediction import Prediction
from app.utils.constants import PREDICTION_CACHE_MAX_SIZE

logger = logging.getLogger(__name__)


class PredictionCache:
    """
    Insertion-ordered prediction cache.

    Once size exceeds max_size the oldest-inserted key is dropped; reads
    do not refresh position. Stored predictions carry no processing time.
    """

    def __init__(self, max_size: int = PREDICTION_CACHE_MAX_SIZE):
        self.max_size = max_size
        self._entries: "OrderedDict[str, Prediction]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def make_key(text: str) -> str:
        """Cache key: lowercase and trim only (punctuation is kept)."""
        return text.lower().strip()

    def get(self, key: str) -> Optional[Prediction]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, prediction: Prediction) -> None:
        """Store a prediction, evicting the oldest entries above max_size."""
        stored = prediction.model_copy(update={"processing_time": 0.0})
        with self._lock:
            self._entries[key] = stored
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cached prediction for '{evicted[:40]}'")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self):
        with self._lock:
            return list(self._entries.keys())

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
