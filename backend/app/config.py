"""
ThreatLens Application Configuration

Configuration management using pydantic-settings.
All configuration values are loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from functools import lru_cache
import os

from app.utils.constants import (
    APP_NAME,
    APP_VERSION,
    BATCH_YIELD_INTERVAL,
    CLASSIFIER_TIMEOUT,
    DEFAULT_CLASSIFIER_MODEL,
    DEFAULT_CLASSIFIER_TASK,
    DEFAULT_CORS_ORIGINS,
    MAX_BATCH_SIZE,
    MAX_TEXT_LENGTH,
    PREDICTION_CACHE_MAX_SIZE,
    SYNTHETIC_DATASET_SIZE,
    SYNTHETIC_THREAT_RATIO,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values can be set via:
    1. Environment variables (e.g. CLASSIFIER_MODEL_ID, CACHE_MAX_SIZE)
    2. .env file (local development)
    3. Default values defined here
    """

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = APP_NAME
    app_version: str = APP_VERSION
    debug: bool = False
    log_level: str = "INFO"

    # =========================================================================
    # Server
    # =========================================================================
    host: str = "0.0.0.0"
    port: int = Field(default=8000, description="Port - PORT env var overrides")
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # =========================================================================
    # Classifier
    # =========================================================================
    classifier_model_id: str = Field(
        default=DEFAULT_CLASSIFIER_MODEL,
        description="Hugging Face model id for the sentiment classifier",
    )
    classifier_task: str = DEFAULT_CLASSIFIER_TASK
    classifier_device: Optional[str] = Field(
        default=None,
        description="Preferred device (cuda, mps, cpu); falls back to CPU",
    )
    classifier_timeout_seconds: float = Field(default=CLASSIFIER_TIMEOUT, gt=0)
    warm_up_on_startup: bool = Field(
        default=True,
        description="Start loading the classifier when the API starts",
    )

    # =========================================================================
    # Detection
    # =========================================================================
    cache_max_size: int = Field(default=PREDICTION_CACHE_MAX_SIZE, ge=1)
    batch_yield_interval: int = Field(default=BATCH_YIELD_INTERVAL, ge=1)

    # =========================================================================
    # Limits
    # =========================================================================
    max_text_length: int = MAX_TEXT_LENGTH
    max_batch_size: int = MAX_BATCH_SIZE

    # =========================================================================
    # Synthetic dataset
    # =========================================================================
    synthetic_dataset_size: int = SYNTHETIC_DATASET_SIZE
    synthetic_threat_ratio: float = Field(default=SYNTHETIC_THREAT_RATIO, ge=0.0, le=1.0)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Hosting platforms set PORT
        platform_port = os.environ.get("PORT")
        if platform_port:
            self.port = int(platform_port)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are cached to avoid re-reading environment on every access.
    Use get_settings.cache_clear() to reload settings.
    """
    return Settings()
