"""
ThreatLens Dataset API Routes

Sample and synthetic datasets, and evaluation against labelled data.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.api.dependencies import (
    check_batch_size,
    check_text_length,
    get_detector,
    get_settings,
)
from app.models.dataset import BatchResult, EvaluationMetrics, ThreatMessage
from app.services.dataset import (
    SAMPLE_MESSAGES,
    export_dataset_to_csv,
    generate_synthetic_dataset,
)
from app.services.evaluation import calculate_metrics, evaluate_messages

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dataset", tags=["dataset"])

evaluate_router = APIRouter(prefix="/evaluate", tags=["evaluation"])


class EvaluateRequest(BaseModel):
    """
    Request model for evaluation.

    Evaluates the supplied messages, or a synthetic dataset when none are given.
    """
    messages: Optional[List[ThreatMessage]] = Field(None, description="Labelled messages")
    count: Optional[int] = Field(None, ge=0, description="Synthetic dataset size")
    threat_ratio: Optional[float] = Field(None, ge=0.0, le=1.0)
    seed: Optional[int] = Field(None, description="Seed for the synthetic dataset")
    include_results: bool = Field(False, description="Return per-message results")


class EvaluateResponse(BaseModel):
    """Evaluation metrics, with per-message results when requested."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    metrics: EvaluationMetrics
    results: Optional[List[BatchResult]] = None


def _synthetic(settings, count: Optional[int], threat_ratio: Optional[float], seed: Optional[int]):
    count = settings.synthetic_dataset_size if count is None else count
    threat_ratio = settings.synthetic_threat_ratio if threat_ratio is None else threat_ratio

    check_batch_size(count, settings)
    return generate_synthetic_dataset(count=count, threat_ratio=threat_ratio, seed=seed)


@router.get("/samples", response_model=List[ThreatMessage])
async def get_samples():
    """
    Get the canonical sample messages.

    Returns:
        Six labelled example messages
    """
    return SAMPLE_MESSAGES


@router.get("/synthetic", response_model=List[ThreatMessage])
async def get_synthetic_dataset(
    count: Optional[int] = Query(None, ge=0, description="Number of messages"),
    threat_ratio: Optional[float] = Query(None, ge=0.0, le=1.0, description="Fraction of threats"),
    seed: Optional[int] = Query(None, description="Seed for reproducible output"),
    settings = Depends(get_settings),
):
    """
    Generate a synthetic labelled dataset.

    Returns:
        Shuffled list of labelled messages
    """
    return _synthetic(settings, count, threat_ratio, seed)


@router.get("/synthetic.csv")
async def get_synthetic_dataset_csv(
    count: Optional[int] = Query(None, ge=0, description="Number of messages"),
    threat_ratio: Optional[float] = Query(None, ge=0.0, le=1.0, description="Fraction of threats"),
    seed: Optional[int] = Query(None, description="Seed for reproducible output"),
    settings = Depends(get_settings),
):
    """
    Generate a synthetic labelled dataset as CSV.

    Returns:
        CSV file download
    """
    dataset = _synthetic(settings, count, threat_ratio, seed)

    return Response(
        content=export_dataset_to_csv(dataset),
        media_type="text/csv",
        headers={
            "Content-Disposition": "attachment; filename=synthetic_threat_dataset.csv"
        }
    )


@evaluate_router.post("", response_model=EvaluateResponse)
async def evaluate(
    request: EvaluateRequest,
    settings = Depends(get_settings),
    detector = Depends(get_detector),
):
    """
    Run the detector over a labelled dataset and score it.

    Returns:
        Accuracy, precision, recall, F1 and confusion matrix
    """
    if request.messages is not None:
        check_batch_size(len(request.messages), settings)
        for message in request.messages:
            check_text_length(message.text, settings)
        messages = request.messages
    else:
        messages = _synthetic(settings, request.count, request.threat_ratio, request.seed)

    results = await evaluate_messages(detector, messages)
    metrics = calculate_metrics(results)

    return EvaluateResponse(
        metrics=metrics,
        results=results if request.include_results else None,
    )
