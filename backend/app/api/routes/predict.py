"""
ThreatLens Prediction API Routes

Single, batch and CSV batch threat prediction endpoints.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.api.dependencies import (
    check_batch_size,
    check_text_length,
    get_detector,
    get_settings,
)
from app.models.dataset import BatchResult, EvaluationMetrics
from app.models.prediction import Prediction
from app.services.dataset import export_batch_results_to_csv, parse_batch_csv
from app.services.evaluation import calculate_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/predict", tags=["prediction"])


# =============================================================================
# Request/Response Models
# =============================================================================

class PredictRequest(BaseModel):
    """Request model for single message prediction."""
    text: str = Field(..., description="Message text to classify")


class BatchPredictRequest(BaseModel):
    """Request model for batch prediction."""
    texts: List[Optional[str]] = Field(..., description="Messages to classify, in order")


class BatchPredictResponse(BaseModel):
    """Batch predictions in input order."""
    predictions: List[Prediction]
    count: int


class BatchCSVResponse(BaseModel):
    """Per-row CSV results with accuracy when labels were supplied."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    results: List[BatchResult]
    count: int
    metrics: Optional[EvaluationMetrics] = None


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=Prediction)
async def predict(
    request: PredictRequest,
    settings = Depends(get_settings),
    detector = Depends(get_detector),
):
    """
    Predict threat level for one message.

    Returns:
        Prediction with label, risk score, entities and explanation
    """
    check_text_length(request.text, settings)
    return await detector.predict(request.text)


@router.post("/batch", response_model=BatchPredictResponse)
async def predict_batch(
    request: BatchPredictRequest,
    settings = Depends(get_settings),
    detector = Depends(get_detector),
):
    """
    Predict a batch of messages sequentially.

    Individual failures become benign defaults; the batch never fails.

    Returns:
        Predictions in input order
    """
    check_batch_size(len(request.texts), settings)
    for text in request.texts:
        if text is not None:
            check_text_length(text, settings)

    predictions = await detector.batch_predict(request.texts)
    logger.info(f"Batch prediction complete: {len(predictions)} messages")

    return BatchPredictResponse(predictions=predictions, count=len(predictions))


@router.post("/batch/csv", response_model=BatchCSVResponse)
async def predict_batch_csv(
    file: UploadFile = File(..., description="CSV with a 'text' or 'message' column"),
    download: bool = Query(False, description="Return results as a CSV file"),
    settings = Depends(get_settings),
    detector = Depends(get_detector),
):
    """
    Predict every row of an uploaded CSV.

    Rows with a 'label' column value (threat/benign) are scored for accuracy.

    Returns:
        Per-row results and metrics, or a CSV download
    """
    try:
        raw = await file.read()
        content = raw.decode('utf-8')
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="CSV file must be UTF-8 encoded")

    rows = parse_batch_csv(content)
    check_batch_size(len(rows), settings)
    for row in rows:
        check_text_length(row.text, settings)

    predictions = await detector.batch_predict([row.text for row in rows])

    results = [
        BatchResult(
            id=row.id,
            text=row.text,
            prediction=prediction,
            original_label=row.label,
            original_type=row.type,
        )
        for row, prediction in zip(rows, predictions)
    ]

    if download:
        return Response(
            content=export_batch_results_to_csv(results),
            media_type="text/csv",
            headers={
                "Content-Disposition": "attachment; filename=threat_analysis_results.csv"
            }
        )

    metrics = None
    if any(result.original_label is not None for result in results):
        metrics = calculate_metrics(results)

    return BatchCSVResponse(results=results, count=len(results), metrics=metrics)
