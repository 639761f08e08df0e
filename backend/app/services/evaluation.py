"""
ThreatLens Evaluation

Scores predictions against ground-truth labels.
"""

import logging
from typing import Iterable, List, TYPE_CHECKING

from sklearn.metrics import accuracy_score, confusion_matrix, precision_recall_fscore_support

from app.models.dataset import BatchResult, EvaluationMetrics, ThreatMessage
from app.models.prediction import ThreatLabel

if TYPE_CHECKING:
    from app.services.detection import ThreatDetector

logger = logging.getLogger(__name__)

# Confusion matrix row/column order: [[tn, fp], [fn, tp]]
METRIC_LABELS = [ThreatLabel.BENIGN.value, ThreatLabel.THREAT.value]


def calculate_metrics(results: Iterable[BatchResult]) -> EvaluationMetrics:
    """
    Calculate accuracy metrics over results that carry a ground-truth label.

    Threat is the positive class. Results without an original label are
    ignored.

    Args:
        results: Batch results

    Returns:
        EvaluationMetrics (all zero when nothing has ground truth)
    """
    y_true = []
    y_pred = []
    for result in results:
        if result.original_label is None:
            continue
        y_true.append(ThreatLabel(result.original_label).value)
        y_pred.append(ThreatLabel(result.prediction.label).value)

    if not y_true:
        return EvaluationMetrics()

    precision, recall, f1_score, _ = precision_recall_fscore_support(
        y_true,
        y_pred,
        labels=METRIC_LABELS,
        pos_label=ThreatLabel.THREAT.value,
        average="binary",
        zero_division=0,
    )
    matrix = confusion_matrix(y_true, y_pred, labels=METRIC_LABELS)

    return EvaluationMetrics(
        total=len(y_true),
        correct=int(matrix.trace()),
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision),
        recall=float(recall),
        f1_score=float(f1_score),
        confusion_matrix=matrix.tolist(),
    )


async def evaluate_messages(
    detector: "ThreatDetector",
    messages: List[ThreatMessage],
) -> List[BatchResult]:
    """
    Run batch prediction over labelled messages.

    Args:
        detector: Threat detector
        messages: Labelled messages

    Returns:
        One BatchResult per message, in input order
    """
    predictions = await detector.batch_predict([m.text for m in messages])

    results = [
        BatchResult(
            id=message.id,
            text=message.text,
            prediction=prediction,
            original_label=message.label,
            original_type=message.type.value or None,
        )
        for message, prediction in zip(messages, predictions)
    ]

    metrics = calculate_metrics(results)
    logger.info(
        f"Evaluated {metrics.total} messages: accuracy {metrics.accuracy:.1%}, "
        f"f1 {metrics.f1_score:.3f}"
    )
    return results
