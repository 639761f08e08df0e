"""
ThreatLens Dataset CSV

Export labelled datasets to CSV and parse uploaded batch CSV files.
"""

import csv
import io
import logging
from typing import Iterable, List, Optional

from app.models.dataset import BatchResult, BatchRow, ThreatMessage
from app.models.prediction import ThreatLabel
from app.utils.constants import BATCH_CSV_TEXT_COLUMNS, DATASET_CSV_FIELDS
from app.utils.exceptions import CSVFormatError

logger = logging.getLogger(__name__)


def export_dataset_to_csv(messages: Iterable[ThreatMessage]) -> str:
    """
    Export labelled messages to CSV.

    Args:
        messages: Messages to export

    Returns:
        CSV string with id, text, label, type, timestamp columns
    """
    output = io.StringIO()

    writer = csv.DictWriter(output, fieldnames=DATASET_CSV_FIELDS)
    writer.writeheader()

    for message in messages:
        writer.writerow({
            'id': message.id,
            'text': message.text,
            'label': message.label.value,
            'type': message.type.value,
            'timestamp': message.timestamp.isoformat(),
        })

    return output.getvalue()


def export_batch_results_to_csv(results: Iterable[BatchResult]) -> str:
    """
    Export batch predictions to CSV.

    Args:
        results: Batch results

    Returns:
        CSV string
    """
    output = io.StringIO()

    fieldnames = [
        'id',
        'text',
        'label',
        'confidence',
        'risk_score',
        'risk_level',
        'explanation',
        'original_label',
        'original_type',
    ]

    writer = csv.DictWriter(output, fieldnames=fieldnames)
    writer.writeheader()

    for result in results:
        prediction = result.prediction
        writer.writerow({
            'id': result.id,
            'text': result.text,
            'label': prediction.label.value,
            'confidence': f"{prediction.confidence:.4f}",
            'risk_score': f"{prediction.risk_score:.4f}",
            'risk_level': prediction.risk_level.value,
            'explanation': prediction.explanation,
            'original_label': result.original_label.value if result.original_label else '',
            'original_type': result.original_type or '',
        })

    return output.getvalue()


def _parse_label(value: Optional[str]) -> Optional[ThreatLabel]:
    value = (value or '').strip().lower()
    if not value:
        return None
    try:
        return ThreatLabel(value)
    except ValueError:
        logger.debug(f"Ignoring unknown label '{value}'")
        return None


def parse_batch_csv(content: str) -> List[BatchRow]:
    """
    Parse an uploaded batch CSV.

    The header must contain a 'text' or 'message' column. Optional 'id',
    'label' and 'type' columns are read when present. Rows with empty text
    are skipped; missing ids become message_<row number>.

    Args:
        content: CSV file content

    Returns:
        Parsed rows

    Raises:
        CSVFormatError: If the header is missing or has no text column
    """
    reader = csv.DictReader(io.StringIO(content.lstrip('\ufeff')))

    if not reader.fieldnames:
        raise CSVFormatError("CSV file is empty or has no header row")

    columns = {name.strip().lower(): name for name in reader.fieldnames if name}
    text_column = next(
        (columns[name] for name in BATCH_CSV_TEXT_COLUMNS if name in columns),
        None,
    )
    if text_column is None:
        raise CSVFormatError("CSV must contain a 'text' or 'message' column")

    id_column = columns.get('id')
    label_column = columns.get('label')
    type_column = columns.get('type')

    rows: List[BatchRow] = []
    try:
        for index, record in enumerate(reader):
            text = (record.get(text_column) or '').strip()
            if not text:
                continue

            row_id = (record.get(id_column) or '').strip() if id_column else ''
            rows.append(BatchRow(
                id=row_id or f"message_{index + 1}",
                text=text,
                label=_parse_label(record.get(label_column)) if label_column else None,
                type=((record.get(type_column) or '').strip() or None) if type_column else None,
            ))
    except csv.Error as e:
        raise CSVFormatError(f"Malformed CSV: {e}") from e

    logger.info(f"Parsed {len(rows)} messages from batch CSV")
    return rows
