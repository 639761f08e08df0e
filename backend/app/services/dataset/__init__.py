"""
ThreatLens Dataset Module

Synthetic labelled data and CSV import/export:
- Seeded synthetic dataset generation
- Canonical sample messages
- Dataset and batch result CSV export
- Batch CSV parsing
"""

from .synthetic import (
    THREAT_TEMPLATES,
    BENIGN_TEMPLATES,
    SAMPLE_MESSAGES,
    add_variation,
    generate_synthetic_dataset,
)

from .csv_io import (
    export_dataset_to_csv,
    export_batch_results_to_csv,
    parse_batch_csv,
)

__all__ = [
    # Synthetic
    'THREAT_TEMPLATES',
    'BENIGN_TEMPLATES',
    'SAMPLE_MESSAGES',
    'add_variation',
    'generate_synthetic_dataset',

    # CSV
    'export_dataset_to_csv',
    'export_batch_results_to_csv',
    'parse_batch_csv',
]
