"""
Patient record schema and CSV loading.

Rows are read with pandas, coerced to the expected types and turned into
immutable ``PatientRecord`` objects. Loading is all-or-nothing: any malformed
row fails the whole file with ``DataLoadError``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

import numpy as np
import pandas as pd

from stroke_risk.exceptions import DataLoadError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    'age',
    'hypertension',
    'heart_disease',
    'ever_married',
    'avg_glucose_level',
    'bmi',
    'stroke',
]
NUMERIC_COLUMNS = ['age', 'hypertension', 'heart_disease', 'avg_glucose_level', 'bmi', 'stroke']
BINARY_COLUMNS = ['hypertension', 'heart_disease', 'stroke']
# Columns allowed to hold missing values ("N/A" or empty cells in the source).
NULLABLE_COLUMNS = ['bmi']


@dataclass(frozen=True)
class PatientRecord:
    """One patient row. ``bmi`` may be NaN."""
    age: float
    hypertension: int
    heart_disease: int
    ever_married: str
    avg_glucose_level: float
    bmi: float
    stroke: int


def _row_numbers(mask: pd.Series, limit: int = 5) -> str:
    # +2: header line plus 1-based numbering
    rows = [str(i + 2) for i in np.flatnonzero(mask.to_numpy())[:limit]]
    suffix = ", ..." if mask.sum() > limit else ""
    return ", ".join(rows) + suffix


def read_patient_frame(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read and type-check the patient CSV.

    Args:
        path: CSV file with a header row and the ``REQUIRED_COLUMNS``

    Returns:
        DataFrame restricted to ``REQUIRED_COLUMNS`` with numeric dtypes applied

    Raises:
        DataLoadError: if the file cannot be read or any row is malformed
    """
    p = Path(path)
    if not p.is_file():
        raise DataLoadError(f"Data file not found: {p}")

    logger.info(f"Loading patient data from {p}")
    try:
        df = pd.read_csv(p)
    except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise DataLoadError(f"Failed to read {p}: {e}") from e

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        raise DataLoadError(f"Missing required columns in {p}: {missing_columns}")

    df = df[REQUIRED_COLUMNS].copy()

    for col in NUMERIC_COLUMNS:
        raw = df[col]
        coerced = pd.to_numeric(raw, errors='coerce')
        non_numeric = coerced.isna() & raw.notna()
        if non_numeric.any():
            raise DataLoadError(
                f"Non-numeric values in column '{col}' at rows {_row_numbers(non_numeric)}"
            )
        if col not in NULLABLE_COLUMNS and coerced.isna().any():
            raise DataLoadError(
                f"Missing values in column '{col}' at rows {_row_numbers(coerced.isna())}"
            )
        df[col] = coerced.astype(float)

    for col in BINARY_COLUMNS:
        invalid = ~df[col].isin([0, 1])
        if invalid.any():
            raise DataLoadError(
                f"Column '{col}' must be 0 or 1, invalid rows {_row_numbers(invalid)}"
            )
        df[col] = df[col].astype(int)

    df['ever_married'] = df['ever_married'].fillna('').astype(str)

    logger.info(f"Loaded {len(df)} patient rows")
    if len(df):
        logger.info(f"Stroke prevalence: {df['stroke'].mean():.3f}")
    return df


def records_from_frame(df: pd.DataFrame) -> List[PatientRecord]:
    """Convert a typed patient frame into ``PatientRecord`` objects."""
    return [
        PatientRecord(
            age=float(row.age),
            hypertension=int(row.hypertension),
            heart_disease=int(row.heart_disease),
            ever_married=str(row.ever_married),
            avg_glucose_level=float(row.avg_glucose_level),
            bmi=float(row.bmi),
            stroke=int(row.stroke),
        )
        for row in df[REQUIRED_COLUMNS].itertuples(index=False)
    ]


def records_to_frame(records: Iterable[PatientRecord]) -> pd.DataFrame:
    """Inverse of ``records_from_frame``."""
    return pd.DataFrame(
        [
            {col: getattr(record, col) for col in REQUIRED_COLUMNS}
            for record in records
        ],
        columns=REQUIRED_COLUMNS,
    )


def load_records(path: Union[str, Path]) -> List[PatientRecord]:
    """Load every row of ``path`` as a ``PatientRecord``."""
    return records_from_frame(read_patient_frame(path))
