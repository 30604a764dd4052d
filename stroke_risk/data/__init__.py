"""Patient record loading and synthetic data generation."""

from .records import (
    PatientRecord,
    REQUIRED_COLUMNS,
    load_records,
    read_patient_frame,
    records_from_frame,
    records_to_frame,
)
from .generate_stroke_data import StrokeDataGenerator, save_csv

__all__ = [
    'PatientRecord',
    'REQUIRED_COLUMNS',
    'load_records',
    'read_patient_frame',
    'records_from_frame',
    'records_to_frame',
    'StrokeDataGenerator',
    'save_csv',
]
