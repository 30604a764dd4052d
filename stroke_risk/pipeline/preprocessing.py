"""
Feature encoding, oversampling and data validation for patient records.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd

from stroke_risk.data.records import PatientRecord

logger = logging.getLogger(__name__)

FEATURE_NAMES = (
    'age',
    'hypertension',
    'heart_disease',
    'ever_married',
    'avg_glucose_level',
    'bmi',
)


def to_feature_vector(record: PatientRecord) -> List[float]:
    """
    Encode one record as the fixed-order feature vector.

    ``ever_married`` maps to 1.0 only for the exact string "Yes"; every
    other value (including "yes" and "") maps to 0.0. Training and
    inference must both go through this function.
    """
    return [
        float(record.age),
        float(record.hypertension),
        float(record.heart_disease),
        1.0 if record.ever_married == "Yes" else 0.0,
        float(record.avg_glucose_level),
        float(record.bmi),
    ]


def build_feature_matrix(records: Sequence[PatientRecord]) -> np.ndarray:
    """Stack feature vectors into an ``(n_records, 6)`` float matrix."""
    if not records:
        return np.empty((0, len(FEATURE_NAMES)), dtype=float)
    return np.array([to_feature_vector(r) for r in records], dtype=float)


def get_labels(records: Sequence[PatientRecord]) -> np.ndarray:
    """Extract stroke outcomes (0/1) in record order."""
    return np.array([r.stroke for r in records], dtype=int)


def oversample_positives(records: Sequence[PatientRecord], copies: int = 3) -> List[PatientRecord]:
    """
    Append ``copies`` extra copies of every stroke-positive record.

    The result is the original sequence followed by the positive partition
    repeated ``copies`` times, so N records with P positives become
    N + copies * P records.
    """
    if copies < 0:
        raise ValueError(f"copies must be non-negative, got {copies}")

    positives = [r for r in records if r.stroke == 1]
    augmented = list(records)
    for _ in range(copies):
        augmented.extend(positives)

    logger.info(f"Oversampled {len(positives)} positive records x{copies}: "
                f"{len(records)} -> {len(augmented)} records")
    return augmented


class DataValidator:
    """Validate data quality and consistency."""

    def __init__(self):
        self.validation_rules = {}

    def add_rule(self, feature: str, rule_type: str, **kwargs):
        """Add validation rule for a feature."""
        if feature not in self.validation_rules:
            self.validation_rules[feature] = []

        self.validation_rules[feature].append({
            'type': rule_type,
            'params': kwargs
        })

    def validate(self, df: pd.DataFrame) -> Dict[str, List[str]]:
        """Validate dataframe against rules."""
        violations = {}

        for feature, rules in self.validation_rules.items():
            if feature not in df.columns:
                continue

            feature_violations = []

            for rule in rules:
                if rule['type'] == 'range':
                    min_val = rule['params'].get('min')
                    max_val = rule['params'].get('max')
                    exclusive_min = rule['params'].get('exclusive_min', False)

                    if min_val is not None:
                        below = df[feature] <= min_val if exclusive_min else df[feature] < min_val
                        violation_count = below.sum()
                        if violation_count > 0:
                            bound = "at or below" if exclusive_min else "below"
                            feature_violations.append(f"{violation_count} values {bound} minimum {min_val}")

                    if max_val is not None:
                        violation_count = (df[feature] > max_val).sum()
                        if violation_count > 0:
                            feature_violations.append(f"{violation_count} values above maximum {max_val}")

                elif rule['type'] == 'categorical':
                    allowed_values = rule['params'].get('allowed_values', [])
                    invalid_mask = ~df[feature].isin(allowed_values)
                    violation_count = invalid_mask.sum()

                    if violation_count > 0:
                        feature_violations.append(f"{violation_count} invalid categorical values")

                elif rule['type'] == 'missing_rate':
                    max_missing_rate = rule['params'].get('max_rate', 0.1)
                    missing_rate = df[feature].isnull().mean()

                    if missing_rate > max_missing_rate:
                        feature_violations.append(f"Missing rate {missing_rate:.2%} exceeds {max_missing_rate:.2%}")

            if feature_violations:
                violations[feature] = feature_violations

        return violations

    def setup_stroke_rules(self):
        """Setup validation rules for the stroke dataset."""
        self.add_rule('age', 'range', min=0, max=120)
        self.add_rule('avg_glucose_level', 'range', min=0, exclusive_min=True, max=500)
        self.add_rule('bmi', 'range', min=10, max=100)

        # Anything but "Yes" encodes as not married
        self.add_rule('ever_married', 'categorical', allowed_values=['Yes', 'No'])

        self.add_rule('bmi', 'missing_rate', max_rate=0.1)
