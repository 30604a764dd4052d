"""
Threshold rules mapping a patient record to a stroke risk level.
"""

from enum import Enum

from stroke_risk.data.records import PatientRecord

HIGH_RISK_AGE = 65.0
HIGH_GLUCOSE_LEVEL = 150.0


class RiskLevel(Enum):
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"


def predict_rule(record: PatientRecord) -> RiskLevel:
    """
    Classify a record with fixed clinical thresholds.

    Rules are checked in order and the first match wins:

    - age above 65 with heart disease: HIGH
    - hypertension with average glucose above 150 mg/dL: MODERATE
    - anything else: LOW
    """
    if record.age > HIGH_RISK_AGE and record.heart_disease == 1:
        return RiskLevel.HIGH
    if record.hypertension == 1 and record.avg_glucose_level > HIGH_GLUCOSE_LEVEL:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def risk_to_label(level: RiskLevel) -> int:
    """Binarize a risk level: HIGH and MODERATE are elevated risk (1), LOW is 0."""
    if level in (RiskLevel.HIGH, RiskLevel.MODERATE):
        return 1
    return 0


def predict_rule_label(record: PatientRecord) -> int:
    return risk_to_label(predict_rule(record))
