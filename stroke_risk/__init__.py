"""
Stroke Risk Pipeline

Predicts stroke risk from tabular patient records with a rule-based
classifier and a decision tree, and reports accuracy, recall and the
confusion matrix for both.
"""

__version__ = "1.0.0"

from .exceptions import DataLoadError, FitError, InputParseError, StrokeRiskError
from .data import PatientRecord, load_records
from .pipeline import (
    RiskLevel,
    evaluate,
    predict_one,
    predict_rule,
    risk_to_label,
    run_trained_evaluation,
    train,
)
from .utils import ConfusionCounts, accuracy, format_report, recall

__all__ = [
    'DataLoadError',
    'FitError',
    'InputParseError',
    'StrokeRiskError',
    'PatientRecord',
    'load_records',
    'RiskLevel',
    'evaluate',
    'predict_one',
    'predict_rule',
    'risk_to_label',
    'run_trained_evaluation',
    'train',
    'ConfusionCounts',
    'accuracy',
    'format_report',
    'recall',
]
