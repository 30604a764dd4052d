"""Utility modules for the stroke risk pipeline."""

from .experiment_tracking import ExperimentTracker, setup_experiment_tracking
from .model_utils import (
    ConfusionCounts,
    ModelComparator,
    ModelEvaluator,
    accuracy,
    format_report,
    recall,
)

__all__ = [
    'ExperimentTracker',
    'setup_experiment_tracking',
    'ConfusionCounts',
    'ModelComparator',
    'ModelEvaluator',
    'accuracy',
    'format_report',
    'recall',
]
