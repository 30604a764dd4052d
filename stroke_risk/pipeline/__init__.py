"""Classifiers and the shared evaluation protocol."""

from .preprocessing import (
    FEATURE_NAMES,
    DataValidator,
    build_feature_matrix,
    get_labels,
    oversample_positives,
    to_feature_vector,
)
from .rule_based import RiskLevel, predict_rule, predict_rule_label, risk_to_label
from .trained_classifier import build_estimator, predict_many, predict_one, train, train_on_records
from .evaluation import (
    TrainedEvaluation,
    evaluate,
    evaluate_trained,
    run_trained_evaluation,
    split_train_test,
    tally,
)

__all__ = [
    'FEATURE_NAMES',
    'DataValidator',
    'build_feature_matrix',
    'get_labels',
    'oversample_positives',
    'to_feature_vector',
    'RiskLevel',
    'predict_rule',
    'predict_rule_label',
    'risk_to_label',
    'build_estimator',
    'predict_many',
    'predict_one',
    'train',
    'train_on_records',
    'TrainedEvaluation',
    'evaluate',
    'evaluate_trained',
    'run_trained_evaluation',
    'split_train_test',
    'tally',
]
