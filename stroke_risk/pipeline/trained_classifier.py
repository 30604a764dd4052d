"""
Decision tree adapter over scikit-learn.

The fitted model is an sklearn ``Pipeline`` (median imputation for missing
BMI followed by a ``DecisionTreeClassifier``). Every prediction path encodes
records through ``to_feature_vector`` so training-time and inference-time
features are identical.
"""

import logging
import time
from typing import Any, Dict, Optional, Sequence

import numpy as np
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.tree import DecisionTreeClassifier

from stroke_risk.data.records import PatientRecord
from stroke_risk.exceptions import FitError
from stroke_risk.pipeline.preprocessing import (
    FEATURE_NAMES,
    build_feature_matrix,
    get_labels,
    oversample_positives,
    to_feature_vector,
)

logger = logging.getLogger(__name__)


def build_estimator(params: Optional[Dict[str, Any]] = None) -> Pipeline:
    """
    Create an unfitted imputer + decision tree pipeline.

    Args:
        params: The ``model`` configuration section. Recognised keys are
            ``imputation_strategy`` and ``decision_tree`` (keyword arguments
            for ``DecisionTreeClassifier``).
    """
    params = params or {}
    tree_params = dict(params.get('decision_tree') or {})
    strategy = params.get('imputation_strategy', 'median')

    return Pipeline([
        ('imputer', SimpleImputer(strategy=strategy)),
        ('model', DecisionTreeClassifier(**tree_params)),
    ])


def train(features, labels, params: Optional[Dict[str, Any]] = None) -> Pipeline:
    """
    Fit a decision tree on encoded features.

    Args:
        features: ``(n, 6)`` matrix of feature vectors
        labels: ``n`` binary stroke outcomes
        params: The ``model`` configuration section

    Returns:
        Fitted sklearn pipeline

    Raises:
        FitError: if the data is empty, lengths differ, only one class is
            present, or the estimator rejects the data
    """
    X = np.asarray(features, dtype=float)
    y = np.asarray(labels)

    if X.ndim != 2 or X.shape[1] != len(FEATURE_NAMES):
        raise FitError(f"Expected a 2-D feature matrix with {len(FEATURE_NAMES)} columns, got shape {X.shape}")
    if len(X) != len(y):
        raise FitError(f"Feature/label length mismatch: {len(X)} feature rows vs {len(y)} labels")
    if len(y) == 0:
        raise FitError("Cannot fit on an empty dataset")

    classes = np.unique(y)
    if len(classes) < 2:
        raise FitError(f"Training labels contain a single class: {classes.tolist()}")

    start_time = time.time()
    logger.info(f"Fitting decision tree on {len(y)} samples ({int((y == 1).sum())} positive)")

    model = build_estimator(params)
    try:
        model.fit(X, y)
    except ValueError as e:
        raise FitError(f"Decision tree fit failed: {e}") from e

    elapsed_time = time.time() - start_time
    logger.info(f"Decision tree fitted in {elapsed_time:.2f} seconds "
                f"(depth={model.named_steps['model'].get_depth()})")
    return model


def predict_many(model: Pipeline, records: Sequence[PatientRecord]) -> np.ndarray:
    """Predict 0/1 stroke labels for several records."""
    if not records:
        return np.empty(0, dtype=int)
    return model.predict(build_feature_matrix(records)).astype(int)


def predict_one(model: Pipeline, record: PatientRecord) -> int:
    """Predict the 0/1 stroke label for a single record."""
    matrix = np.array([to_feature_vector(record)], dtype=float)
    return int(model.predict(matrix)[0])


def train_on_records(records: Sequence[PatientRecord],
                     copies: int = 3,
                     params: Optional[Dict[str, Any]] = None) -> Pipeline:
    """Fit on every record after oversampling positives, with no hold-out set."""
    training_data = oversample_positives(records, copies)
    return train(build_feature_matrix(training_data), get_labels(training_data), params)
