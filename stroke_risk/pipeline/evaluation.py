"""
Evaluation protocol shared by the rule-based and decision tree classifiers.

Both classifiers are scored by folding (predicted, actual) pairs into a
``ConfusionCounts`` value. The decision tree additionally goes through
positive oversampling and a shuffled train/test split before scoring.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

import numpy as np
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline

from stroke_risk.data.records import PatientRecord
from stroke_risk.exceptions import FitError
from stroke_risk.pipeline.preprocessing import build_feature_matrix, get_labels, oversample_positives
from stroke_risk.pipeline.trained_classifier import train
from stroke_risk.utils.model_utils import ConfusionCounts, accuracy, recall

logger = logging.getLogger(__name__)

RandomSource = Union[int, np.random.RandomState, None]


def tally(pairs: Iterable[Tuple[int, int]]) -> ConfusionCounts:
    """Fold ``(predicted, actual)`` pairs into confusion counts."""
    return reduce(
        lambda counts, pair: counts.add(pair[0], pair[1]),
        pairs,
        ConfusionCounts(),
    )


def evaluate(records: Iterable[PatientRecord],
             predict_fn: Callable[[PatientRecord], int]) -> ConfusionCounts:
    """Score ``predict_fn`` against each record's ``stroke`` outcome."""
    return tally((predict_fn(record), record.stroke) for record in records)


def split_train_test(features: np.ndarray,
                     labels: np.ndarray,
                     test_size: float = 0.2,
                     random_state: RandomSource = 42):
    """
    Shuffle and split encoded data into train and test parts.

    Args:
        features: Feature matrix
        labels: Binary labels
        test_size: Fraction of rows held out for testing
        random_state: Seed or ``RandomState`` driving the shuffle; ``None``
            gives a different split on every call

    Returns:
        ``(X_train, X_test, y_train, y_test)``
    """
    return train_test_split(
        features, labels,
        test_size=test_size,
        shuffle=True,
        random_state=random_state,
    )


@dataclass(frozen=True)
class TrainedEvaluation:
    """Hold-out results of the decision tree protocol."""
    counts: ConfusionCounts
    model: Pipeline
    train_size: int
    test_size: int

    @property
    def accuracy(self) -> float:
        return accuracy(self.counts)

    @property
    def recall(self) -> float:
        return recall(self.counts)


def evaluate_trained(records: Sequence[PatientRecord],
                     copies: int = 3,
                     test_size: float = 0.2,
                     random_state: RandomSource = 42,
                     params: Optional[Dict[str, Any]] = None) -> TrainedEvaluation:
    """
    Oversample, split, train and score a decision tree.

    Raises:
        FitError: if the split cannot be made or the training part cannot
            be fitted
    """
    augmented = oversample_positives(records, copies)
    X = build_feature_matrix(augmented)
    y = get_labels(augmented)

    try:
        X_train, X_test, y_train, y_test = split_train_test(X, y, test_size, random_state)
    except ValueError as e:
        raise FitError(f"Cannot split {len(y)} records into train/test sets: {e}") from e
    logger.info(f"Train/test split: {len(y_train)} train, {len(y_test)} test (test_size={test_size})")

    model = train(X_train, y_train, params)
    y_pred = model.predict(X_test)
    counts = tally(zip(y_pred.tolist(), y_test.tolist()))

    return TrainedEvaluation(
        counts=counts,
        model=model,
        train_size=len(y_train),
        test_size=len(y_test),
    )


def run_trained_evaluation(records: Sequence[PatientRecord],
                           copies: int = 3,
                           test_size: float = 0.2,
                           random_state: RandomSource = 42,
                           params: Optional[Dict[str, Any]] = None) -> Tuple[float, float, Pipeline]:
    """Run the decision tree protocol and return ``(accuracy, recall, model)``."""
    result = evaluate_trained(records, copies, test_size, random_state, params)
    return result.accuracy, result.recall, result.model
