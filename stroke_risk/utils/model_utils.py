"""
Confusion-matrix bookkeeping, derived metrics and report formatting.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd


@dataclass(frozen=True)
class ConfusionCounts:
    """Binary confusion matrix counts."""
    tp: int = 0
    fp: int = 0
    tn: int = 0
    fn: int = 0

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn

    def add(self, predicted: int, actual: int) -> "ConfusionCounts":
        """Return new counts with one more (predicted, actual) observation."""
        if predicted not in (0, 1) or actual not in (0, 1):
            raise ValueError(f"Labels must be 0 or 1, got predicted={predicted!r} actual={actual!r}")

        if predicted == 1 and actual == 1:
            return ConfusionCounts(self.tp + 1, self.fp, self.tn, self.fn)
        if predicted == 1:
            return ConfusionCounts(self.tp, self.fp + 1, self.tn, self.fn)
        if actual == 0:
            return ConfusionCounts(self.tp, self.fp, self.tn + 1, self.fn)
        return ConfusionCounts(self.tp, self.fp, self.tn, self.fn + 1)

    def __add__(self, other: "ConfusionCounts") -> "ConfusionCounts":
        if not isinstance(other, ConfusionCounts):
            return NotImplemented
        return ConfusionCounts(
            self.tp + other.tp,
            self.fp + other.fp,
            self.tn + other.tn,
            self.fn + other.fn,
        )


def accuracy(counts: ConfusionCounts, total: Optional[int] = None) -> float:
    """Fraction of correct predictions; 0.0 for an empty evaluation."""
    total = counts.total if total is None else total
    if total == 0:
        return 0.0
    return (counts.tp + counts.tn) / total


def recall(counts: ConfusionCounts) -> float:
    """True positive rate, 0.0 when there are no actual positives."""
    positives = counts.tp + counts.fn
    if positives == 0:
        return 0.0
    return counts.tp / positives


def precision(counts: ConfusionCounts) -> float:
    predicted_positives = counts.tp + counts.fp
    return counts.tp / predicted_positives if predicted_positives > 0 else 0.0


def specificity(counts: ConfusionCounts) -> float:
    negatives = counts.tn + counts.fp
    return counts.tn / negatives if negatives > 0 else 0.0


def format_report(title: str, counts: ConfusionCounts) -> str:
    """
    Render accuracy, recall and the confusion matrix for one classifier.

    The layout is stable so it can be compared verbatim in tests::

        Decision Tree Results:
        Accuracy: 93.10%
        Recall (TPR): 98.80%
        Confusion Matrix:
        TP: 247 | FP: 58
        FN: 3 | TN: 577
    """
    lines = [
        f"{title} Results:",
        f"Accuracy: {accuracy(counts) * 100:.2f}%",
        f"Recall (TPR): {recall(counts) * 100:.2f}%",
        "Confusion Matrix:",
        f"TP: {counts.tp} | FP: {counts.fp}",
        f"FN: {counts.fn} | TN: {counts.tn}",
    ]
    return "\n".join(lines)


class ModelEvaluator:
    """Derive the metric dictionary reported for each classifier."""

    def calculate_metrics(self, counts: ConfusionCounts) -> Dict[str, float]:
        metrics = {
            'accuracy': accuracy(counts),
            'recall': recall(counts),
            'precision': precision(counts),
            'specificity': specificity(counts),
        }

        # Confusion matrix components
        metrics['true_positives'] = counts.tp
        metrics['false_positives'] = counts.fp
        metrics['true_negatives'] = counts.tn
        metrics['false_negatives'] = counts.fn
        metrics['sample_size'] = counts.total

        return metrics


class ModelComparator:
    """Compare classifiers evaluated on the stroke data."""

    def __init__(self):
        """Initialize comparator."""
        self.results = {}

    def add_model(self, name: str, counts: ConfusionCounts):
        """Add model results for comparison."""
        self.results[name] = ModelEvaluator().calculate_metrics(counts)

    def compare_models(self) -> pd.DataFrame:
        """Create comparison table sorted by recall."""
        if not self.results:
            return pd.DataFrame()

        comparison_df = pd.DataFrame(self.results).T
        return comparison_df.sort_values('recall', ascending=False)

    def get_best_model(self, metric: str = 'recall') -> Optional[str]:
        """Get name of best performing model."""
        if not self.results:
            return None

        best_score = -1
        best_model = None

        for model_name, metrics in self.results.items():
            if metric in metrics and metrics[metric] > best_score:
                best_score = metrics[metric]
                best_model = model_name

        return best_model
