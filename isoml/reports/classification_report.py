"""
This module contains the ClassificationReport that breaks the predictions
of a classifier (or anomaly detector) down into per label metrics.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from sklearn.metrics import multilabel_confusion_matrix

from .. import config

AVERAGED_METRICS = (
    "accuracy",
    "precision",
    "recall",
    "specificity",
    "miss_rate",
    "fall_out",
    "f1_score",
    "mcc",
    "informedness",
)


class ClassificationReport:
    """
    Per label accuracy, precision, recall, specificity, F1 and related
    metrics, plus their averages over all labels.
    """

    def generate(self, predictions: Sequence[Any], outcomes: Sequence[Any]) -> dict[str, Any]:
        """
        Args:
            predictions: Predicted labels.
            outcomes: Ground truth labels.
        Returns:
            {"overall": {"average": {...}, "total": {"cardinality": ...}},
             "label": {label: {...}}}
        Raises:
            ValueError: If predictions and outcomes differ in length.
        """
        predictions = list(predictions)
        outcomes = list(outcomes)

        if len(predictions) != len(outcomes):
            raise ValueError(
                f"The number of outcomes must match the number of predictions,"
                f" {len(outcomes)} and {len(predictions)} given."
            )

        if not outcomes:
            raise ValueError("At least one prediction is required to generate a report.")

        # First-seen order, predictions before outcomes
        labels = list(dict.fromkeys(predictions + outcomes))

        matrices = multilabel_confusion_matrix(outcomes, predictions, labels=labels)

        table: dict[Any, dict[str, float]] = {}
        average = dict.fromkeys(AVERAGED_METRICS, 0.0)
        total_cardinality = 0

        for label, matrix in zip(labels, matrices):
            tn, fp, fn, tp = (int(v) for v in matrix.ravel())

            precision = tp / (tp + fp + config.EPSILON)
            recall = tp / (tp + fn + config.EPSILON)
            specificity = tn / (tn + fp + config.EPSILON)

            metrics = {
                "accuracy": (tp + tn) / (tp + tn + fp + fn),
                "precision": precision,
                "recall": recall,
                "specificity": specificity,
                "miss_rate": 1.0 - recall,
                "fall_out": 1.0 - specificity,
                "f1_score": 2.0 * (precision * recall) / (precision + recall + config.EPSILON),
                "mcc": (tp * tn - fp * fn)
                / (np.sqrt(float((tp + fp) * (tp + fn) * (tn + fp) * (tn + fn))) + config.EPSILON),
                "informedness": recall + specificity - 1.0,
                "true_positives": tp,
                "true_negatives": tn,
                "false_positives": fp,
                "false_negatives": fn,
                "cardinality": tp + fn,
                "density": (tp + fn) / len(outcomes),
            }

            for name in AVERAGED_METRICS:
                average[name] += metrics[name]

            total_cardinality += tp + fn

            table[self._key(label)] = metrics

        n = len(labels)

        return {
            "overall": {
                "average": {name: value / n for name, value in average.items()},
                "total": {"cardinality": total_cardinality},
            },
            "label": table,
        }

    @staticmethod
    def _key(label: Any) -> Any:
        return label.item() if isinstance(label, np.generic) else label
