"""Validation metrics comparing predictions with ground truth labels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from sklearn.metrics import accuracy_score, f1_score


class Metric(ABC):
    """Scores predictions against labels, higher is better."""

    @abstractmethod
    def score(self, predictions: Sequence[Any], labels: Sequence[Any]) -> float:
        ...


class Accuracy(Metric):
    """Fraction of predictions equal to their label."""

    def score(self, predictions: Sequence[Any], labels: Sequence[Any]) -> float:
        if len(predictions) == 0:
            return 0.0
        return float(accuracy_score(labels, predictions))


class F1Score(Metric):
    """Unweighted mean of the per label F1 scores."""

    def score(self, predictions: Sequence[Any], labels: Sequence[Any]) -> float:
        if len(predictions) == 0:
            return 0.0
        return float(f1_score(labels, predictions, average="macro", zero_division=0))
