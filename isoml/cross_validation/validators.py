"""
This module contains the validators that estimate how well an estimator
generalizes by scoring it on samples it was not trained on.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol

import numpy as np
import numpy.typing as npt
from sklearn.model_selection import KFold as SklearnKFold
from sklearn.model_selection import train_test_split

from ..datasets import Dataset, Labeled
from .metrics import Metric

logger = logging.getLogger("isoml.cross_validation")


class Estimator(Protocol):
    def fit(self, dataset: Dataset) -> None:
        ...

    def predict(self, dataset: Dataset) -> npt.NDArray[Any]:
        ...


class Validator(ABC):
    """Trains and tests an estimator on disjoint parts of a labeled dataset."""

    def __init__(self) -> None:
        self._scores: list[float] | None = None

    def scores(self) -> list[float] | None:
        """Return the validation scores computed at last test time."""
        return self._scores

    @abstractmethod
    def test(self, estimator: Estimator, dataset: Labeled, metric: Metric) -> float:
        """
        Test the estimator with the supplied dataset and return a score.
        Args:
            estimator: Unfitted estimator exposing fit() and predict().
            dataset: Labeled samples.
            metric: Metric to score the predictions with.
        Returns:
            Validation score.
        """

    @staticmethod
    def _evaluate(
        estimator: Estimator,
        dataset: Labeled,
        training: npt.NDArray[np.intp],
        testing: npt.NDArray[np.intp],
        metric: Metric,
    ) -> float:
        estimator.fit(dataset.take(training))

        test_set = dataset.take(testing)

        assert isinstance(test_set, Labeled)

        predictions = estimator.predict(test_set)

        return metric.score(list(predictions), list(test_set.labels()))


class HoldOut(Validator):
    """
    Holds out a random fraction of the samples for testing.
    Attributes:
        ratio: Fraction of the samples held out.
        random_state: Seed of the split.
    """

    def __init__(self, ratio: float = 0.2, random_state: int | None = None) -> None:
        if not 0.0 < ratio < 1.0:
            raise ValueError(f"Ratio must be between 0 and 1, {ratio} given.")

        super().__init__()

        self.ratio = ratio
        self.random_state = random_state

    def test(self, estimator: Estimator, dataset: Labeled, metric: Metric) -> float:
        if dataset.num_rows() < 2:
            raise ValueError("At least 2 samples are required to hold out a test set.")

        training, testing = train_test_split(
            np.arange(dataset.num_rows()),
            test_size=self.ratio,
            random_state=self.random_state,
        )

        score = self._evaluate(estimator, dataset, training, testing, metric)

        self._scores = [score]

        logger.info("Hold out score %.4f on %d test samples.", score, len(testing))

        return score


class KFold(Validator):
    """
    Averages the scores of k train/test rounds, each testing on a different
    fold of the samples.
    Attributes:
        k: Number of folds.
        random_state: Seed of the shuffle before folding.
    """

    def __init__(self, k: int = 10, random_state: int | None = None) -> None:
        if k < 2:
            raise ValueError(f"At least 2 folds are required, {k} given.")

        super().__init__()

        self.k = k
        self.random_state = random_state

    def test(self, estimator: Estimator, dataset: Labeled, metric: Metric) -> float:
        if dataset.num_rows() < self.k:
            raise ValueError(
                f"At least {self.k} samples are required for {self.k} folds,"
                f" {dataset.num_rows()} given."
            )

        folds = SklearnKFold(n_splits=self.k, shuffle=True, random_state=self.random_state)

        self._scores = [
            self._evaluate(estimator, dataset, training, testing, metric)
            for training, testing in folds.split(dataset.samples)
        ]

        score = float(np.mean(self._scores))

        logger.info("%d-fold score %.4f.", self.k, score)

        return score
