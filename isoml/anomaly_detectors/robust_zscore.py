"""
This module contains the RobustZScore detector, a quick global anomaly
detector that thresholds the modified z score of every feature.

The modified z score uses the median and the median absolute deviation
(MAD) instead of the mean and standard deviation, which keeps the statistic
robust to training sets that already contain outliers.

References:
    P. J. Rousseeuw et al. (2017). Anomaly Detection by Robust Statistics.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import numpy.typing as npt

from .. import config
from ..datasets import ColumnType, Dataset
from ..exceptions import NotTrainedError, SchemaMismatchError

logger = logging.getLogger("isoml.anomaly_detectors.robust_zscore")


class RobustZScore:
    """
    Anomaly detector based on the per feature modified z score.
    Attributes:
        tolerance: Average z score tolerated before a sample is an outlier.
        threshold: z score of a single feature that makes the whole sample
            an outlier.
    """

    def __init__(
        self,
        tolerance: float = config.ROBUST_Z_TOLERANCE,
        threshold: float = config.ROBUST_Z_THRESHOLD,
    ) -> None:
        if tolerance < 0.0:
            raise ValueError(f"Score tolerance must be 0 or greater, {tolerance} given.")

        if threshold < 0.0:
            raise ValueError(f"Score threshold must be 0 or greater, {threshold} given.")

        self.tolerance = tolerance
        self.threshold = threshold

        self._medians: npt.NDArray[np.floating[Any]] | None = None
        self._mads: npt.NDArray[np.floating[Any]] | None = None

    def medians(self) -> npt.NDArray[np.floating[Any]] | None:
        return self._medians

    def mads(self) -> npt.NDArray[np.floating[Any]] | None:
        return self._mads

    @staticmethod
    def _check_continuous(dataset: Dataset) -> None:
        if ColumnType.CATEGORICAL in dataset.types():
            raise ValueError("This estimator only works with continuous features.")

    def fit(self, dataset: Dataset) -> None:
        """
        Compute the median and median absolute deviation of every column.
        Args:
            dataset: Training samples with continuous features only.
        """
        self._check_continuous(dataset)

        if dataset.empty():
            raise ValueError("At least one sample is required to fit the detector.")

        samples = dataset.samples
        self._medians = np.median(samples, axis=0)
        self._mads = np.median(np.abs(samples - self._medians), axis=0)

        logger.info("Fitted robust z score on %d samples.", dataset.num_rows())

    def z_scores(self, dataset: Dataset) -> npt.NDArray[np.floating[Any]]:
        """
        Args:
            dataset: Samples with continuous features only.
        Returns:
            Modified z score of every feature, shape (n_samples, n_features).
        """
        self._check_continuous(dataset)

        if self._medians is None or self._mads is None:
            raise NotTrainedError("Estimator has not been trained.")

        if dataset.num_columns() != len(self._medians):
            raise SchemaMismatchError(
                f"Dataset has {dataset.num_columns()} features, the detector was"
                f" fitted on {len(self._medians)}."
            )

        # A constant training column has a MAD of 0
        mads = np.maximum(self._mads, config.EPSILON)

        return config.ROBUST_Z_LAMBDA * np.abs(dataset.samples - self._medians) / mads

    def predict(self, dataset: Dataset) -> npt.NDArray[np.int_]:
        """
        Args:
            dataset: Samples to label.
        Returns:
            Binary labels (0=normal, 1=anomaly) of shape (n_samples,).
        """
        z = self.z_scores(dataset)

        if z.shape[0] == 0:
            return np.zeros(0, dtype=int)

        outliers = np.any(z > self.threshold, axis=1) | (np.mean(z, axis=1) > self.tolerance)

        return outliers.astype(int)
