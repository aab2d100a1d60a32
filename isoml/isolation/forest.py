"""
This module contains the IsolationForest class that implements an ensemble
of isolation trees for robust anomaly detection.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import numpy.typing as npt
from joblib import Parallel, delayed

from .. import config
from ..datasets import Dataset
from ..exceptions import NotTrainedError
from .tree import ITree

logger = logging.getLogger("isoml.isolation.forest")


def _fit_single_tree(
    seed: int,
    dataset: Dataset,
    subsample_size: int | None,
    max_depth: int,
    max_leaf_size: int,
) -> ITree:
    """
    Grow an isolation tree on a random subsample with a given seed.
    The same seed drives both the subsample draw and the splits.

    Args:
        seed: Random seed for this tree (integer).
        dataset: Training samples.
        subsample_size: Number of samples to use for growing the tree.
        max_depth: Maximum depth of the tree.
        max_leaf_size: Maximum number of samples in a leaf.
    Returns:
        Grown ITree instance.
    """
    rng = np.random.default_rng(seed)

    tree = ITree(max_depth=max_depth, max_leaf_size=max_leaf_size, random_state=rng)
    tree.grow(dataset.subsample(subsample_size, rng))
    return tree


def _score_single_tree(
    tree: ITree,
    dataset: Dataset,
) -> npt.NDArray[np.floating[Any]]:
    """
    Worker function to score samples on a single tree.
    This function is designed to be called in parallel using joblib.
    Args:
        tree: Grown ITree instance.
        dataset: Samples to score.
    Returns:
        Leaf scores for each sample of shape (n_samples,).
    """
    scores_arr = np.zeros(dataset.num_rows(), dtype=np.float64)

    for offset, sample in enumerate(dataset):
        leaf = tree.search(sample)
        assert leaf is not None
        scores_arr[offset] = leaf.score

    return scores_arr


class IsolationForest:
    """
    Ensemble of isolation trees for anomaly detection.

    Each tree is grown on a random subsample of the data, and predictions
    are made by averaging the leaf scores across all trees.

    Attributes:
        ensemble_size: Number of trees in the ensemble.
        subsample_size: Number of samples each tree is grown on.
        max_leaf_size: Maximum number of samples in a leaf.
        max_depth: Maximum depth of every tree, None to derive it from the
            subsample size.
        threshold: Score at or above which a sample is an anomaly.
        contamination: Expected proportion of anomalies in the dataset.
        n_jobs: Number of parallel jobs used for scoring.
        random_state: Random seed for reproducibility.
        anomaly_threshold: Threshold in use after fitting.
        trees: List of grown ITree instances.
    """

    def __init__(
        self,
        ensemble_size: int = config.ENSEMBLE_SIZE,
        subsample_size: int | None = config.SUBSAMPLE_SIZE,
        max_leaf_size: int = config.FOREST_MAX_LEAF_SIZE,
        max_depth: int | None = None,
        threshold: float = config.ANOMALY_THRESHOLD,
        contamination: float | None = None,
        n_jobs: int = 1,
        random_state: int | None = None,
    ) -> None:
        """
        Initialize an IsolationForest.
        Args:
            ensemble_size: Number of isolation trees to create in the ensemble.
            subsample_size: Number of samples used to grow each tree.
                If None or >= n_samples, uses all samples.
            max_leaf_size: Maximum number of samples in a leaf.
            max_depth: Maximum tree depth. If None, ceil(log2(n)) + 1 where n
                is the number of samples each tree is grown on.
            threshold: Anomaly score threshold used when contamination is None.
            contamination: Expected proportion of anomalies in (0, 0.5]. If
                given, the threshold is taken from the training scores.
            n_jobs: Number of parallel jobs to run for scoring.
                - If 1 (default): sequential execution (no parallelization)
                - If -1: use all available processors
                - If > 1: use specified number of processors
                Trees are always grown sequentially.
            random_state: Random seed for reproducibility.
        Raises:
            ValueError: If a parameter is out of range.
        """
        if ensemble_size < 1:
            raise ValueError(f"The ensemble must contain at least 1 tree, {ensemble_size} given.")

        if subsample_size is not None and subsample_size < 1:
            raise ValueError(f"Subsample size must be at least 1, {subsample_size} given.")

        if max_leaf_size < 1:
            raise ValueError(
                f"At least one sample is required to create a leaf, {max_leaf_size} given."
            )

        if max_depth is not None and max_depth < 1:
            raise ValueError(f"A tree cannot have depth less than 1, {max_depth} given.")

        if not 0.0 < threshold < 1.0:
            raise ValueError(f"Threshold must be between 0 and 1, {threshold} given.")

        if contamination is not None and not 0.0 < contamination <= 0.5:
            raise ValueError(f"Contamination must be in (0, 0.5], {contamination} given.")

        self.ensemble_size = ensemble_size
        self.subsample_size = subsample_size
        self.max_leaf_size = max_leaf_size
        self.max_depth = max_depth
        self.threshold = threshold
        self.contamination = contamination
        self.n_jobs = n_jobs
        self.random_state = random_state

        self.anomaly_threshold: float | None = None

        self.trees: list[ITree] = []

    def fit(self, dataset: Dataset) -> None:
        """
        Grows the isolation trees, each on a random subsample of the data,
        then settles the anomaly threshold.

        Args:
            dataset: Training samples.
        Raises:
            ValueError: If the dataset has no samples.
        """
        if dataset.empty():
            raise ValueError("At least one sample is required to fit the forest.")

        if self.subsample_size is not None and self.subsample_size < dataset.num_rows():
            train_size = self.subsample_size
        else:
            train_size = dataset.num_rows()

        if self.max_depth is None:
            max_depth = int(np.ceil(np.log2(max(train_size, 2)))) + 1
        else:
            max_depth = self.max_depth

        rng = np.random.default_rng(self.random_state)
        MAX_INT = np.iinfo(np.int32).max
        seeds = rng.integers(MAX_INT, size=self.ensemble_size)

        self.trees = [
            _fit_single_tree(int(seed), dataset, self.subsample_size, max_depth, self.max_leaf_size)
            for seed in seeds
        ]

        if self.contamination is None:
            self.anomaly_threshold = self.threshold
        else:
            Xs_train_anomaly_scores = self.scores(dataset)

            self.anomaly_threshold = float(
                np.quantile(Xs_train_anomaly_scores, 1.0 - self.contamination),
            )

        logger.info(
            "Fitted %d trees on %d samples (max depth %d, threshold %.4f).",
            len(self.trees),
            train_size,
            max_depth,
            self.anomaly_threshold,
        )

    def scores(self, dataset: Dataset) -> npt.NDArray[np.floating[Any]]:
        """
        Anomaly scores are in (0, 1] where higher scores indicate anomalies.
        Args:
            dataset: Samples to score.
        Returns:
            Anomaly scores for each sample of shape (n_samples,).
        Raises:
            NotTrainedError: If the forest has not been fitted.
        """
        if not self.trees:
            raise NotTrainedError("The forest has not been fitted.")

        if self.n_jobs == 1:
            # Sequential execution
            score_matrix = np.zeros((dataset.num_rows(), len(self.trees)))
            for tree_idx, tree in enumerate(self.trees):
                score_matrix[:, tree_idx] = _score_single_tree(tree, dataset)
        else:
            # Trees are read-only once grown, so they can be searched in parallel
            score_results = Parallel(n_jobs=self.n_jobs, backend="loky")(
                delayed(_score_single_tree)(tree, dataset) for tree in self.trees
            )
            score_matrix = np.column_stack(list(score_results))

        return np.mean(score_matrix, axis=1)

    def predict(self, dataset: Dataset) -> npt.NDArray[np.int_]:
        """
        Predict anomaly labels for samples.
        Args:
            dataset: Samples to label.
        Returns:
            Binary labels (0=normal, 1=anomaly) of shape (n_samples,).
        """
        scores_arr = self.scores(dataset)
        assert self.anomaly_threshold is not None
        return (scores_arr >= self.anomaly_threshold).astype(int)
