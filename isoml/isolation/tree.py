"""
This module contains the ITree class that grows an isolation tree by
completely random splitting and searches it for the leaf a sample falls in.

References:
    F. T. Liu et al. (2008). Isolation Forest.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Iterator, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .. import config
from ..datasets import ColumnType, Dataset, column_type_of
from ..exceptions import SchemaMismatchError, TreeAlreadyGrownError, TreeNotGrownError
from .nodes import Cell, Isolator, Node, SplitKind

logger = logging.getLogger("isoml.isolation.tree")


def calculate_c_factor(n: int) -> float:
    """
    Average path length of an unsuccessful search in a binary search tree
    of n nodes.
    Args:
        n: Number of samples.
    Returns:
        0.0 for n <= 1, otherwise 2 * (ln(n - 1) + gamma) - 2 * (n - 1) / n.
    """
    if n <= 1:
        return 0.0

    return float(2.0 * (np.log(n - 1) + config.EULER_MASCHERONI) - 2.0 * (n - 1) / n)


def isolation_score(depth: int, n: int, c: float) -> float:
    """
    Score of a leaf terminated at the given depth holding n samples.
    Based on the formula: 2^(-(depth + c(n)) / c).
    Args:
        depth: Depth of the leaf.
        n: Number of training samples in the leaf.
        c: Normalization constant of the whole tree.
    Returns:
        Score in (0, 1], or config.DEGENERATE_SCORE when c is 0.
    """
    if c == 0.0:
        return config.DEGENERATE_SCORE

    return float(2.0 ** (-(depth + calculate_c_factor(n)) / c))


class ITree:
    """
    Isolation tree using completely random splitting.

    The tree is grown once. Samples are split on a random column at the value
    of a random sample until a branch holds no more than max_leaf_size samples
    or reaches max_depth, at which point it ends in a Cell holding the
    sample count and the precomputed anomaly score.
    Attributes:
        max_depth: Depth at which a branch is forced to terminate.
        max_leaf_size: Maximum number of samples a leaf may hold.
        rng: Random generator driving the splits.
        PADDING: Padding added to the plot limits.
    """

    def __init__(
        self,
        max_depth: int = config.DEFAULT_MAX_DEPTH,
        max_leaf_size: int = config.DEFAULT_MAX_LEAF_SIZE,
        random_state: int | np.random.Generator | None = None,
    ) -> None:
        """
        Initialize an ITree.
        Args:
            max_depth: Maximum depth of a branch, at least 1.
            max_leaf_size: Maximum number of samples in a leaf, at least 1.
            random_state: Seed or generator for the random splits.
        Raises:
            ValueError: If max_depth or max_leaf_size is less than 1.
        """
        if max_depth < 1:
            raise ValueError(f"A tree cannot have depth less than 1, {max_depth} given.")

        if max_leaf_size < 1:
            raise ValueError(
                f"At least one sample is required to create a leaf, {max_leaf_size} given."
            )

        self.max_depth = max_depth
        self.max_leaf_size = max_leaf_size
        self.rng = np.random.default_rng(random_state)

        self._root: Node | None = None
        self._c: float | None = None
        self._types: list[ColumnType] | None = None

        self.PADDING = 1.0

    @property
    def c(self) -> float | None:
        """Normalization constant computed from the training set size."""
        return self._c

    def root(self) -> Node | None:
        return self._root

    def bare(self) -> bool:
        return self._root is None

    def grow(self, dataset: Dataset) -> None:
        """
        Insert a root split and recursively split the training data until
        every branch is terminated.
        Args:
            dataset: Training samples.
        Raises:
            TreeAlreadyGrownError: If the tree has been grown before.
            ValueError: If the dataset has no samples.
        """
        if self._root is not None:
            raise TreeAlreadyGrownError("The tree has already been grown.")

        if dataset.empty():
            raise ValueError("At least one sample is required to grow a tree.")

        self._c = calculate_c_factor(dataset.num_rows())
        self._types = dataset.types()

        self._root = self._split(dataset, 1)

        logger.debug(
            "Grew tree on %d samples with %d columns (c=%.4f).",
            dataset.num_rows(),
            dataset.num_columns(),
            self._c,
        )

    def _split(self, dataset: Dataset, depth: int) -> Isolator:
        """
        Split the samples at random and grow both sides, left first.
        Args:
            dataset: Samples reaching this node.
            depth: Depth of the split.
        Returns:
            Isolator with both subtrees attached.
        """
        index, value, left, right = self._find_random_split(dataset)
        kind = SplitKind.for_column(dataset.column_type(index))

        if depth >= self.max_depth:
            return Isolator(
                index,
                value,
                kind,
                self._terminate(left, depth),
                self._terminate(right, depth),
            )

        return Isolator(
            index,
            value,
            kind,
            self._branch(left, depth),
            self._branch(right, depth),
        )

    def _branch(self, group: Dataset, depth: int) -> Node:
        if group.num_rows() <= self.max_leaf_size:
            return self._terminate(group, depth)

        # Identical samples can never be separated. Splitting them would only
        # push them down to max_depth, or recurse forever when it is unbounded.
        if group.homogeneous():
            if self.max_depth == config.DEFAULT_MAX_DEPTH:
                return self._terminate(group, depth)
            return self._terminate(group, self.max_depth)

        return self._split(group, depth + 1)

    def _find_random_split(self, dataset: Dataset) -> tuple[int, Any, Dataset, Dataset]:
        """
        Pick a random column and the value of a random sample in it.
        Returns:
            (column index, split value, left group, right group).
        """
        index = int(self.rng.integers(dataset.num_columns()))

        value = dataset.row(int(self.rng.integers(dataset.num_rows())))[index]

        if isinstance(value, np.generic):
            value = value.item()

        left, right = dataset.partition(index, value)

        return index, value, left, right

    def _terminate(self, dataset: Dataset, depth: int) -> Cell:
        assert self._c is not None

        n = dataset.num_rows()

        return Cell(count=n, score=isolation_score(depth, n, self._c), depth=depth)

    def search(self, sample: Sequence[Any]) -> Cell | None:
        """
        Search the tree for the leaf a sample falls in.
        Args:
            sample: Feature values in the training column order.
        Returns:
            The leaf reached, or None if the walk hits a missing child.
        Raises:
            TreeNotGrownError: If the tree is bare.
            SchemaMismatchError: If the sample does not match the training columns.
        """
        if self._root is None:
            raise TreeNotGrownError("The tree has not been grown.")

        self._check_sample(sample)

        current: Node | None = self._root

        while current is not None:
            if isinstance(current, Cell):
                return current

            current = current.child(sample[current.index])

        return None

    def _check_sample(self, sample: Sequence[Any]) -> None:
        assert self._types is not None

        if len(sample) != len(self._types):
            raise SchemaMismatchError(
                f"Sample has {len(sample)} features, the tree was grown on {len(self._types)}."
            )

        for column, (feature, expected) in enumerate(zip(sample, self._types)):
            try:
                actual = column_type_of(feature)
            except TypeError as exc:
                raise SchemaMismatchError(f"Column {column}: {exc}") from exc

            if actual is not expected:
                raise SchemaMismatchError(
                    f"Column {column} is {expected.value}, {feature!r} given."
                )

    def leaves(self) -> Iterator[Cell]:
        """Yield every leaf from left to right."""
        stack: list[Node | None] = [self._root]

        while stack:
            node = stack.pop()

            if isinstance(node, Cell):
                yield node
            elif isinstance(node, Isolator):
                stack.append(node.right)
                stack.append(node.left)

    def height(self) -> int:
        """Depth of the deepest leaf, 0 for a bare tree."""
        return max((leaf.depth for leaf in self.leaves()), default=0)

    def plot_partition_space_2D(self, dataset: Dataset, show: bool = True) -> Any:
        """
        Visualize the 2D space partitioning created by this tree.
        Only works for 2 continuous features.
        Args:
            dataset: Samples to scatter under the split lines.
            show: Whether to call plt.show().
        Returns:
            The matplotlib axes drawn on.
        """
        if self._root is None:
            raise TreeNotGrownError("The tree has not been grown.")

        if dataset.num_columns() != 2 or ColumnType.CATEGORICAL in dataset.types():
            raise ValueError("Partition plots need exactly 2 continuous features.")

        mins = np.min(dataset.samples, axis=0) - self.PADDING
        maxs = np.max(dataset.samples, axis=0) + self.PADDING

        feature_limits = [[float(mins[i]), float(maxs[i])] for i in range(2)]

        plt.title("Space Partition Isolation Tree")
        plt.xlabel("X")
        plt.ylabel("Y")

        plt.plot([feature_limits[0][0], feature_limits[0][1]],
                 [feature_limits[1][0], feature_limits[1][0]], c="gray")
        plt.plot([feature_limits[0][0], feature_limits[0][1]],
                 [feature_limits[1][1], feature_limits[1][1]], c="gray")
        plt.plot([feature_limits[0][0], feature_limits[0][0]],
                 [feature_limits[1][0], feature_limits[1][1]], c="gray")
        plt.plot([feature_limits[0][1], feature_limits[0][1]],
                 [feature_limits[1][0], feature_limits[1][1]], c="gray")

        self._plot_splits(self._root, feature_limits)

        plt.scatter(dataset.samples[:, 0], dataset.samples[:, 1], c="lightgray", s=5)

        axes = plt.gca()

        if show:
            plt.show()

        return axes

    def _plot_splits(self, node: Node | None, feature_limits: list[list[float]]) -> None:
        """Plots vertical/horizontal lines for each split inside its region."""
        if not isinstance(node, Isolator):
            return

        if node.index == 0:
            plt.plot([node.value, node.value],
                     [feature_limits[1][0], feature_limits[1][1]], c="gray")
        else:
            plt.plot([feature_limits[0][0], feature_limits[0][1]],
                     [node.value, node.value], c="gray")

        feature_limits_lower = deepcopy(feature_limits)
        feature_limits_lower[node.index][1] = node.value

        feature_limits_upper = deepcopy(feature_limits)
        feature_limits_upper[node.index][0] = node.value

        self._plot_splits(node.left, feature_limits_lower)
        self._plot_splits(node.right, feature_limits_upper)
