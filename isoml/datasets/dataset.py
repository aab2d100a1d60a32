"""
This module contains the Dataset and Labeled containers that the estimators
train on. A dataset is a table of samples whose columns are either
continuous (real numbers) or categorical (strings).
"""

from __future__ import annotations

import numbers
from enum import Enum
from typing import Any, Iterator, Sequence

import numpy as np
import numpy.typing as npt


class ColumnType(Enum):
    """Type of a feature column."""

    CONTINUOUS = "continuous"
    CATEGORICAL = "categorical"


def column_type_of(value: Any) -> ColumnType:
    """
    Args:
        value: A single feature value.
    Returns:
        The column type a feature of this value belongs to.
    Raises:
        TypeError: If the value is neither a string nor a real number.
    """
    if isinstance(value, str):
        return ColumnType.CATEGORICAL

    if isinstance(value, numbers.Real):
        return ColumnType.CONTINUOUS

    raise TypeError(
        f"Feature values must be strings or real numbers, {type(value).__name__} given."
    )


class Dataset:
    """
    Unlabeled tabular dataset.

    Samples are held in a 2-D numpy array: float64 when every column is
    continuous, object otherwise so that strings keep their identity.
    Attributes:
        samples: Array of shape (n_samples, n_features).
    """

    def __init__(
        self,
        samples: Sequence[Sequence[Any]] | npt.NDArray[Any],
        types: Sequence[ColumnType] | None = None,
    ) -> None:
        """
        Initialize a Dataset and infer (or check) the column types.
        Args:
            samples: Rows of feature values, all of the same length.
            types: Column types. Required only for a dataset with no rows.
        Raises:
            ValueError: If rows are ragged, the array is not 2-D, a column
                mixes strings and numbers, or a continuous value is NaN or
                infinite.
        """
        if isinstance(samples, np.ndarray) and samples.dtype.kind in "biuf":
            if samples.ndim != 2:
                raise ValueError(f"Samples must be 2-dimensional, {samples.ndim} dimensions given.")

            inferred = [ColumnType.CONTINUOUS] * samples.shape[1]
            self._check_types(types, inferred)

            if not np.all(np.isfinite(samples)):
                raise ValueError("Continuous features must be finite, NaN or infinity given.")

            self.samples = samples.astype(np.float64)
            self._types = inferred
            return

        rows = [list(row) for row in samples]

        if not rows:
            if types is None:
                raise ValueError("Column types are required to build a dataset with no rows.")

            self._types = list(types)
            self.samples = self._empty(self._types)
            return

        n_columns = len(rows[0])

        for offset, row in enumerate(rows):
            if len(row) != n_columns:
                raise ValueError(
                    f"Row {offset} has {len(row)} features, {n_columns} expected."
                )

        inferred = [column_type_of(value) for value in rows[0]]

        for offset, row in enumerate(rows):
            for column, value in enumerate(row):
                if column_type_of(value) is not inferred[column]:
                    raise ValueError(
                        f"Column {column} is {inferred[column].value} but row"
                        f" {offset} holds {value!r}."
                    )

                if inferred[column] is ColumnType.CONTINUOUS and not np.isfinite(value):
                    raise ValueError(
                        f"Continuous features must be finite, row {offset} holds"
                        f" {value!r} in column {column}."
                    )

        self._check_types(types, inferred)
        self._types = inferred

        if all(kind is ColumnType.CONTINUOUS for kind in inferred):
            self.samples = np.array(rows, dtype=np.float64)
        else:
            self.samples = np.empty((len(rows), n_columns), dtype=object)
            for offset, row in enumerate(rows):
                self.samples[offset, :] = row

    @classmethod
    def from_array(cls, array: npt.ArrayLike) -> Dataset:
        """Build an unlabeled dataset from any 2-D array-like."""
        return cls(np.asarray(array))

    @staticmethod
    def _check_types(types: Sequence[ColumnType] | None, inferred: list[ColumnType]) -> None:
        if types is not None and list(types) != inferred:
            raise ValueError("Declared column types do not match the samples.")

    @staticmethod
    def _empty(types: Sequence[ColumnType]) -> npt.NDArray[Any]:
        if all(kind is ColumnType.CONTINUOUS for kind in types):
            return np.empty((0, len(types)), dtype=np.float64)
        return np.empty((0, len(types)), dtype=object)

    def _select(self, selector: npt.NDArray[Any]) -> Dataset:
        """Return a dataset with the rows picked by an index or mask array."""
        subset = Dataset.__new__(Dataset)
        subset.samples = self.samples[selector]
        subset._types = list(self._types)
        return subset

    @property
    def shape(self) -> tuple[int, int]:
        return self.num_rows(), self.num_columns()

    def num_rows(self) -> int:
        return int(self.samples.shape[0])

    def num_columns(self) -> int:
        return len(self._types)

    def types(self) -> list[ColumnType]:
        return list(self._types)

    def column_type(self, index: int) -> ColumnType:
        return self._types[index]

    def row(self, index: int) -> npt.NDArray[Any]:
        return self.samples[index]

    def column(self, index: int) -> npt.NDArray[Any]:
        return self.samples[:, index]

    def empty(self) -> bool:
        return self.num_rows() == 0

    def homogeneous(self) -> bool:
        """True when every row equals the first one (or there are no rows)."""
        if self.num_rows() == 0:
            return True
        return bool(np.all(self.samples == self.samples[0]))

    def partition(self, index: int, value: Any) -> tuple[Dataset, Dataset]:
        """
        Split the rows on a column/value predicate.
        Categorical columns compare for equality, continuous columns with
        less-than.
        Args:
            index: Column to test.
            value: Pivot value.
        Returns:
            (rows satisfying the predicate, the remaining rows).
        """
        values = self.samples[:, index]

        if self._types[index] is ColumnType.CATEGORICAL:
            mask = np.array([feature == value for feature in values], dtype=bool)
        else:
            mask = np.asarray(values < value, dtype=bool)

        return self._select(mask), self._select(~mask)

    def take(self, indices: Sequence[int] | npt.NDArray[np.integer[Any]]) -> Dataset:
        return self._select(np.asarray(indices, dtype=np.intp))

    def randomize(self, rng: np.random.Generator) -> Dataset:
        """Return a copy with the rows shuffled."""
        return self._select(rng.permutation(self.num_rows()))

    def subsample(self, size: int | None, rng: np.random.Generator) -> Dataset:
        """
        Args:
            size: Number of rows to draw without replacement. If None or
                >= n_samples, the dataset itself is returned.
            rng: Random generator used for the draw.
        """
        if size is None or size >= self.num_rows():
            return self

        return self._select(rng.choice(self.num_rows(), size, replace=False))

    def __len__(self) -> int:
        return self.num_rows()

    def __iter__(self) -> Iterator[npt.NDArray[Any]]:
        return iter(self.samples)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rows={self.num_rows()}, columns={self.num_columns()})"


class Labeled(Dataset):
    """
    Dataset with one label per sample.
    Attributes:
        samples: Array of shape (n_samples, n_features).
    """

    def __init__(
        self,
        samples: Sequence[Sequence[Any]] | npt.NDArray[Any],
        labels: Sequence[Any] | npt.NDArray[Any],
        types: Sequence[ColumnType] | None = None,
    ) -> None:
        super().__init__(samples, types)

        self._labels = np.asarray(labels)

        if self._labels.ndim != 1 or len(self._labels) != self.num_rows():
            raise ValueError(
                f"The number of labels must equal the number of samples,"
                f" {self._labels.size} labels and {self.num_rows()} samples given."
            )

    def _select(self, selector: npt.NDArray[Any]) -> Labeled:
        subset = Labeled.__new__(Labeled)
        subset.samples = self.samples[selector]
        subset._types = list(self._types)
        subset._labels = self._labels[selector]
        return subset

    def labels(self) -> npt.NDArray[Any]:
        return self._labels

    def unlabel(self) -> Dataset:
        """Return the samples as an unlabeled dataset."""
        return Dataset._select(self, np.arange(self.num_rows()))
