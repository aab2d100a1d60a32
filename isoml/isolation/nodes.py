"""
This module contains the node types an isolation tree is made of: Isolator
nodes that split the feature space and Cell leaves that carry the anomaly
score of the samples isolated in them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ..datasets import ColumnType


class SplitKind(Enum):
    """Predicate an Isolator applies to its split column."""

    EQUALITY = "equality"
    LESS_THAN = "less_than"

    @classmethod
    def for_column(cls, column_type: ColumnType) -> SplitKind:
        if column_type is ColumnType.CATEGORICAL:
            return cls.EQUALITY
        return cls.LESS_THAN


@dataclass(frozen=True)
class Cell:
    """
    Leaf of an isolation tree.
    Attributes:
        count: Number of training samples that reached this leaf.
        score: Anomaly score contribution in (0, 1], higher is more anomalous.
        depth: Depth at which the branch was terminated.
    """

    count: int
    score: float
    depth: int


@dataclass(frozen=True)
class Isolator:
    """
    Internal node splitting the samples on a single column.
    Attributes:
        index: Index of the split column.
        value: Split value, taken from a training sample.
        kind: Predicate used to send a sample left.
        left: Subtree of the samples satisfying the predicate.
        right: Subtree of the remaining samples.
    """

    index: int
    value: Any
    kind: SplitKind
    left: Node | None = None
    right: Node | None = None

    def goes_left(self, feature: Any) -> bool:
        if self.kind is SplitKind.EQUALITY:
            return bool(feature == self.value)
        return bool(feature < self.value)

    def child(self, feature: Any) -> Node | None:
        """Return the child a sample with this feature value descends into."""
        return self.left if self.goes_left(feature) else self.right


Node = Union[Isolator, Cell]
