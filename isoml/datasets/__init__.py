"""Tabular dataset containers.

Datasets hold samples whose columns are either continuous or categorical
and know how to partition themselves on a column/value predicate.
"""

from .dataset import ColumnType, Dataset, Labeled, column_type_of

__all__ = [
    "ColumnType",
    "Dataset",
    "Labeled",
    "column_type_of",
]
