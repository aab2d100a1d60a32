"""Isolation tree implementation for anomaly detection.

This package provides the ITree grown by completely random splitting, its
node types, and the IsolationForest ensemble built on top of it.
"""

from .forest import IsolationForest
from .nodes import Cell, Isolator, Node, SplitKind
from .tree import ITree, calculate_c_factor, isolation_score

__all__ = [
    "Cell",
    "Isolator",
    "Node",
    "SplitKind",
    "ITree",
    "IsolationForest",
    "calculate_c_factor",
    "isolation_score",
]
