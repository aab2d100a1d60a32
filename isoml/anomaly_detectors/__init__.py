"""Anomaly detectors that do not rely on tree ensembles."""

from .robust_zscore import RobustZScore

__all__ = [
    "RobustZScore",
]
