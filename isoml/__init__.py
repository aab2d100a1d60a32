"""Anomaly detection and machine learning utilities.

This package provides:
- datasets: Tabular dataset containers with continuous and categorical columns
- isolation: Isolation trees grown by random splitting and the forest built on them
- anomaly_detectors: Robust z score detector
- reports: Classification report
- cross_validation: Hold out and k-fold validators with their metrics
- neural_net: Weight initializers
- strategies: Value guessing strategies
"""

from . import anomaly_detectors
from . import cross_validation
from . import datasets
from . import isolation
from . import neural_net
from . import reports
from . import strategies

__all__ = [
    "anomaly_detectors",
    "cross_validation",
    "datasets",
    "isolation",
    "neural_net",
    "reports",
    "strategies",
]
