"""Cross validation of estimators against labeled data."""

from .metrics import Accuracy, F1Score, Metric
from .validators import HoldOut, KFold, Validator

__all__ = [
    "Accuracy",
    "F1Score",
    "HoldOut",
    "KFold",
    "Metric",
    "Validator",
]
