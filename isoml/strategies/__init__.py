"""Strategies for guessing a value from a sample of values."""

from .blurry_mean import BlurryMean

__all__ = [
    "BlurryMean",
]
