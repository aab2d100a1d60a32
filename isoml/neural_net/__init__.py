"""Neural network building blocks."""

from . import initializers

__all__ = [
    "initializers",
]
