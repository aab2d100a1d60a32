"""Weight initializers for neural network layers."""

from .he import He

__all__ = [
    "He",
]
