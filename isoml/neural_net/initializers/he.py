"""
He weight initializer.

Designed for hidden layers that feed into rectified linear activations such
as ReLU, Leaky ReLU, ELU and SELU. Weights are drawn uniformly within
+/- (6 / (fan_in + fan_out)) ** (1 / sqrt(2)).

References:
    K. He et al. (2015). Delving Deep into Rectifiers: Surpassing
    Human-Level Performance on ImageNet Classification.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt

ETA = 0.70710678118


class He:
    """
    Attributes:
        rng: Random generator the weights are drawn from.
    """

    def __init__(self, random_state: int | np.random.Generator | None = None) -> None:
        self.rng = np.random.default_rng(random_state)

    @staticmethod
    def scale(fan_in: int, fan_out: int) -> float:
        return float((6.0 / (fan_in + fan_out)) ** ETA)

    def init(self, fan_in: int, fan_out: int) -> npt.NDArray[np.floating[Any]]:
        """
        Args:
            fan_in: Number of inputs to the layer.
            fan_out: Number of outputs of the layer.
        Returns:
            Weight matrix of shape (fan_out, fan_in).
        """
        if fan_in < 1 or fan_out < 1:
            raise ValueError(f"Fan in and fan out must be at least 1, {fan_in} and {fan_out} given.")

        limit = self.scale(fan_in, fan_out)

        return self.rng.uniform(-limit, limit, size=(fan_out, fan_in))
