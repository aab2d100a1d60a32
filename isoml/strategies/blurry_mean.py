"""
This module contains the BlurryMean strategy that guesses a value close to
the mean of the values it was fitted on, with a little uniform noise added.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..exceptions import NotTrainedError


class BlurryMean:
    """
    Guesses the mean plus a random offset of at most blur standard deviations.
    Attributes:
        blur: Maximum offset in standard deviations.
        rng: Random generator for the offset.
    """

    def __init__(self, blur: float = 0.3, random_state: int | np.random.Generator | None = None) -> None:
        if blur < 0.0:
            raise ValueError(f"Blur must be 0 or greater, {blur} given.")

        self.blur = blur
        self.rng = np.random.default_rng(random_state)

        self.mean: float | None = None
        self.stddev: float | None = None

    def fit(self, values: Sequence[float]) -> None:
        if len(values) == 0:
            raise ValueError("Strategy must be fit with at least 1 value.")

        self.mean = float(np.mean(values))
        self.stddev = float(np.std(values))

    def guess(self) -> float:
        if self.mean is None or self.stddev is None:
            raise NotTrainedError("Strategy has not been fitted.")

        return self.mean + float(self.rng.uniform(-self.blur, self.blur)) * self.stddev
