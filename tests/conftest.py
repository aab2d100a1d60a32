"""
Shared pytest fixtures for the isoml test suite.
"""
import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from isoml.datasets import Dataset, Labeled


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def blobs(rng: np.random.Generator) -> Dataset:
    """200 samples from a standard normal in 2 dimensions."""
    return Dataset(rng.normal(size=(200, 2)))


@pytest.fixture
def blobs_with_outliers(rng: np.random.Generator) -> Labeled:
    """
    180 normal samples around the origin and 20 far away outliers,
    labeled 0 and 1 respectively, shuffled.
    """
    normal = rng.normal(size=(180, 2))
    outliers = rng.normal(size=(20, 2)) * 0.5 + 8.0

    samples = np.vstack([normal, outliers])
    labels = np.array([0] * 180 + [1] * 20)

    order = rng.permutation(len(samples))
    return Labeled(samples[order], labels[order])


@pytest.fixture
def mixed() -> Dataset:
    """Samples with one categorical and one continuous column."""
    return Dataset([
        ["red", 1.0],
        ["red", 2.0],
        ["green", 3.0],
        ["blue", 4.0],
        ["green", 5.0],
        ["red", 6.0],
        ["blue", 7.0],
        ["red", 8.0],
    ])
