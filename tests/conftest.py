from __future__ import annotations

import numpy as np
import pytest

from kneighborhood.data import ArrayDataset, ObjectDataset
from kneighborhood.distances import FunctionDistance


def absdiff(a, b):
    return abs(a - b)


@pytest.fixture(scope="session")
def RNG():
    return np.random.default_rng(0)


@pytest.fixture
def scalar_dataset():
    return ObjectDataset({"A": 0, "B": 1, "C": 2, "D": 10}, data_type=int)


@pytest.fixture
def absdiff_distance():
    return FunctionDistance(absdiff, input_type=int, name="absdiff")


@pytest.fixture
def vector_dataset(RNG):
    return ArrayDataset(RNG.random((40, 3)))


@pytest.fixture
def tied_dataset():
    # every point of a regular grid has several equidistant neighbors
    grid = np.array([[x, y] for x in range(4) for y in range(4)], dtype=np.float64)
    return ArrayDataset(grid, ids=[f"p{i:02d}" for i in range(len(grid))])
