from __future__ import annotations

__all__ = []

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from kneighborhood.exceptions import ConfigurationError
from kneighborhood.protocols import DatasetView
from kneighborhood.types import Identifier, TypeRestriction
from kneighborhood.utils._array import to_numpy


class _PrecomputedDistanceQuery:
    __slots__ = ["_dataset", "_matrix"]

    def __init__(self, dataset: Any, matrix: NDArray[np.float64]) -> None:
        self._dataset = dataset
        self._matrix = matrix

    def distance(self, a: Identifier, b: Identifier) -> float:
        return float(self._matrix[self._dataset.index_of(a), self._dataset.index_of(b)])

    def distances(self, query: Identifier, candidates: Sequence[Identifier]) -> NDArray[np.float64]:
        if len(candidates) == 0:
            return np.empty(0, dtype=np.float64)
        return self._matrix[self._dataset.index_of(query), self._dataset.index_of(candidates)]


class PrecomputedDistance:
    """
    Distance capability over a precomputed square distance matrix.

    Entry `matrix[i, j]` is the distance between the objects stored at positions
    `i` and `j` of the dataset (see `index_of`).

    Parameters
    ----------
    matrix : ArrayLike
        Square array of shape (n_samples, n_samples)
    name : str, default "precomputed"
        Display name

    Raises
    ------
    ConfigurationError
        If `matrix` is not square.
    """

    def __init__(self, matrix: ArrayLike, name: str = "precomputed") -> None:
        try:
            self._matrix: NDArray[np.float64] = to_numpy(matrix, dtype=np.float64, required_ndim=2)
        except ValueError as e:
            raise ConfigurationError(f"Invalid distance matrix: {e}") from e
        if self._matrix.shape[0] != self._matrix.shape[1]:
            raise ConfigurationError(f"Distance matrix must be square, got shape {self._matrix.shape}.")
        self._matrix.setflags(write=False)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def input_type_restriction(self) -> TypeRestriction:
        return TypeRestriction(object)

    def instantiate(self, dataset: DatasetView) -> _PrecomputedDistanceQuery:
        if not hasattr(dataset, "index_of"):
            raise ConfigurationError(
                f"{self.__class__.__name__} requires a dataset providing index_of, got {dataset!r}."
            )
        if len(dataset) != len(self._matrix):
            raise ConfigurationError(
                f"Distance matrix covers {len(self._matrix)} objects but the dataset has {len(dataset)}."
            )
        return _PrecomputedDistanceQuery(dataset, self._matrix)
