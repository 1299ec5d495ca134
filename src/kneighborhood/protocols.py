"""
Common type protocols used for interoperability with kneighborhood.
"""

from __future__ import annotations

__all__ = [
    "BatchDistanceQuery",
    "DatasetView",
    "DistanceFunction",
    "DistanceQuery",
]

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from kneighborhood.types import Identifier, TypeRestriction


@runtime_checkable
class DatasetView(Protocol):
    """
    Protocol for a read-only view over a collection of identified objects.

    The set of identifiers must remain stable for the duration of a build.

    Example
    -------
    >>> import numpy as np
    >>> from kneighborhood.data import ArrayDataset
    >>> from kneighborhood.protocols import DatasetView

    >>> isinstance(ArrayDataset(np.zeros((3, 2))), DatasetView)
    True
    """

    @property
    def data_type(self) -> type: ...
    @property
    def dim(self) -> int | None: ...
    def enumerate(self) -> Sequence[Identifier]: ...
    def __contains__(self, id: object, /) -> bool: ...
    def __getitem__(self, id: Any, /) -> Any: ...
    def __len__(self) -> int: ...


@runtime_checkable
class DistanceQuery(Protocol):
    """Protocol for a distance function bound to a single dataset."""

    def distance(self, a: Any, b: Any, /) -> float: ...


@runtime_checkable
class BatchDistanceQuery(DistanceQuery, Protocol):
    """
    Protocol for a bound distance function that can evaluate one query against many candidates.

    `distances(query, candidates)` must return a 1D array aligned with `candidates`.
    """

    def distances(self, query: Any, candidates: Sequence[Identifier], /) -> NDArray[np.float64]: ...


@runtime_checkable
class DistanceFunction(Protocol):
    """Protocol for a pluggable distance capability."""

    @property
    def name(self) -> str: ...
    @property
    def input_type_restriction(self) -> TypeRestriction: ...
    def instantiate(self, dataset: DatasetView) -> DistanceQuery: ...
