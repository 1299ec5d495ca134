"""
Exact k-nearest-neighbor selection for a single query identifier.
"""

from __future__ import annotations

__all__ = []

import heapq
import math
import numbers
from collections.abc import Sequence
from typing import Any, Literal

import numpy as np
from numpy.typing import NDArray

from kneighborhood.exceptions import InvalidDistanceError
from kneighborhood.protocols import BatchDistanceQuery, DistanceQuery
from kneighborhood.types import Identifier, Neighbor
from kneighborhood.utils._array import as_numpy

SelectionAlgorithm = Literal["auto", "heap", "batch"]


def _as_distance(value: Any, query: Identifier, candidate: Identifier) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidDistanceError(
            f"Distance between {query!r} and {candidate!r} is not a number: {value!r}", (query, candidate)
        )
    distance = float(value)
    if math.isnan(distance):
        raise InvalidDistanceError(f"Distance between {query!r} and {candidate!r} is NaN", (query, candidate))
    return distance


def _select_heap(
    query: Identifier, candidates: Sequence[Identifier], distance_query: DistanceQuery, k: int
) -> tuple[Neighbor, ...]:
    # max-heap on (distance, rank) via negation; rank is the position in the sorted candidates
    heap: list[tuple[float, int, Identifier]] = []
    for rank, candidate in enumerate(candidates):
        if candidate == query:
            continue
        distance = _as_distance(distance_query.distance(query, candidate), query, candidate)
        if len(heap) < k:
            heapq.heappush(heap, (-distance, -rank, candidate))
        elif (distance, rank) < (-heap[0][0], -heap[0][1]):
            heapq.heapreplace(heap, (-distance, -rank, candidate))
    return tuple(Neighbor(c, -d) for d, _, c in sorted(heap, key=lambda e: (-e[0], -e[1])))


def _select_batch(
    query: Identifier, candidates: Sequence[Identifier], distance_query: BatchDistanceQuery, k: int
) -> tuple[Neighbor, ...]:
    others = [c for c in candidates if c != query]
    if not others:
        return ()
    values = distance_query.distances(query, others)
    try:
        array = as_numpy(values)
    except (TypeError, ValueError) as e:
        raise InvalidDistanceError(f"Distances for {query!r} are not numeric: {e}") from e
    if array.dtype.kind not in "fiu":
        raise InvalidDistanceError(f"Distances for {query!r} are not numeric: dtype {array.dtype}")
    distances: NDArray[np.float64] = array.astype(np.float64, copy=False)
    if distances.shape != (len(others),):
        raise InvalidDistanceError(
            f"Expected {len(others)} distances for {query!r}, got an array of shape {distances.shape}"
        )
    invalid = np.flatnonzero(np.isnan(distances))
    if invalid.size:
        candidate = others[int(invalid[0])]
        raise InvalidDistanceError(f"Distance between {query!r} and {candidate!r} is NaN", (query, candidate))

    if k < len(others):
        # keep every candidate tied with the k-th distance, then a stable sort resolves ties by rank
        kth = np.partition(distances, k - 1)[k - 1]
        kept = np.flatnonzero(distances <= kth)
        order = kept[np.argsort(distances[kept], kind="stable")][:k]
    else:
        order = np.argsort(distances, kind="stable")
    return tuple(Neighbor(others[i], float(distances[i])) for i in order)


def select_neighbors(
    query: Identifier,
    candidates: Sequence[Identifier],
    distance_query: DistanceQuery,
    k: int,
    algorithm: SelectionAlgorithm = "auto",
) -> tuple[Neighbor, ...]:
    """
    Selects the k nearest other identifiers to `query`.

    Parameters
    ----------
    query : Identifier
        The identifier to find neighbors for. It is never returned as its own neighbor.
    candidates : Sequence[Identifier]
        All identifiers of the dataset in ascending identifier order
    distance_query : DistanceQuery
        Distance function bound to the dataset
    k : int
        Maximum number of neighbors to return
    algorithm : "auto", "heap" or "batch", default "auto"
        "heap" keeps a bounded max-heap of the best k candidates, "batch" evaluates
        all candidates at once through `distance_query.distances` and partitions
        the result. "auto" uses "batch" when the distance query supports it.

    Returns
    -------
    tuple[Neighbor, ...]
        At most `min(k, len(candidates) - 1)` neighbors in ascending order of
        distance, ties broken by ascending identifier.

    Raises
    ------
    InvalidDistanceError
        If the distance function produces NaN or a non-numeric value.
    ValueError
        If `k` is negative or `algorithm` is unknown.

    Example
    -------
    >>> from kneighborhood.data import ObjectDataset
    >>> from kneighborhood.distances import FunctionDistance

    >>> ds = ObjectDataset({"A": 0, "B": 1, "C": 2, "D": 10})
    >>> dq = FunctionDistance(lambda a, b: abs(a - b)).instantiate(ds)
    >>> select_neighbors("D", ["A", "B", "C", "D"], dq, k=2)
    (Neighbor(id='C', distance=8.0), Neighbor(id='B', distance=9.0))
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}.")
    if algorithm not in ("auto", "heap", "batch"):
        raise ValueError(f"Unknown selection algorithm '{algorithm}'.")
    if k == 0:
        return ()

    use_batch = algorithm == "batch" or (algorithm == "auto" and isinstance(distance_query, BatchDistanceQuery))
    if use_batch:
        if not isinstance(distance_query, BatchDistanceQuery):
            raise ValueError(f"{type(distance_query).__name__} does not support batch distance evaluation.")
        return _select_batch(query, candidates, distance_query, k)
    return _select_heap(query, candidates, distance_query, k)
