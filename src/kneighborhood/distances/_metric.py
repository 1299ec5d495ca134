from __future__ import annotations

__all__ = []

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from kneighborhood.exceptions import ConfigurationError, InvalidDistanceError
from kneighborhood.protocols import DatasetView
from kneighborhood.types import Identifier, TypeRestriction

_logger = logging.getLogger(__name__)

# real-valued cdist metrics that need no statistics of the whole input
_METRICS = (
    "braycurtis",
    "canberra",
    "chebyshev",
    "cityblock",
    "correlation",
    "cosine",
    "euclidean",
    "jensenshannon",
    "minkowski",
    "sqeuclidean",
)
_ALIASES = {"manhattan": "cityblock", "l1": "cityblock", "l2": "euclidean"}


class _MetricDistanceQuery:
    __slots__ = ["_dataset", "_data", "_metric", "_kwds"]

    def __init__(self, dataset: Any, metric: str, kwds: dict[str, Any]) -> None:
        self._dataset = dataset
        self._data: NDArray[np.float64] = np.asarray(dataset.data, dtype=np.float64)
        self._metric = metric
        self._kwds = kwds

    def _pairwise(
        self, x: NDArray[np.float64], y: NDArray[np.float64], pair: tuple[Any, Any] | None
    ) -> NDArray[np.float64]:
        # cdist computes each pair on its own; a pair has the same value alone or in a batch
        if not (np.isfinite(x).all() and np.isfinite(y).all()):
            raise InvalidDistanceError(f"Unable to compute '{self._metric}' distance of non-finite vectors.", pair)
        try:
            return cdist(x, y, metric=self._metric, **self._kwds)
        except ValueError as e:
            raise InvalidDistanceError(f"Unable to compute '{self._metric}' distance: {e}", pair) from e

    def distance(self, a: Identifier, b: Identifier) -> float:
        x = self._data[self._dataset.index_of(a)][None, :]
        y = self._data[self._dataset.index_of(b)][None, :]
        return float(self._pairwise(x, y, (a, b))[0, 0])

    def distances(self, query: Identifier, candidates: Sequence[Identifier]) -> NDArray[np.float64]:
        if len(candidates) == 0:
            return np.empty(0, dtype=np.float64)
        x = self._data[self._dataset.index_of(query)][None, :]
        y = self._data[self._dataset.index_of(candidates)]
        return self._pairwise(x, y, None)[0]


class MetricDistance:
    """
    Vector distance capability backed by `scipy.spatial.distance.cdist`.

    Parameters
    ----------
    metric : str, default "euclidean"
        A real-valued metric name of `scipy.spatial.distance.cdist`, or one of
        the aliases "manhattan", "l1" and "l2"
    dim : int or None, default None
        Required dimensionality of the vectors, or None to accept any
    **kwds
        Additional keyword arguments passed to the metric (e.g. `p` for "minkowski")

    Raises
    ------
    ConfigurationError
        If the metric name is not supported.

    Example
    -------
    >>> import numpy as np
    >>> from kneighborhood.data import ArrayDataset
    >>> from kneighborhood.distances import MetricDistance

    >>> query = MetricDistance("manhattan").instantiate(ArrayDataset(np.array([[0, 0], [3, 4]])))
    >>> query.distance(0, 1)
    7.0
    """

    def __init__(self, metric: str = "euclidean", dim: int | None = None, **kwds: Any) -> None:
        if _ALIASES.get(metric, metric) not in _METRICS:
            supported = sorted(_METRICS + tuple(_ALIASES))
            raise ConfigurationError(f"Unsupported metric '{metric}'. Choose one of {supported}.")
        self._metric = metric
        self._kwds = kwds
        self._restriction = TypeRestriction(np.ndarray, dim)

    @property
    def name(self) -> str:
        return self._metric

    @property
    def metric(self) -> str:
        return self._metric

    @property
    def input_type_restriction(self) -> TypeRestriction:
        return self._restriction

    def instantiate(self, dataset: DatasetView) -> _MetricDistanceQuery:
        if not hasattr(dataset, "data") or not hasattr(dataset, "index_of"):
            raise ConfigurationError(f"{self.__class__.__name__} requires an array-backed dataset, got {dataset!r}.")
        _logger.debug(f"Instantiating '{self._metric}' distance for {dataset!r}")
        return _MetricDistanceQuery(dataset, _ALIASES.get(self._metric, self._metric), self._kwds)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._metric!r})"
