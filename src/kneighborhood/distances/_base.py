from __future__ import annotations

__all__ = []

from collections.abc import Callable
from typing import Any

from kneighborhood.distances._metric import MetricDistance
from kneighborhood.exceptions import ConfigurationError
from kneighborhood.protocols import DatasetView, DistanceFunction
from kneighborhood.types import TypeRestriction


class _FunctionDistanceQuery:
    __slots__ = ["_dataset", "_fn"]

    def __init__(self, dataset: DatasetView, fn: Callable[[Any, Any], Any]) -> None:
        self._dataset = dataset
        self._fn = fn

    def distance(self, a: Any, b: Any) -> Any:
        return self._fn(self._dataset[a], self._dataset[b])


class FunctionDistance:
    """
    Distance capability wrapping a plain callable over dataset objects.

    Parameters
    ----------
    fn : Callable[[Any, Any], float]
        Function computing the distance between two objects. It must be picklable
        (e.g. a module-level function) to be used with more than one process.
    input_type : type or tuple of types, default object
        Type of object the function accepts
    name : str or None, default None
        Display name, defaults to the function name

    Example
    -------
    >>> from kneighborhood.data import ObjectDataset
    >>> from kneighborhood.distances import FunctionDistance

    >>> dist = FunctionDistance(lambda a, b: abs(a - b), input_type=int, name="absdiff")
    >>> query = dist.instantiate(ObjectDataset({"A": 0, "D": 10}, data_type=int))
    >>> query.distance("A", "D")
    10
    """

    def __init__(
        self,
        fn: Callable[[Any, Any], Any],
        input_type: type | tuple[type, ...] = object,
        name: str | None = None,
    ) -> None:
        if not callable(fn):
            raise ConfigurationError(f"Distance function must be callable, got {type(fn).__name__}.")
        self._fn = fn
        self._restriction = TypeRestriction(input_type)
        self._name = name or getattr(fn, "__name__", type(fn).__name__)

    @property
    def name(self) -> str:
        return self._name

    @property
    def input_type_restriction(self) -> TypeRestriction:
        return self._restriction

    def instantiate(self, dataset: DatasetView) -> _FunctionDistanceQuery:
        return _FunctionDistanceQuery(dataset, self._fn)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._name}, input_type={self._restriction})"


def resolve_distance(distance: DistanceFunction | str | Callable[[Any, Any], Any]) -> DistanceFunction:
    """
    Resolves a distance specification into a distance capability.

    Parameters
    ----------
    distance : DistanceFunction, str or Callable
        A distance capability, the name of a metric supported by
        `MetricDistance`, or a callable over pairs of objects

    Returns
    -------
    DistanceFunction

    Raises
    ------
    ConfigurationError
        If the specification cannot be resolved.
    """
    if isinstance(distance, str):
        return MetricDistance(distance)
    if isinstance(distance, DistanceFunction):
        return distance
    if callable(distance):
        return FunctionDistance(distance)
    raise ConfigurationError(f"Unable to use {distance!r} as a distance function.")
