"""
Neighborhoods based on k nearest neighbors.
"""

from __future__ import annotations

__all__ = []

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from kneighborhood._output import set_metadata
from kneighborhood.core._build import build_neighborhood
from kneighborhood.core._selection import SelectionAlgorithm
from kneighborhood.distances._base import resolve_distance
from kneighborhood.exceptions import ConfigurationError, IncompatibleDataError, UnknownIdentifierError
from kneighborhood.neighborhood._base import NeighborSetPredicate, NeighborSetPredicateFactory
from kneighborhood.protocols import DatasetView, DistanceFunction
from kneighborhood.types import Identifier, Neighbor, TypeRestriction

_logger = logging.getLogger(__name__)

_ALGORITHMS = ("auto", "heap", "batch")


class KNearestNeighborNeighborhood(NeighborSetPredicate, Mapping[Identifier, tuple[Identifier, ...]]):
    """
    Precomputed k nearest neighbor lists of every object in a dataset.

    Instances are created by `KNearestNeighborNeighborhoodFactory.build` and are
    immutable. They can be shared between threads without locking.

    Parameters
    ----------
    neighborhood : Mapping[Identifier, tuple[Neighbor, ...]]
        Read-only mapping from each identifier to its ordered neighbor list
    k : int
        Number of neighbors the lists were built with
    distance_name : str
        Name of the distance function used

    Example
    -------
    >>> from kneighborhood import KNearestNeighborNeighborhoodFactory
    >>> from kneighborhood.data import ObjectDataset

    >>> factory = KNearestNeighborNeighborhoodFactory(2, lambda a, b: abs(a - b))
    >>> nbh = factory.build(ObjectDataset({"A": 0, "B": 1, "C": 2, "D": 10}))
    >>> nbh.neighbors_of("A")
    ('B', 'C')
    >>> nbh.neighbor_list("D")
    (Neighbor(id='C', distance=8.0), Neighbor(id='B', distance=9.0))
    """

    long_name = "K Nearest Neighbors Neighborhood"
    short_name = "k-neighbors-neighborhood"

    def __init__(self, neighborhood: Mapping[Identifier, tuple[Neighbor, ...]], k: int, distance_name: str) -> None:
        object.__setattr__(self, "_store", neighborhood)
        object.__setattr__(self, "_k", k)
        object.__setattr__(self, "_distance_name", distance_name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable.")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable.")

    @property
    def k(self) -> int:
        return self._k

    @property
    def distance_name(self) -> str:
        return self._distance_name

    def neighbor_list(self, id: Identifier) -> tuple[Neighbor, ...]:
        """
        Ordered neighbors of `id` with their distances.

        Raises
        ------
        UnknownIdentifierError
            If `id` was not part of the dataset at build time.
        """
        try:
            return self._store[id]
        except (KeyError, TypeError):
            raise UnknownIdentifierError(f"Identifier {id!r} is not part of this neighborhood.") from None

    def neighbors_of(self, id: Identifier) -> tuple[Identifier, ...]:
        """
        Identifiers of the neighbors of `id`, nearest first.

        Raises
        ------
        UnknownIdentifierError
            If `id` was not part of the dataset at build time.
        """
        return tuple(n.id for n in self.neighbor_list(id))

    def neighbor_set(self, id: Identifier) -> frozenset[Identifier]:
        """
        Identifiers of the neighbors of `id`, without order.

        Raises
        ------
        UnknownIdentifierError
            If `id` was not part of the dataset at build time.
        """
        return frozenset(n.id for n in self.neighbor_list(id))

    def describe(self) -> str:
        return f"{self.long_name} (k={self._k}, distance={self._distance_name}, size={len(self._store)})"

    def __getitem__(self, id: Identifier) -> tuple[Identifier, ...]:
        return self.neighbors_of(id)

    def __contains__(self, id: object) -> bool:
        try:
            return id in self._store
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Identifier]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(k={self._k}, distance={self._distance_name!r}, size={len(self._store)})"

    def __str__(self) -> str:
        return self.describe()


class KNearestNeighborNeighborhoodFactory(NeighborSetPredicateFactory):
    """
    Builds `KNearestNeighborNeighborhood` predicates for datasets.

    The factory holds only its configuration and can be reused for any number
    of compatible datasets.

    Parameters
    ----------
    k : int
        Number of neighbors per object, must be non-negative
    distance : DistanceFunction, str or Callable
        Distance capability, a `MetricDistance` metric name or a callable over pairs of objects
    algorithm : "auto", "heap" or "batch", default "auto"
        Selection algorithm used for each object
    processes : int or None, default None
        Worker processes for construction, defaults to `config.get_max_processes()`
    verbose : bool, default True
        Whether to show a progress bar while building

    Raises
    ------
    ConfigurationError
        If `k` is not a non-negative integer, or the distance function or algorithm is invalid.
    """

    K_ID = "neighborhood.k"
    """Configuration key for the number of neighbors."""
    DISTANCEFUNCTION_ID = "neighborhood.distancefunction"
    """Configuration key for the distance function."""

    def __init__(
        self,
        k: int,
        distance: DistanceFunction | str | Callable[[Any, Any], Any],
        *,
        algorithm: SelectionAlgorithm = "auto",
        processes: int | None = None,
        verbose: bool = True,
    ) -> None:
        if isinstance(k, bool) or not isinstance(k, int):
            raise ConfigurationError(f"k must be an integer, got {type(k).__name__}.")
        if k < 0:
            raise ConfigurationError(f"k must be non-negative, got {k}.")
        if algorithm not in _ALGORITHMS:
            raise ConfigurationError(f"algorithm must be one of {_ALGORITHMS}, got '{algorithm}'.")
        if processes == 0:
            raise ConfigurationError("processes cannot be zero; use None to default to the configured value.")

        self._distance = resolve_distance(distance)
        restriction = self._distance.input_type_restriction
        if not isinstance(restriction, TypeRestriction):
            raise ConfigurationError(
                f"Distance function {self._distance!r} declares an unusable input type restriction: {restriction!r}."
            )
        self.k = k
        self.algorithm: SelectionAlgorithm = algorithm
        self.processes = processes
        self.verbose = verbose

    @property
    def distance(self) -> DistanceFunction:
        return self._distance

    @property
    def input_type_restriction(self) -> TypeRestriction:
        return self._distance.input_type_restriction

    @classmethod
    def parameterize(cls, config: Mapping[str, Any]) -> KNearestNeighborNeighborhoodFactory:
        """
        Creates a factory from a flat configuration mapping.

        Reads `"neighborhood.k"` and `"neighborhood.distancefunction"`. Any other
        keys under the `"neighborhood."` prefix are passed through as keyword
        arguments (e.g. `"neighborhood.algorithm"`).

        Parameters
        ----------
        config : Mapping[str, Any]
            Configuration values

        Returns
        -------
        KNearestNeighborNeighborhoodFactory

        Raises
        ------
        ConfigurationError
            Listing every missing or invalid parameter.

        Example
        -------
        >>> factory = KNearestNeighborNeighborhoodFactory.parameterize(
        ...     {"neighborhood.k": 3, "neighborhood.distancefunction": "cosine"}
        ... )
        >>> factory.k, factory.distance.name
        (3, 'cosine')
        """
        errors: list[str] = []
        if cls.K_ID not in config:
            errors.append(f"missing required parameter '{cls.K_ID}'")
        if cls.DISTANCEFUNCTION_ID not in config:
            errors.append(f"missing required parameter '{cls.DISTANCEFUNCTION_ID}'")

        options: dict[str, Any] = {}
        for key, value in config.items():
            if key in (cls.K_ID, cls.DISTANCEFUNCTION_ID) or not key.startswith("neighborhood."):
                continue
            option = key.removeprefix("neighborhood.")
            if option not in ("algorithm", "processes", "verbose"):
                errors.append(f"unknown parameter '{key}'")
            else:
                options[option] = value

        if not errors:
            try:
                return cls(config[cls.K_ID], config[cls.DISTANCEFUNCTION_ID], **options)
            except ConfigurationError as e:
                errors.append(str(e))
        raise ConfigurationError("Invalid neighborhood configuration: " + "; ".join(errors))

    def check_compatible(self, dataset: DatasetView) -> None:
        """
        Verifies that `dataset` can be used with the configured distance function.

        Raises
        ------
        IncompatibleDataError
            If `dataset` is not a dataset view or does not satisfy the input type restriction.
        """
        if not isinstance(dataset, DatasetView):
            raise IncompatibleDataError(f"Expected a dataset view, got {type(dataset).__name__}.")
        restriction = self.input_type_restriction
        if not restriction.is_satisfied_by(dataset):
            dim = dataset.dim
            found = dataset.data_type.__name__ if dim is None else f"{dataset.data_type.__name__}[dim={dim}]"
            raise IncompatibleDataError(
                f"Distance function '{self._distance.name}' requires {restriction}, dataset provides {found}."
            )

    @set_metadata(state=["k", "algorithm", "distance"])
    def build(self, dataset: DatasetView) -> KNearestNeighborNeighborhood:
        """
        Computes the neighborhood of every object in `dataset`.

        Parameters
        ----------
        dataset : DatasetView
            The dataset to build neighborhoods for

        Returns
        -------
        KNearestNeighborNeighborhood

        Raises
        ------
        IncompatibleDataError
            If `dataset` is incompatible with the distance function.
        InvalidDistanceError
            If the distance function produces an invalid value for any pair.
        """
        self.check_compatible(dataset)
        distance_query = self._distance.instantiate(dataset)
        _logger.info(
            f"Building {KNearestNeighborNeighborhood.short_name} with k={self.k} and "
            f"distance '{self._distance.name}' over {len(dataset)} objects"
        )
        neighborhood = build_neighborhood(
            dataset,
            distance_query,
            self.k,
            algorithm=self.algorithm,
            processes=self.processes,
            verbose=self.verbose,
        )
        return KNearestNeighborNeighborhood(neighborhood, self.k, self._distance.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(k={self.k}, distance={self._distance!r}, algorithm={self.algorithm!r})"
