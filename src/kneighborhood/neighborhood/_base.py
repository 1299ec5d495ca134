from __future__ import annotations

__all__ = []

from abc import ABC, abstractmethod

from kneighborhood._output import GenericOutput
from kneighborhood.protocols import DatasetView
from kneighborhood.types import Identifier, TypeRestriction


class NeighborSetPredicate(GenericOutput, ABC):
    """
    Read-only lookup from an identifier to the set of its neighbors.

    Consumers such as outlier scorers depend only on this interface and not on
    how the neighbor sets were derived.
    """

    long_name: str = ""
    short_name: str = ""

    @abstractmethod
    def neighbor_set(self, id: Identifier) -> frozenset[Identifier]: ...

    def describe(self) -> str:
        """Human readable description of the predicate, for diagnostics only."""
        return self.long_name


class NeighborSetPredicateFactory(ABC):
    """Reusable recipe producing a `NeighborSetPredicate` for a given dataset."""

    @property
    @abstractmethod
    def input_type_restriction(self) -> TypeRestriction: ...

    @abstractmethod
    def build(self, dataset: DatasetView) -> NeighborSetPredicate: ...
