"""Data types used in kneighborhood."""

from __future__ import annotations

__all__ = ["Identifier", "Neighbor", "TypeRestriction"]

from collections.abc import Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple, TypeAlias

if TYPE_CHECKING:
    from kneighborhood.protocols import DatasetView

Identifier: TypeAlias = Hashable
"""
Type alias for an opaque object identifier.

Identifiers must be hashable and totally ordered among the identifiers of a
single dataset. The order is only used to break ties between equal distances.
"""


class Neighbor(NamedTuple):
    """
    A single entry of a neighbor list.

    Attributes
    ----------
    id : Identifier
        Identifier of the neighboring object
    distance : float
        Distance from the query object to the neighbor
    """

    id: Any
    distance: float


@dataclass(frozen=True)
class TypeRestriction:
    """
    Declares the type and shape of data a distance function accepts.

    Attributes
    ----------
    type : type or tuple of types
        Required base type(s) of the dataset objects
    dim : int or None, default None
        Required dimensionality of vector data, or None for any
    """

    type: type | tuple[type, ...]
    dim: int | None = None

    def is_satisfied_by(self, dataset: DatasetView) -> bool:
        """Returns True if the declared data type and dimensionality of `dataset` are acceptable."""
        data_type = getattr(dataset, "data_type", None)
        if not isinstance(data_type, type) or not issubclass(data_type, self.type):
            return False
        return self.dim is None or getattr(dataset, "dim", None) == self.dim

    def __str__(self) -> str:
        names = (
            " | ".join(t.__name__ for t in self.type) if isinstance(self.type, tuple) else self.type.__name__
        )
        return names if self.dim is None else f"{names}[dim={self.dim}]"
