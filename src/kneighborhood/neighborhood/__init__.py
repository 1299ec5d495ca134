"""Neighborhood predicates and the factories that build them."""

__all__ = [
    "KNearestNeighborNeighborhood",
    "KNearestNeighborNeighborhoodFactory",
    "NeighborSetPredicate",
    "NeighborSetPredicateFactory",
]

from kneighborhood.neighborhood._base import NeighborSetPredicate, NeighborSetPredicateFactory
from kneighborhood.neighborhood._knn import KNearestNeighborNeighborhood, KNearestNeighborNeighborhoodFactory
