"""Read-only dataset views accepted by neighborhood factories."""

__all__ = ["ArrayDataset", "ObjectDataset"]

from kneighborhood.data._views import ArrayDataset, ObjectDataset
