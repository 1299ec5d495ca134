"""
Core neighborhood construction: bounded k-nearest-neighbor selection, write-once
storage and the parallel builder.

These functions operate on dataset views and bound distance queries and are
independent of the predicate and factory layer.
"""

__all__ = ["WriteOnceStore", "build_neighborhood", "select_neighbors"]

from kneighborhood.core._build import build_neighborhood
from kneighborhood.core._selection import select_neighbors
from kneighborhood.core._store import WriteOnceStore
