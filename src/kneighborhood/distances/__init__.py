"""Built-in distance capabilities for neighborhood construction."""

__all__ = ["FunctionDistance", "MetricDistance", "PrecomputedDistance", "resolve_distance"]

from kneighborhood.distances._base import FunctionDistance, resolve_distance
from kneighborhood.distances._metric import MetricDistance
from kneighborhood.distances._precomputed import PrecomputedDistance
