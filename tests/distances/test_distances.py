import numpy as np
import pytest

from kneighborhood.data import ArrayDataset, ObjectDataset
from kneighborhood.distances import FunctionDistance, MetricDistance, PrecomputedDistance, resolve_distance
from kneighborhood.exceptions import ConfigurationError, InvalidDistanceError
from kneighborhood.protocols import BatchDistanceQuery, DistanceFunction
from kneighborhood.types import TypeRestriction


def absdiff(a, b):
    return abs(a - b)


@pytest.mark.required
class TestFunctionDistance:
    def test_distance(self, scalar_dataset):
        query = FunctionDistance(absdiff).instantiate(scalar_dataset)
        assert query.distance("A", "D") == 10
        assert not isinstance(query, BatchDistanceQuery)

    def test_name_and_restriction(self):
        dist = FunctionDistance(absdiff, input_type=int)
        assert dist.name == "absdiff"
        assert dist.input_type_restriction == TypeRestriction(int)
        assert isinstance(dist, DistanceFunction)

    def test_not_callable_raises(self):
        with pytest.raises(ConfigurationError, match="callable"):
            FunctionDistance(3)  # type: ignore


@pytest.mark.required
class TestMetricDistance:
    def test_euclidean(self):
        ds = ArrayDataset(np.array([[0.0, 0.0], [3.0, 4.0], [6.0, 8.0]]))
        query = MetricDistance().instantiate(ds)
        assert query.distance(0, 1) == pytest.approx(5.0)
        np.testing.assert_allclose(query.distances(0, [1, 2]), [5.0, 10.0])
        assert isinstance(query, BatchDistanceQuery)

    def test_single_and_batch_values_are_identical(self, RNG):
        ds = ArrayDataset(RNG.integers(0, 10, size=(20, 5)) / 10)
        query = MetricDistance().instantiate(ds)
        candidates = list(range(1, 20))
        assert query.distances(0, candidates).tolist() == [query.distance(0, c) for c in candidates]

    def test_manhattan_alias(self):
        ds = ArrayDataset(np.array([[0.0, 0.0], [3.0, 4.0]]))
        assert MetricDistance("manhattan").instantiate(ds).distance(0, 1) == 7.0
        assert MetricDistance("manhattan").name == "manhattan"

    def test_metric_kwargs(self):
        ds = ArrayDataset(np.array([[0.0, 0.0], [1.0, 1.0]]))
        query = MetricDistance("minkowski", p=1).instantiate(ds)
        assert query.distance(0, 1) == pytest.approx(2.0)

    def test_empty_candidates(self):
        query = MetricDistance().instantiate(ArrayDataset(np.zeros((1, 2))))
        assert query.distances(0, []).shape == (0,)

    def test_unknown_metric_raises(self):
        with pytest.raises(ConfigurationError, match="Unsupported metric"):
            MetricDistance("not-a-metric")
        with pytest.raises(ConfigurationError, match="Unsupported metric"):
            MetricDistance("mahalanobis")

    def test_restriction(self):
        assert MetricDistance(dim=3).input_type_restriction == TypeRestriction(np.ndarray, 3)

    def test_requires_array_dataset(self):
        with pytest.raises(ConfigurationError, match="array-backed"):
            MetricDistance().instantiate(ObjectDataset([1, 2]))

    def test_nan_input_raises_invalid_distance(self):
        ds = ArrayDataset(np.array([[0.0, np.nan], [1.0, 1.0]]))
        with pytest.raises(InvalidDistanceError):
            MetricDistance().instantiate(ds).distance(0, 1)


@pytest.mark.required
class TestPrecomputedDistance:
    def test_lookup(self):
        matrix = np.array([[0, 2, 3], [2, 0, 4], [3, 4, 0]])
        query = PrecomputedDistance(matrix).instantiate(ObjectDataset({"a": 1, "b": 2, "c": 3}))
        assert query.distance("a", "c") == 3.0
        assert query.distances("b", ["a", "c"]).tolist() == [2.0, 4.0]

    def test_non_square_raises(self):
        with pytest.raises(ConfigurationError, match="square"):
            PrecomputedDistance(np.zeros((2, 3)))

    def test_not_2d_raises(self):
        with pytest.raises(ConfigurationError, match="Invalid distance matrix"):
            PrecomputedDistance(np.zeros(3))

    def test_size_mismatch_raises(self):
        with pytest.raises(ConfigurationError, match="covers 2 objects"):
            PrecomputedDistance(np.zeros((2, 2))).instantiate(ObjectDataset([1, 2, 3]))


@pytest.mark.required
class TestResolveDistance:
    def test_metric_name(self):
        dist = resolve_distance("cosine")
        assert isinstance(dist, MetricDistance)
        assert dist.name == "cosine"

    def test_distance_function_passthrough(self):
        dist = MetricDistance()
        assert resolve_distance(dist) is dist

    def test_callable(self):
        dist = resolve_distance(absdiff)
        assert isinstance(dist, FunctionDistance)
        assert dist.name == "absdiff"

    def test_invalid_raises(self):
        with pytest.raises(ConfigurationError):
            resolve_distance(42)  # type: ignore


@pytest.mark.required
class TestTypeRestriction:
    def test_satisfied(self, scalar_dataset, vector_dataset):
        assert TypeRestriction(int).is_satisfied_by(scalar_dataset)
        assert TypeRestriction(object).is_satisfied_by(scalar_dataset)
        assert TypeRestriction(np.ndarray, 3).is_satisfied_by(vector_dataset)
        assert TypeRestriction((str, np.ndarray)).is_satisfied_by(vector_dataset)

    def test_not_satisfied(self, scalar_dataset, vector_dataset):
        assert not TypeRestriction(str).is_satisfied_by(scalar_dataset)
        assert not TypeRestriction(np.ndarray, 2).is_satisfied_by(vector_dataset)
        assert not TypeRestriction(np.ndarray).is_satisfied_by(scalar_dataset)

    def test_str(self):
        assert str(TypeRestriction(np.ndarray, 4)) == "ndarray[dim=4]"
        assert str(TypeRestriction((int, float))) == "int | float"
