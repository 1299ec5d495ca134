import numpy as np
import pytest

from kneighborhood.data import ArrayDataset, ObjectDataset
from kneighborhood.protocols import DatasetView


@pytest.mark.required
class TestArrayDataset:
    def test_default_ids(self):
        ds = ArrayDataset(np.zeros((3, 2)))
        assert ds.enumerate() == (0, 1, 2)
        assert len(ds) == 3
        assert ds.dim == 2
        assert ds.data_type is np.ndarray
        assert isinstance(ds, DatasetView)

    def test_custom_ids(self):
        ds = ArrayDataset([[1, 2], [3, 4]], ids=["x", "y"])
        assert ds["y"].tolist() == [3, 4]
        assert "x" in ds
        assert "z" not in ds
        assert [] not in ds
        assert ds.index_of("y") == 1
        assert ds.index_of(["y", "x"]).tolist() == [1, 0]

    def test_index_of_unknown_raises(self):
        ds = ArrayDataset(np.zeros((2, 2)))
        with pytest.raises(KeyError):
            ds.index_of(5)

    def test_data_is_read_only_copy(self):
        source = np.zeros((2, 2))
        ds = ArrayDataset(source)
        source[0, 0] = 1
        assert ds[0][0] == 0
        with pytest.raises(ValueError):
            ds.data[0, 0] = 1

    def test_not_2d_raises(self):
        with pytest.raises(ValueError, match="dimensions"):
            ArrayDataset(np.zeros(3))

    def test_duplicate_ids_raise(self):
        with pytest.raises(ValueError, match="unique"):
            ArrayDataset(np.zeros((2, 2)), ids=["a", "a"])

    def test_id_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="does not match"):
            ArrayDataset(np.zeros((2, 2)), ids=["a"])

    def test_repr(self):
        assert repr(ArrayDataset(np.zeros((2, 3)))) == "ArrayDataset(shape=(2, 3), dtype=float64)"


@pytest.mark.required
class TestObjectDataset:
    def test_from_sequence(self):
        ds = ObjectDataset(["a", "b"])
        assert ds.enumerate() == (0, 1)
        assert ds[1] == "b"
        assert ds.dim is None
        assert ds.data_type is object
        assert isinstance(ds, DatasetView)

    def test_from_mapping(self):
        ds = ObjectDataset({"A": 0, "B": 1}, data_type=int)
        assert ds.enumerate() == ("A", "B")
        assert ds.data_type is int
        assert ds.index_of("B") == 1

    def test_wrong_object_type_raises(self):
        with pytest.raises(TypeError, match="not instances of int"):
            ObjectDataset({"A": 0, "B": "1"}, data_type=int)

    def test_data_type_must_be_type(self):
        with pytest.raises(ValueError, match="must be a type"):
            ObjectDataset([1], data_type="int")  # type: ignore
