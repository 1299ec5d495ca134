import numpy as np
import pytest

from kneighborhood.utils._array import as_numpy, to_numpy


class ArrayWrapper:
    def __init__(self, array):
        self.array = array

    def __array__(self, dtype=None, copy=None):
        return np.asarray(self.array, dtype=dtype)


@pytest.mark.required
class TestToNumpy:
    def test_list(self):
        assert to_numpy([[1, 2], [3, 4]]).shape == (2, 2)

    def test_copy(self):
        source = np.zeros(3)
        assert to_numpy(source) is not source
        assert as_numpy(source) is source

    def test_dtype(self):
        assert to_numpy([1, 2], dtype=np.float32).dtype == np.float32

    def test_array_interface(self):
        assert to_numpy(ArrayWrapper([1, 2, 3])).tolist() == [1, 2, 3]

    @pytest.mark.parametrize("required_ndim", [2, [2, 3]])
    def test_required_ndim(self, required_ndim):
        with pytest.raises(ValueError, match="Array has 1 dimensions"):
            to_numpy([1, 2], required_ndim=required_ndim)

