from datetime import datetime

import numpy as np
import pytest

import kneighborhood
from kneighborhood._output import ExecutionMetadata, GenericOutput, set_metadata


class MockOutput(GenericOutput):
    def __init__(self, value):
        self.value = value


class MockRunner:
    def __init__(self):
        self.k = 3
        self.items = [1, 2]

    @set_metadata(state=["k", "items"])
    def run(self, data, flag=False):
        return MockOutput(len(data))


@set_metadata
def mock_function(data, *, scale=1.0):
    return MockOutput(scale)


@pytest.mark.required
class TestSetMetadata:
    def test_method_metadata(self):
        output = MockRunner().run(np.zeros((2, 5)))
        meta = output.meta()
        assert meta.name.endswith("MockRunner.run")
        assert meta.arguments == {"data": "ndarray: shape=(2, 5)", "flag": False}
        assert meta.state == {"k": 3, "items": "list: len=2"}
        assert meta.version == kneighborhood.__version__
        assert isinstance(meta.execution_time, datetime)

    def test_function_metadata(self):
        meta = mock_function([1, 2, 3], scale=2.0).meta()
        assert meta.name.endswith(".mock_function")
        assert meta.arguments == {"data": "list: len=3", "scale": 2.0}
        assert meta.state == {}

    def test_defaults_and_keywords_are_recorded(self):
        assert mock_function([1]).meta().arguments == {"data": "list: len=1", "scale": 1.0}
        meta = MockRunner().run(data=[1, 2], flag=True).meta()
        assert meta.arguments == {"data": "list: len=2", "flag": True}
        assert "self" not in meta.arguments

    def test_empty_metadata(self):
        meta = MockOutput(1).meta()
        assert meta == ExecutionMetadata.empty()
        assert meta.name == ""
