from unittest.mock import patch

import pytest

from kneighborhood.utils._multiprocessing import PoolWrapper, resolve_processes


def square(x):
    return x * x


@pytest.mark.required
class TestResolveProcesses:
    def test_none_is_single(self):
        assert resolve_processes(None) == 1

    def test_positive(self):
        assert resolve_processes(3) == 3

    @patch("kneighborhood.utils._multiprocessing.cpu_count", return_value=8)
    def test_negative_relative_to_cpu_count(self, _):
        assert resolve_processes(-1) == 8
        assert resolve_processes(-3) == 6
        assert resolve_processes(-20) == 1


@pytest.mark.required
class TestPoolWrapper:
    def test_single_process_uses_map(self):
        with PoolWrapper(processes=None) as p:
            assert p.pool is None
            assert sorted(p.imap_unordered(square, range(5))) == [0, 1, 4, 9, 16]

    @pytest.mark.optional
    def test_multi_process(self):
        with PoolWrapper(processes=2) as p:
            assert p.pool is not None
            assert sorted(p.imap_unordered(square, range(10), chunksize=3)) == [x * x for x in range(10)]

    def test_terminates_on_error(self):
        with patch("kneighborhood.utils._multiprocessing.Pool") as mock_pool:
            with pytest.raises(RuntimeError), PoolWrapper(processes=2):
                raise RuntimeError
            mock_pool.return_value.terminate.assert_called_once()
            mock_pool.return_value.close.assert_not_called()
            mock_pool.return_value.join.assert_called_once()

    def test_closes_on_success(self):
        with patch("kneighborhood.utils._multiprocessing.Pool") as mock_pool:
            with PoolWrapper(processes=2):
                pass
            mock_pool.return_value.close.assert_called_once()
            mock_pool.return_value.terminate.assert_not_called()
