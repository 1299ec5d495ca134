from __future__ import annotations

__all__ = []

from collections.abc import Callable, Iterable, Iterator
from multiprocessing import Pool
from os import cpu_count
from types import TracebackType
from typing import Any, TypeVar

from typing_extensions import Self

_S = TypeVar("_S")
_T = TypeVar("_T")


def resolve_processes(processes: int | None) -> int:
    """Resolves a process count using the same semantics as scikit-learn `n_jobs`."""
    if processes is None:
        return 1
    if processes < 0:
        return max(1, (cpu_count() or 1) + processes + 1)
    return processes


class PoolWrapper:
    """
    Wraps `multiprocessing.Pool` to allow for easy switching between
    multiprocessing and single-threaded execution.

    When the context exits because of an exception the pool is terminated so
    that in-flight work is discarded rather than waited on.
    """

    def __init__(self, processes: int | None) -> None:
        self.processes = resolve_processes(processes)
        self.pool = Pool(self.processes) if self.processes > 1 else None

    def imap_unordered(self, func: Callable[[_S], _T], iterable: Iterable[_S], chunksize: int = 1) -> Iterator[_T]:
        return map(func, iterable) if self.pool is None else self.pool.imap_unordered(func, iterable, chunksize)

    def __enter__(self, *args: Any, **kwargs: Any) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.pool is not None:
            if exc_type is None:
                self.pool.close()
            else:
                self.pool.terminate()
            self.pool.join()
