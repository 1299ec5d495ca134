"""
Global configuration settings for kneighborhood.
"""

from __future__ import annotations

__all__ = ["get_max_processes", "set_max_processes", "use_max_processes"]

from typing import Any

### GLOBALS ###

_processes: int | None = None

### FUNCS ###


def set_max_processes(processes: int | None) -> None:
    """
    Sets the maximum number of worker processes to use when building neighborhoods.

    Parameters
    ----------
    processes : int or None
        The maximum number of worker processes to use, or -1 to use
        `os.cpu_count <https://docs.python.org/3/library/os.html#os.cpu_count>`_
        to determine the number of worker processes. For negative values less than -1,
        the number of worker processes will be set to `max(1, cpu_count + processes + 1)`.
        None is unset, and defaults to 1 process.

    Raises
    ------
    ValueError
        If `processes` is zero.

    See Also
    --------
    `n_jobs` (scikit-learn): https://scikit-learn.org/stable/glossary.html#term-n_jobs
    """
    if processes == 0:
        raise ValueError("processes cannot be zero; use None to default to a single process.")
    global _processes
    _processes = processes


def get_max_processes() -> int | None:
    """
    Returns the maximum number of worker processes to use when building neighborhoods.

    Returns
    -------
    int or None
        The maximum number of worker processes to use. None is unset, and defaults to 1 process.
    """
    global _processes
    return _processes


class MaxProcessesContextManager:
    def __init__(self, processes: int | None) -> None:
        self._processes = processes

    def __enter__(self) -> None:
        global _processes
        self._old = _processes
        set_max_processes(self._processes)

    def __exit__(self, *args: tuple[Any, ...]) -> None:
        global _processes
        _processes = self._old


def use_max_processes(processes: int | None) -> MaxProcessesContextManager:
    """Temporarily sets the maximum number of worker processes within a `with` block."""
    return MaxProcessesContextManager(processes)
