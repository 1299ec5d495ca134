"""
Drives k-nearest-neighbor selection over every identifier of a dataset.
"""

from __future__ import annotations

__all__ = []

import logging
from collections.abc import Callable, Mapping, Sequence
from functools import partial

import numpy as np
from tqdm.auto import tqdm

from kneighborhood._log import LogMessage
from kneighborhood.config import get_max_processes
from kneighborhood.core._selection import SelectionAlgorithm, select_neighbors
from kneighborhood.core._store import WriteOnceStore
from kneighborhood.exceptions import ConfigurationError
from kneighborhood.protocols import DatasetView, DistanceQuery
from kneighborhood.types import Identifier, Neighbor
from kneighborhood.utils._multiprocessing import PoolWrapper

_logger = logging.getLogger(__name__)


def _sorted_identifiers(dataset: DatasetView) -> tuple[Identifier, ...]:
    ids = tuple(dataset.enumerate())
    if len(set(ids)) != len(ids):
        raise ConfigurationError(f"Dataset enumerates {len(ids) - len(set(ids))} duplicate identifiers.")
    try:
        return tuple(sorted(ids))
    except TypeError as e:
        raise ConfigurationError(f"Dataset identifiers must be mutually orderable: {e}") from e


def _select(
    query: Identifier,
    candidates: Sequence[Identifier],
    distance_query: DistanceQuery,
    k: int,
    algorithm: SelectionAlgorithm,
) -> tuple[Identifier, tuple[Neighbor, ...]]:
    return query, select_neighbors(query, candidates, distance_query, k, algorithm)


def _summary(neighborhood: Mapping[Identifier, tuple[Neighbor, ...]]) -> str:
    sizes = np.fromiter((len(v) for v in neighborhood.values()), dtype=np.intp, count=len(neighborhood))
    if not sizes.size:
        return "empty neighborhood"
    return f"{sizes.size} neighbor lists: min={sizes.min()}, max={sizes.max()}, total={sizes.sum()}"


def build_neighborhood(
    dataset: DatasetView,
    distance_query: DistanceQuery,
    k: int,
    *,
    algorithm: SelectionAlgorithm = "auto",
    processes: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
    verbose: bool = True,
) -> Mapping[Identifier, tuple[Neighbor, ...]]:
    """
    Computes the neighbor list of every identifier in a dataset.

    Selection runs independently per identifier and is distributed over worker
    processes. Results are collected into a write-once store which is frozen
    only once every identifier has been filled.

    Parameters
    ----------
    dataset : DatasetView
        The dataset to build neighbor lists for
    distance_query : DistanceQuery
        Distance function bound to `dataset`. Must be picklable when more than
        one process is used.
    k : int
        Number of neighbors per identifier
    algorithm : "auto", "heap" or "batch", default "auto"
        Selection algorithm, see `select_neighbors`
    processes : int or None, default None
        Number of worker processes, defaults to `config.get_max_processes()`
    progress_callback : Callable[[int, int], None] or None, default None
        Called with (completed, total) after each identifier is processed
    verbose : bool, default True
        Whether to show a `tqdm` progress bar

    Returns
    -------
    Mapping[Identifier, tuple[Neighbor, ...]]
        Read-only mapping from every identifier to its neighbor list

    Raises
    ------
    ConfigurationError
        If `k` is negative or the dataset identifiers are duplicated or unorderable.
    InvalidDistanceError
        If any distance evaluation is invalid. No partial result is returned.
    """
    if k < 0:
        raise ConfigurationError(f"k must be non-negative, got {k}.")
    ids = _sorted_identifiers(dataset)
    total = len(ids)
    processes = get_max_processes() if processes is None else processes

    _logger.debug("Building neighborhood of %d identifiers with k=%d", total, k)
    store: WriteOnceStore[tuple[Neighbor, ...]] = WriteOnceStore(ids)
    with PoolWrapper(processes=processes) as p:
        for query, neighbors in tqdm(
            p.imap_unordered(
                partial(_select, candidates=ids, distance_query=distance_query, k=k, algorithm=algorithm),
                ids,
                chunksize=max(1, total // (p.processes * 4)),
            ),
            total=total,
            desc=f"Selecting {k} nearest neighbors",
            disable=not verbose,
        ):
            store.put(query, neighbors)
            if progress_callback:
                progress_callback(len(store), total)

    neighborhood = store.freeze()
    _logger.debug(LogMessage(_summary, neighborhood))
    return neighborhood
