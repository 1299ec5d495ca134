from __future__ import annotations

__all__ = []

import logging
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from kneighborhood.types import Identifier
from kneighborhood.utils._array import to_numpy

_logger = logging.getLogger(__name__)


def _unique_ids(ids: Iterable[Identifier]) -> tuple[Identifier, ...]:
    ids = tuple(ids)
    seen: set[Identifier] = set()
    duplicates = []
    for i in ids:
        if i in seen:
            duplicates.append(i)
        seen.add(i)
    if duplicates:
        raise ValueError(f"Identifiers must be unique, found duplicates: {duplicates[:10]}")
    return ids


class _IndexedView:
    _ids: tuple[Identifier, ...]
    _index: dict[Identifier, int]

    def enumerate(self) -> tuple[Identifier, ...]:
        return self._ids

    def index_of(self, ids: Identifier | Iterable[Identifier]) -> int | NDArray[np.intp]:
        """Returns the storage position of a single identifier, or an array of positions for many."""
        if isinstance(ids, Hashable) and ids in self._index:
            return self._index[ids]
        if isinstance(ids, str) or not isinstance(ids, Iterable):
            raise KeyError(ids)
        return np.fromiter((self._index[i] for i in ids), dtype=np.intp)

    def __contains__(self, id: object) -> bool:
        return isinstance(id, Hashable) and id in self._index

    def __len__(self) -> int:
        return len(self._ids)


class ArrayDataset(_IndexedView):
    """
    Dataset view over a 2D array of feature vectors.

    Parameters
    ----------
    data : ArrayLike
        Array of shape (n_samples, n_features)
    ids : Sequence[Identifier] or None, default None
        Identifier of each row. Defaults to the row positions `0..n_samples-1`.

    Raises
    ------
    ValueError
        If `data` is not 2D, or `ids` are not unique or do not match the number of rows.

    Example
    -------
    >>> import numpy as np
    >>> from kneighborhood.data import ArrayDataset

    >>> ds = ArrayDataset(np.arange(6).reshape(3, 2), ids=["a", "b", "c"])
    >>> ds.enumerate()
    ('a', 'b', 'c')
    >>> ds["b"]
    array([2, 3])
    """

    def __init__(self, data: ArrayLike, ids: Sequence[Identifier] | None = None) -> None:
        self._data: NDArray[Any] = to_numpy(data, required_ndim=2)
        self._data.setflags(write=False)
        if ids is None:
            self._ids: tuple[Identifier, ...] = tuple(range(len(self._data)))
        else:
            self._ids = _unique_ids(ids)
            if len(self._ids) != len(self._data):
                raise ValueError(f"Number of ids ({len(self._ids)}) does not match number of rows ({len(self._data)}).")
        self._index = {i: n for n, i in enumerate(self._ids)}
        _logger.debug(f"Created {self}")

    @property
    def data_type(self) -> type:
        return np.ndarray

    @property
    def dim(self) -> int:
        return int(self._data.shape[1])

    @property
    def data(self) -> NDArray[Any]:
        """Read-only view of the underlying array."""
        return self._data

    def __getitem__(self, id: Identifier) -> NDArray[Any]:
        return self._data[self._index[id]]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self._data.shape}, dtype={self._data.dtype})"


class ObjectDataset(_IndexedView):
    """
    Dataset view over arbitrary Python objects.

    Parameters
    ----------
    objects : Mapping[Identifier, Any] or Sequence[Any]
        Objects keyed by identifier, or a sequence of objects identified by position
    data_type : type, default object
        Declared type of every object. Checked against each object when provided.

    Raises
    ------
    ValueError
        If `data_type` is not a type.
    TypeError
        If an object is not an instance of `data_type`.
    """

    def __init__(self, objects: Mapping[Identifier, Any] | Sequence[Any], data_type: type = object) -> None:
        if not isinstance(data_type, type):
            raise ValueError(f"data_type must be a type, got {data_type!r}.")
        items = dict(objects) if isinstance(objects, Mapping) else dict(enumerate(objects))
        if data_type is not object:
            invalid = [i for i, o in items.items() if not isinstance(o, data_type)]
            if invalid:
                raise TypeError(f"Objects for ids {invalid[:10]} are not instances of {data_type.__name__}.")
        self._objects = items
        self._ids = tuple(items)
        self._index = {i: n for n, i in enumerate(self._ids)}
        self._data_type = data_type

    @property
    def data_type(self) -> type:
        return self._data_type

    @property
    def dim(self) -> None:
        return None

    def __getitem__(self, id: Identifier) -> Any:
        return self._objects[id]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(len={len(self)}, data_type={self._data_type.__name__})"
