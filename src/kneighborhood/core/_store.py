from __future__ import annotations

__all__ = []

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Generic, TypeVar

from kneighborhood.types import Identifier

_V = TypeVar("_V")

_UNSET = object()


class WriteOnceStore(Generic[_V]):
    """
    Key-value storage where each declared key is written exactly once.

    Parameters
    ----------
    keys : Iterable[Identifier]
        The complete set of keys the store will hold

    Example
    -------
    >>> store = WriteOnceStore(["a", "b"])
    >>> store.put("a", 1)
    >>> store.put("b", 2)
    >>> frozen = store.freeze()
    >>> frozen["b"]
    2
    """

    def __init__(self, keys: Iterable[Identifier]) -> None:
        self._slots: dict[Identifier, object] = dict.fromkeys(keys, _UNSET)
        self._filled = 0
        self._frozen: Mapping[Identifier, _V] | None = None

    def put(self, key: Identifier, value: _V) -> None:
        """
        Writes the value for `key`.

        Raises
        ------
        RuntimeError
            If the store has already been frozen.
        KeyError
            If `key` was not declared.
        ValueError
            If `key` has already been written.
        """
        if self._frozen is not None:
            raise RuntimeError("Cannot write to a frozen store.")
        if key not in self._slots:
            raise KeyError(key)
        if self._slots[key] is not _UNSET:
            raise ValueError(f"Value for {key!r} has already been written.")
        self._slots[key] = value
        self._filled += 1

    def missing(self) -> list[Identifier]:
        return [k for k, v in self._slots.items() if v is _UNSET]

    def freeze(self) -> Mapping[Identifier, _V]:
        """
        Seals the store and returns a read-only mapping of its contents.

        Raises
        ------
        ValueError
            If any declared key has not been written.
        """
        if self._frozen is None:
            if self._filled != len(self._slots):
                missing = self.missing()
                raise ValueError(f"Cannot freeze store with {len(missing)} unwritten keys: {missing[:10]}")
            self._frozen = MappingProxyType(dict(self._slots))  # type: ignore[arg-type]
        return self._frozen

    def __len__(self) -> int:
        return self._filled
