from __future__ import annotations

__all__ = []

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

import numpy as np
from numpy.typing import ArrayLike, NDArray

from kneighborhood._log import LogMessage

_logger = logging.getLogger(__name__)

_np_dtype = TypeVar("_np_dtype", bound=np.generic)


def to_numpy(
    array: ArrayLike,
    *,
    dtype: type[_np_dtype] | None = None,
    required_ndim: int | Iterable[int] | None = None,
    copy: bool = True,
) -> NDArray[_np_dtype]:
    """Converts an ArrayLike to a Numpy array, validating dimensionality if requested"""
    if not isinstance(array, np.ndarray) and hasattr(array, "__array__"):
        _logger.log(logging.INFO, f"Converting {array.__class__.__name__} to NumPy array.")

    _array: NDArray[Any] = np.array(array, dtype=dtype) if copy else np.asarray(array, dtype=dtype)
    _logger.log(logging.DEBUG, LogMessage(lambda: f"{array.__class__.__name__} -> shape={_array.shape}"))

    required_ndims = (required_ndim,) if isinstance(required_ndim, int) else required_ndim
    if required_ndims is not None and _array.ndim not in tuple(required_ndims):
        raise ValueError(f"Array has {_array.ndim} dimensions, expected {required_ndim}.")

    return _array


def as_numpy(
    array: ArrayLike,
    *,
    dtype: type[_np_dtype] | None = None,
    required_ndim: int | Iterable[int] | None = None,
) -> NDArray[_np_dtype]:
    """Converts an ArrayLike to Numpy array without copying (if possible)"""
    return to_numpy(array, dtype=dtype, required_ndim=required_ndim, copy=False)
