"""
kneighborhood precomputes the k nearest neighbors of every object in a dataset
under a pluggable distance function and exposes the result as an immutable,
thread-safe lookup for downstream algorithms such as outlier scoring and
density estimation.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("kneighborhood")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

__all__ = [
    "KNearestNeighborNeighborhood",
    "KNearestNeighborNeighborhoodFactory",
    "__version__",
    "config",
    "core",
    "data",
    "distances",
    "exceptions",
    "log",
    "neighborhood",
    "protocols",
    "types",
]

import logging

from . import config, core, data, distances, exceptions, neighborhood, protocols, types
from .neighborhood import KNearestNeighborNeighborhood, KNearestNeighborNeighborhoodFactory

logging.getLogger(__name__).addHandler(logging.NullHandler())


def log(level: int = logging.DEBUG, handler: logging.Handler | None = None) -> None:
    """
    Helper for quickly adding a StreamHandler to the logger. Useful for debugging.

    Parameters
    ----------
    level : int, default logging.DEBUG(10)
        Set the logging level for the logger.
    handler : logging.Handler, optional
        Sets the logging handler for the logger if provided, otherwise logger will be
        provided with a StreamHandler.
    """
    logger = logging.getLogger(__name__)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s.%(filename)s:%(lineno)s - %(funcName)10s() | %(message)s"
            )
        )
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug(f"Added logging handler {handler} to logger: {__name__}")
