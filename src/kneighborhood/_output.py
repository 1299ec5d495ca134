from __future__ import annotations

__all__ = []

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial, wraps
from typing import Any, TypeVar

import numpy as np
from typing_extensions import ParamSpec


@dataclass(frozen=True)
class ExecutionMetadata:
    """
    Metadata about the execution of the function or method that produced an output.

    Attributes
    ----------
    name: str
        Name of the function or method
    execution_time: datetime
        Time of execution
    execution_duration: float
        Duration of execution in seconds
    arguments: dict[str, Any]
        Arguments passed to the function or method
    state: dict[str, Any]
        State attributes of the executing class
    version: str
        Version of kneighborhood
    """

    name: str
    execution_time: datetime
    execution_duration: float
    arguments: dict[str, Any]
    state: dict[str, Any]
    version: str

    @classmethod
    def empty(cls) -> ExecutionMetadata:
        from kneighborhood import __version__

        return ExecutionMetadata(
            name="",
            execution_time=datetime.min,
            execution_duration=0.0,
            arguments={},
            state={},
            version=__version__,
        )


class GenericOutput:
    _meta: ExecutionMetadata | None = None

    def meta(self) -> ExecutionMetadata:
        """
        Metadata about the execution that produced this output.

        Returns
        -------
        ExecutionMetadata
        """
        return self._meta or ExecutionMetadata.empty()


P = ParamSpec("P")
R = TypeVar("R", bound=GenericOutput)


def _fmt(v: Any) -> Any:
    if v is None or isinstance(v, str) or np.isscalar(v):
        return v
    if hasattr(v, "shape"):
        return f"{v.__class__.__name__}: shape={getattr(v, 'shape')}"
    if hasattr(v, "__len__"):
        return f"{v.__class__.__name__}: len={len(v)}"
    return repr(v) if hasattr(v, "name") else f"{v.__class__.__name__}"


def set_metadata(fn: Callable[P, R] | None = None, *, state: Sequence[str] | None = None) -> Callable[P, R]:
    """Decorator to stamp outputs with runtime metadata"""

    if fn is None:
        return partial(set_metadata, state=state)  # type: ignore

    signature = inspect.signature(fn)

    @wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        from kneighborhood import __version__

        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()
        instance = bound.arguments.pop("self", None)
        arguments = {k: _fmt(v) for k, v in bound.arguments.items()}
        if instance is None:
            module, name, state_attrs = fn.__module__, f"{fn.__module__}.{fn.__name__}", {}
        else:
            module = instance.__class__.__module__
            name = f"{module}.{instance.__class__.__name__}.{fn.__name__}"
            state_attrs = {k: _fmt(getattr(instance, k)) for k in state or []}

        _logger = logging.getLogger(module)
        time = datetime.now(timezone.utc)
        _logger.log(logging.INFO, f">>> Executing '{name}': args={arguments} state={state_attrs} <<<")

        result = fn(*args, **kwargs)

        duration = (datetime.now(timezone.utc) - time).total_seconds()
        _logger.log(logging.INFO, f">>> Completed '{name}': duration={duration} <<<")

        metadata = ExecutionMetadata(name, time, duration, arguments, state_attrs, __version__)
        object.__setattr__(result, "_meta", metadata)
        return result

    return wrapper
