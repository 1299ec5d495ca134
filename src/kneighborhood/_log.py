__all__ = []

from collections.abc import Callable
from typing import Any


class LogMessage:
    """
    Lazily formatted log message.

    The callback is only evaluated when a handler actually renders the record,
    so summaries over a whole neighborhood cost nothing when DEBUG is disabled.
    """

    def __init__(self, fn: Callable[..., str], *args: Any) -> None:
        self._fn = fn
        self._args = args
        self._str: str | None = None

    def __str__(self) -> str:
        if self._str is None:
            self._str = self._fn(*self._args)
        return self._str
