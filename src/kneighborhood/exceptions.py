"""Exception classes for kneighborhood."""

__all__ = [
    "ConfigurationError",
    "IncompatibleDataError",
    "InvalidDistanceError",
    "NeighborhoodError",
    "UnknownIdentifierError",
]


class NeighborhoodError(Exception):
    """Base class for all errors raised by kneighborhood."""


class ConfigurationError(NeighborhoodError, ValueError):
    """Raised when a neighborhood is configured with invalid parameters.

    Configuration errors are detected before any distance is computed.
    """


class IncompatibleDataError(ConfigurationError, TypeError):
    """Raised when a dataset does not satisfy the type restriction of a distance function."""


class InvalidDistanceError(NeighborhoodError, ArithmeticError):
    """Raised when a distance function returns an undefined or non-comparable value.

    Aborts the build in progress; no partial neighborhood is produced.
    """

    def __init__(self, message: str, pair: tuple[object, object] | None = None) -> None:
        super().__init__(message)
        self.pair = pair


class UnknownIdentifierError(NeighborhoodError, KeyError):
    """Raised when a neighborhood is queried for an identifier it was not built with."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
