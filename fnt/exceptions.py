"""Exception hierarchy for fnt.

Methods raise these; :class:`fnt.driver.Driver` turns them into
:class:`fnt.core.Status` codes so callers of the driver never see them.
Each class also derives from the closest builtin so plain ``except
ValueError`` style handlers keep working.
"""

from __future__ import annotations


class FntError(Exception):
    """Base class for every error raised by fnt."""


class ConfigurationError(FntError, ValueError):
    """Unknown method, hyperparameter or result id, or an invalid value."""


class SequenceError(FntError, RuntimeError):
    """An operation was called out of order (e.g. ``value`` before ``next``)."""


class NumericalError(FntError, ArithmeticError):
    """A numerical hazard that leaves the method unable to continue.

    Raised for a bracket whose endpoints share a sign or a derivative/secant
    denominator that vanishes. Methods remember the first one and re-raise it
    from every later call.
    """


class UnsupportedOperation(FntError, NotImplementedError):
    """The method does not implement an optional operation."""

    def __init__(self, method: str, operation: str):
        super().__init__(f"{method} does not support {operation}.")
        self.method = method
        self.operation = operation


__all__ = [
    "ConfigurationError",
    "FntError",
    "NumericalError",
    "SequenceError",
    "UnsupportedOperation",
]
