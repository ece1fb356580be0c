"""
Exception types raised by the Simpson's paradox tools.

Everything derives from SimpsonsError so callers can catch the whole family,
and each type also subclasses the closest builtin so existing `except KeyError`
/ `except ValueError` handlers keep working.
"""


class SimpsonsError(Exception):
    """Base class for all package errors."""


class ColumnNotFound(SimpsonsError, KeyError):
    """A cause/effect/factor column is missing from the dataset."""

    def __init__(self, column, available=None):
        self.column = column
        self.available = list(available) if available is not None else []
        message = f"Column not found: {column!r}"
        if self.available:
            message += f" (available: {self.available})"
        super().__init__(message)

    def __str__(self):
        # KeyError.__str__ would repr() the message
        return self.args[0]


class InvalidColumnRoles(SimpsonsError, ValueError):
    """Cause and effect point at the same column."""


class InsufficientData(SimpsonsError, ValueError):
    """Fewer than two points are available for a fit."""


class DegenerateFit(SimpsonsError, ValueError):
    """The linear fit collapsed to fewer than two coefficients."""


class InvalidClusterCount(SimpsonsError, ValueError):
    """Requested cluster count is outside what the data supports."""


class TypeMismatch(SimpsonsError, TypeError):
    """Column content cannot be coerced to numbers."""


class GenerationFailed(SimpsonsError, RuntimeError):
    """Synthetic data generation did not produce a paradox within the attempt cap."""
