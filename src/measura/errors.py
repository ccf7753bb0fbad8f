"""
measura.errors
==============

Exception hierarchy for the unit algebra.

Every error raised deliberately by measura derives from `MeasuraError` and
also from the builtin exception a caller would naturally expect (e.g.
`InvalidArgumentError` is a `ValueError`), so existing ``except ValueError``
handlers keep working.

Internal invariant violations are *not* part of this hierarchy: they raise
`AssertionError` and indicate a defect in the algebra itself.
"""

from __future__ import annotations


class MeasuraError(Exception):
    """Base class for all recoverable measura errors."""


class IncommensurableError(MeasuraError, ValueError):
    """Raised when two units (or dimensions) cannot be converted into each other."""

    def __init__(self, source: object, target: object) -> None:
        self.source = source
        self.target = target
        super().__init__(f"{source} is not commensurable with {target}")


class InvalidArgumentError(MeasuraError, ValueError):
    """An argument is outside the domain of the operation (e.g. a non-positive root)."""


class DivisionByZeroError(MeasuraError, ZeroDivisionError):
    """A zero denominator was supplied to a rational constructor or divisor."""


class RationalOverflowError(MeasuraError, OverflowError):
    """A fixed-width `Rational` result left the signed 64-bit range."""


class ConversionOverflowError(MeasuraError, OverflowError):
    """A double to rational conversion overflowed its bounded representation."""


class ConversionFailedError(MeasuraError, ArithmeticError):
    """A continued-fraction approximation did not converge within its iteration limit."""


class NonLinearConverterError(MeasuraError, ValueError):
    """`pow`/`root` was applied to a converter that is not purely multiplicative."""


class UnknownUnitError(MeasuraError, ValueError):
    """A unit symbol could not be resolved by a catalog."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Unknown unit symbol: {symbol}")


__all__ = [
    "MeasuraError",
    "IncommensurableError",
    "InvalidArgumentError",
    "DivisionByZeroError",
    "RationalOverflowError",
    "ConversionOverflowError",
    "ConversionFailedError",
    "NonLinearConverterError",
    "UnknownUnitError",
]
