"""
measura.core.converters
=======================

Composable value converters.

A converter maps a value expressed in one unit to the same quantity expressed
in another. Converters are immutable, compare structurally, and evaluate over
both ``float`` and `decimal.Decimal` (with a caller-supplied context).

Variants:

- `IdentityConverter`   x -> x
- `LinearConverter`     x -> x · scale        (exact `BigRational` scale)
- `ShiftConverter`      x -> x + offset       (affine, not linear)
- `PowConverter`        inner applied n times (inner must be linear)
- `RootConverter`       n-th root of a linear inner scale
- `ComposedConverter`   first, then second

Composition reduces eagerly: identities vanish, adjacent linear converters
multiply their scales and adjacent shifts add their offsets.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Context, Decimal
from typing import Optional, Union

from measura import config
from measura.core.big_rational import BigRational
from measura.core.rational import RationalBase
from measura.core.utils import decimal_root
from measura.errors import DivisionByZeroError, InvalidArgumentError, NonLinearConverterError

Number = Union[int, float, Decimal, RationalBase]


class UnitConverter:
    """Common interface of all converters."""

    __slots__ = ()

    # --- Evaluation ---
    def convert(self, value: float) -> float:
        raise NotImplementedError

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        raise NotImplementedError

    def __call__(self, value: float) -> float:
        return self.convert(value)

    # --- Properties ---
    @property
    def is_identity(self) -> bool:
        return False

    @property
    def is_linear(self) -> bool:
        """True when the converter is a pure multiplication (no offset)."""
        return False

    def scale(self) -> Optional[BigRational]:
        """Exact multiplicative factor, or ``None`` if there is none."""
        return None

    def scale_float(self) -> float:
        """Multiplicative factor as a double; only defined for linear converters."""
        raise NonLinearConverterError(f"{self} has no multiplicative scale")

    def scale_decimal(self, context: Optional[Context] = None) -> Decimal:
        raise NonLinearConverterError(f"{self} has no multiplicative scale")

    # --- Algebra ---
    def inverse(self) -> "UnitConverter":
        raise NotImplementedError

    def and_then(self, after: "UnitConverter") -> "UnitConverter":
        """Apply ``self`` first, then ``after``."""
        return _compose(self, after)

    def compose(self, before: "UnitConverter") -> "UnitConverter":
        """Apply ``before`` first, then ``self``."""
        return _compose(before, self)

    def pow(self, n: int) -> "UnitConverter":
        return pow(self, n)

    def root(self, n: int) -> "UnitConverter":
        return root(self, n)


@dataclass(frozen=True, slots=True)
class IdentityConverter(UnitConverter):
    def convert(self, value: float) -> float:
        return value

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        return value

    @property
    def is_identity(self) -> bool:
        return True

    @property
    def is_linear(self) -> bool:
        return True

    def scale(self) -> Optional[BigRational]:
        return BigRational.ONE

    def scale_float(self) -> float:
        return 1.0

    def scale_decimal(self, context: Optional[Context] = None) -> Decimal:
        return Decimal(1)

    def inverse(self) -> "UnitConverter":
        return self

    def __str__(self) -> str:
        return "identity"


@dataclass(frozen=True, slots=True)
class LinearConverter(UnitConverter):
    factor: BigRational

    def __post_init__(self) -> None:
        if not self.factor:
            raise InvalidArgumentError("linear converter requires a non-zero scale")

    def convert(self, value: float) -> float:
        return value * self.factor.to_double()

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        ctx = context or config.DECIMAL_CONTEXT
        num, den = self.factor
        if den == 1:
            return ctx.multiply(value, Decimal(num))
        return ctx.divide(ctx.multiply(value, Decimal(num)), Decimal(den))

    @property
    def is_linear(self) -> bool:
        return True

    def scale(self) -> Optional[BigRational]:
        return self.factor

    def scale_float(self) -> float:
        return self.factor.to_double()

    def scale_decimal(self, context: Optional[Context] = None) -> Decimal:
        return self.factor.to_decimal(context)

    def inverse(self) -> "UnitConverter":
        return LinearConverter(self.factor.reciprocal())

    def __str__(self) -> str:
        return f"×{self.factor}"


@dataclass(frozen=True, slots=True)
class ShiftConverter(UnitConverter):
    offset: BigRational

    def convert(self, value: float) -> float:
        return value + self.offset.to_double()

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        ctx = context or config.DECIMAL_CONTEXT
        return ctx.add(value, self.offset.to_decimal(ctx))

    def inverse(self) -> "UnitConverter":
        return ShiftConverter(-self.offset)

    def __str__(self) -> str:
        sign = "+" if self.offset.signum() >= 0 else "-"
        return f"{sign}{abs(self.offset)}"


@dataclass(frozen=True, slots=True)
class PowConverter(UnitConverter):
    """``inner`` applied ``n`` times; only built for scales that are not exact."""

    inner: UnitConverter
    n: int

    def convert(self, value: float) -> float:
        for _ in range(self.n):
            value = self.inner.convert(value)
        return value

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        for _ in range(self.n):
            value = self.inner.convert_decimal(value, context)
        return value

    @property
    def is_linear(self) -> bool:
        return self.inner.is_linear

    def scale(self) -> Optional[BigRational]:
        s = self.inner.scale()
        return None if s is None else s.pow(self.n)

    def scale_float(self) -> float:
        return self.inner.scale_float() ** self.n

    def scale_decimal(self, context: Optional[Context] = None) -> Decimal:
        ctx = context or config.DECIMAL_CONTEXT
        return ctx.power(self.inner.scale_decimal(ctx), self.n)

    def inverse(self) -> "UnitConverter":
        return PowConverter(self.inner.inverse(), self.n)

    def __str__(self) -> str:
        return f"(pow {self.n} '{self.inner}')"


@dataclass(frozen=True, slots=True)
class RootConverter(UnitConverter):
    """Multiplication by the ``n``-th root of a linear ``inner`` scale."""

    inner: UnitConverter
    n: int

    def __post_init__(self) -> None:
        if self.n <= 0:
            raise InvalidArgumentError(f"Unsupported nth root '{self.n}', only positive numbers are allowed.")
        if not self.inner.is_linear:
            raise NonLinearConverterError(f"Root converter applied to non-linear converter: '{self.inner}'")
        if self.n % 2 == 0 and self.inner.scale_float() < 0:
            raise InvalidArgumentError(f"Even root of negative scale '{self.inner}'")

    def convert(self, value: float) -> float:
        return value * self.scale_float()

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        ctx = context or config.DECIMAL_CONTEXT
        return ctx.multiply(value, self.scale_decimal(ctx))

    @property
    def is_linear(self) -> bool:
        return True

    def scale(self) -> Optional[BigRational]:
        return None

    def scale_float(self) -> float:
        s = self.inner.scale_float()
        if self.n == 2:
            return math.sqrt(s)
        return math.copysign(abs(s) ** (1.0 / self.n), s)

    def scale_decimal(self, context: Optional[Context] = None) -> Decimal:
        ctx = context or config.DECIMAL_CONTEXT
        return decimal_root(self.n, self.inner.scale_decimal(ctx), ctx)

    def inverse(self) -> "UnitConverter":
        return RootConverter(self.inner.inverse(), self.n)

    def __str__(self) -> str:
        return f"(root {self.n} '{self.inner}')"


@dataclass(frozen=True, slots=True)
class ComposedConverter(UnitConverter):
    first: UnitConverter
    second: UnitConverter

    def convert(self, value: float) -> float:
        return self.second.convert(self.first.convert(value))

    def convert_decimal(self, value: Decimal, context: Optional[Context] = None) -> Decimal:
        return self.second.convert_decimal(self.first.convert_decimal(value, context), context)

    @property
    def is_linear(self) -> bool:
        return self.first.is_linear and self.second.is_linear

    def scale(self) -> Optional[BigRational]:
        if not self.is_linear:
            return None
        a = self.first.scale()
        b = self.second.scale()
        if a is None or b is None:
            return None
        return a * b

    def scale_float(self) -> float:
        if not self.is_linear:
            raise NonLinearConverterError(f"{self} has no multiplicative scale")
        return self.first.scale_float() * self.second.scale_float()

    def scale_decimal(self, context: Optional[Context] = None) -> Decimal:
        if not self.is_linear:
            raise NonLinearConverterError(f"{self} has no multiplicative scale")
        ctx = context or config.DECIMAL_CONTEXT
        return ctx.multiply(self.first.scale_decimal(ctx), self.second.scale_decimal(ctx))

    def inverse(self) -> "UnitConverter":
        return ComposedConverter(self.second.inverse(), self.first.inverse())

    def __str__(self) -> str:
        return f"({self.first} then {self.second})"


IDENTITY = IdentityConverter()


def _compose(first: UnitConverter, second: UnitConverter) -> UnitConverter:
    if first.is_identity:
        return second
    if second.is_identity:
        return first
    if isinstance(first, LinearConverter) and isinstance(second, LinearConverter):
        return multiply(first.factor * second.factor)
    if isinstance(first, ShiftConverter) and isinstance(second, ShiftConverter):
        return shift(first.offset + second.offset)
    # fold into the tail of an existing chain: (a then Linear) then Linear
    if isinstance(first, ComposedConverter) and type(first.second) is type(second) and isinstance(
        second, (LinearConverter, ShiftConverter)
    ):
        return _compose(first.first, _compose(first.second, second))
    return ComposedConverter(first, second)


# --- Factories ---------------------------------------------------------------

def identity() -> UnitConverter:
    return IDENTITY


def multiply(factor: Number) -> UnitConverter:
    """Linear converter ``x -> x · factor``; a factor of one yields the identity."""
    f = BigRational.from_value(factor)
    if not f:
        raise InvalidArgumentError("cannot scale a unit by zero")
    if f == 1:
        return IDENTITY
    return LinearConverter(f)


def rational(numerator: int, denominator: int) -> UnitConverter:
    if denominator == 0:
        raise DivisionByZeroError("zero denominator in rational converter")
    return multiply(BigRational(numerator, denominator))


def shift(offset: Number) -> UnitConverter:
    o = BigRational.from_value(offset)
    if not o:
        return IDENTITY
    return ShiftConverter(o)


def power_of(base: int, exponent: int) -> UnitConverter:
    """Linear converter for ``base ** exponent`` (prefixes use this)."""
    return multiply(BigRational(base).pow(exponent))


def pow(c: UnitConverter, n: int) -> UnitConverter:
    """``c`` raised to the integer power ``n`` (negative powers invert)."""
    if not c.is_linear:
        raise NonLinearConverterError(f"Pow converter applied to non-linear converter: '{c}'")
    if n == 0:
        return IDENTITY
    if n < 0:
        return pow(c.inverse(), -n)
    if n == 1 or c.is_identity:
        return c
    s = c.scale()
    if s is not None:
        return multiply(s.pow(n))
    return PowConverter(c, n)


def root(c: UnitConverter, n: int) -> UnitConverter:
    """``n``-th root of the linear converter ``c``; exact roots stay exact."""
    if n <= 0:
        raise InvalidArgumentError(f"Unsupported nth root '{n}', only positive numbers are allowed.")
    if not c.is_linear:
        raise NonLinearConverterError(f"Root converter applied to non-linear converter: '{c}'")
    if n == 1 or c.is_identity:
        return c
    s = c.scale()
    if s is not None:
        num = _exact_root(s.numerator, n)
        den = _exact_root(s.denominator, n)
        if num is not None and den is not None:
            return multiply(BigRational(num, den))
    return RootConverter(c, n)


def _exact_root(value: int, n: int) -> Optional[int]:
    if value < 0:
        if n % 2 == 0:
            return None
        r = _exact_root(-value, n)
        return None if r is None else -r
    r = round(value ** (1.0 / n)) if value.bit_length() < 1000 else None
    if r is None:
        return None
    for candidate in (r - 1, r, r + 1):
        if candidate >= 0 and candidate**n == value:
            return candidate
    return None


__all__ = [
    "UnitConverter",
    "IdentityConverter",
    "LinearConverter",
    "ShiftConverter",
    "PowConverter",
    "RootConverter",
    "ComposedConverter",
    "IDENTITY",
    "identity",
    "multiply",
    "rational",
    "shift",
    "power_of",
    "pow",
    "root",
]
