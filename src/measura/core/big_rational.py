"""
measura.core.big_rational
=========================

Arbitrary-precision rational numbers used for unit scale factors.

`BigRational` shares the arithmetic of `Rational` but is unbounded. It adds
the conversions a scale factor needs:

- exact construction from a double, by decomposing its IEEE-754 bit pattern
  (``from_double_exact``);
- approximate construction via a bounded continued-fraction search
  (``from_double_approx``);
- exact construction from `decimal.Decimal` and evaluation back into a
  decimal context.
"""

from __future__ import annotations

import math
import struct
from decimal import Context, Decimal
from typing import ClassVar, Optional

from measura import config
from measura.core.rational import RationalBase
from measura.errors import (
    ConversionFailedError,
    ConversionOverflowError,
    InvalidArgumentError,
)

_SIGN_MASK = 0x8000000000000000
_EXPONENT_MASK = 0x7FF0000000000000
_MANTISSA_MASK = 0x000FFFFFFFFFFFFF
_IMPLICIT_BIT = 0x0010000000000000


class BigRational(RationalBase):
    """Unbounded exact rational ``numerator / denominator``."""

    __slots__ = ()
    _rank: ClassVar[int] = 1

    ZERO: ClassVar["BigRational"]
    ONE: ClassVar["BigRational"]

    # --- Construction from floating values ---
    @classmethod
    def from_double_exact(cls, value: float) -> "BigRational":
        """
        Exact rational equal to the double ``value``.

        The bit pattern is split into sign, biased exponent and mantissa and
        the result is ``±mantissa · 2^exponent``. ``1.0 / 3.0`` therefore maps
        to ``6004799503160661/18014398509481984``, not to ``1/3``.
        """
        value = float(value)
        if math.isnan(value):
            raise InvalidArgumentError("Cannot convert NaN value")
        if math.isinf(value):
            raise InvalidArgumentError("Cannot convert infinite value")

        bits = struct.unpack(">Q", struct.pack(">d", value))[0]
        sign = bits & _SIGN_MASK
        exponent = (bits & _EXPONENT_MASK) >> 52
        mantissa = bits & _MANTISSA_MASK

        if exponent == 0:
            # zero or subnormal: effective bias is 1022
            m = mantissa
            k = -1074 if m != 0 else 0
        else:
            m = mantissa | _IMPLICIT_BIT
            k = exponent - 1075

        if m != 0:
            while m & 1 == 0:
                m >>= 1
                k += 1
        if sign:
            m = -m

        if k < 0:
            return cls(m, 1 << -k)
        return cls(m << k)

    @classmethod
    def from_double_approx(
        cls,
        value: float,
        epsilon: float = config.APPROX_EPSILON,
        max_denominator: Optional[int] = None,
        max_iterations: int = config.APPROX_MAX_ITERATIONS,
    ) -> "BigRational":
        """
        Approximate ``value`` with a continued-fraction expansion.

        Use *either* ``epsilon`` (absolute error, ``max_denominator`` left
        unset) *or* ``max_denominator`` with ``epsilon == 0``. Convergents are
        bounded by ``config.APPROX_OVERFLOW``.

        Raises:
            ConversionOverflowError: a convergent leaves the bounded range.
            ConversionFailedError: no convergence within ``max_iterations``.
        """
        value = float(value)
        if not math.isfinite(value):
            raise InvalidArgumentError(f"Cannot approximate non-finite value {value}")
        overflow = config.APPROX_OVERFLOW
        if max_denominator is None:
            max_denominator = overflow

        r0 = value
        a0 = math.floor(r0)
        if abs(a0) > overflow:
            raise ConversionOverflowError(f"Overflow trying to convert {value} to fraction ({a0}/1)")

        # (almost) integers do not go through the iterations
        if abs(a0 - value) < epsilon:
            return cls(a0)

        p0, q0 = 1, 0
        p1, q1 = a0, 1
        p2, q2 = 0, 1

        n = 0
        while True:
            n += 1
            remainder = r0 - a0
            if remainder == 0:
                # the previous convergent is exact
                p2, q2 = p1, q1
                break
            r1 = 1.0 / remainder
            a1 = math.floor(r1)
            p2 = a1 * p1 + p0
            q2 = a1 * q1 + q0
            if p2 > overflow or q2 > overflow:
                # in max-denominator mode the last convergent is close enough
                if epsilon == 0 and abs(q1) < max_denominator:
                    break
                raise ConversionOverflowError(
                    f"Overflow trying to convert {value} to fraction ({p2}/{q2})"
                )

            convergent = p2 / q2
            if n < max_iterations and abs(convergent - value) > epsilon and q2 < max_denominator:
                p0, p1 = p1, p2
                q0, q1 = q1, q2
                a0 = a1
                r0 = r1
            else:
                break

        if n >= max_iterations:
            raise ConversionFailedError(
                f"Unable to convert {value} to fraction after {max_iterations} iterations"
            )

        if q2 < max_denominator:
            return cls(p2, q2)
        return cls(p1, q1)

    @classmethod
    def from_decimal(cls, value: Decimal) -> "BigRational":
        if not value.is_finite():
            raise InvalidArgumentError(f"Cannot convert non-finite decimal {value}")
        n, d = value.as_integer_ratio()
        return cls(n, d)

    @classmethod
    def from_value(cls, value: "int | float | Decimal | RationalBase") -> "BigRational":
        """
        Best exact reading of a user-supplied number.

        Floats go through their shortest decimal representation, so ``0.001``
        becomes ``1/1000`` rather than the binary expansion.
        """
        if isinstance(value, Decimal):
            return cls.from_decimal(value)
        if isinstance(value, float):
            if not math.isfinite(value):
                raise InvalidArgumentError(f"Cannot convert non-finite value {value}")
            return cls.from_decimal(Decimal(repr(value)))
        return cls.coerce(value)

    # --- Evaluation ---
    def to_double(self) -> float:
        try:
            return self[0] / self[1]
        except OverflowError as e:
            raise ConversionOverflowError(f"{self} is too large for a double") from e

    def to_decimal(self, context: Optional[Context] = None) -> Decimal:
        ctx = context or config.DECIMAL_CONTEXT
        if self[1] == 1:
            return ctx.plus(Decimal(self[0]))
        return ctx.divide(Decimal(self[0]), Decimal(self[1]))

    def __float__(self) -> float:
        return self.to_double()


BigRational.ZERO = BigRational(0)
BigRational.ONE = BigRational(1)


__all__ = ["BigRational"]
