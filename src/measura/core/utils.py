"""
measura.core.utils
==================

Small numeric and formatting helpers shared by the core modules.

This module provides helper functions for representing exponents in a
readable scientific format (e.g., 'kg·m/s²'), coercing user-supplied
exponents into exact rationals, and evaluating n-th roots of decimals.
"""

from __future__ import annotations

from decimal import Context, Decimal, localcontext
from fractions import Fraction
from typing import Iterable, List, Tuple, Union

from measura import config
from measura.core.big_rational import BigRational
from measura.core.rational import Rational, RationalBase
from measura.errors import InvalidArgumentError

ExponentLike = Union[int, float, Fraction, RationalBase]

_SUPERSCRIPTS = str.maketrans("0123456789-", "⁰¹²³⁴⁵⁶⁷⁸⁹⁻")


def _sup(n: int) -> str:
    return "" if n == 1 else str(n).translate(_SUPERSCRIPTS)


def format_exponent(e: Rational) -> str:
    """Superscript for an exponent; fractional exponents use ``^(p/q)``."""
    if e.denominator == 1:
        return _sup(e.numerator)
    return f"^({e.numerator}/{e.denominator})"


def format_product(parts: Iterable[Tuple[str, Rational]]) -> str:
    """
    Join ``(symbol, exponent)`` pairs as 'kg·m/s²'.

    Positive exponents go to the numerator, negative ones to the denominator;
    order is preserved.
    """
    num: List[str] = []
    den: List[str] = []
    for sym, e in parts:
        if e.signum() > 0:
            num.append(sym + format_exponent(e))
        elif e.signum() < 0:
            den.append(sym + format_exponent(-e))

    numerator = "·".join(num) if num else "1"
    denominator = "·".join(den)
    return f"{numerator}/{denominator}" if denominator else numerator


def as_exponent(n: ExponentLike) -> Rational:
    """
    Normalize an exponent to an exact `Rational`.

    Floats are accepted only when they are (within tolerance) a fraction with
    a small denominator, e.g. ``0.5`` or ``1/3``.
    """
    if isinstance(n, bool):
        raise TypeError("Exponent must be int, float, Fraction or Rational, got bool")
    if isinstance(n, Rational):
        return n
    if isinstance(n, (int, Fraction, RationalBase)):
        return Rational.coerce(n)
    if isinstance(n, float):
        approx = BigRational.from_double_approx(n, max_denominator=config.EXPONENT_MAX_DENOMINATOR)
        if abs(approx.to_double() - n) > config.EXPONENT_TOLERANCE:
            raise InvalidArgumentError(f"Exponent {n!r} is not a simple rational number")
        return Rational.coerce(approx)
    raise TypeError(f"Exponent must be int, float, Fraction or Rational, got {type(n).__name__}")


def decimal_root(n: int, value: Decimal, context: Context) -> Decimal:
    """
    n-th root of ``value`` rounded to ``context``.

    Newton iteration at two extra digits of precision, seeded from
    ``exp(ln(x) / n)``; the result is stripped of trailing zeros.
    """
    if n <= 0:
        raise InvalidArgumentError(f"Unsupported nth root '{n}', only positive numbers are allowed.")
    if value == 0:
        return Decimal(0)
    negative = value < 0
    if negative and n % 2 == 0:
        raise InvalidArgumentError(f"Even root of negative value {value}")
    if n == 1:
        return context.plus(value)

    x = abs(value)
    with localcontext(context) as work:
        work.prec = context.prec + 2
        if n == 2:
            y = x.sqrt()
        else:
            y = (x.ln() / n).exp()
            n_dec = Decimal(n)
            for _ in range(100):
                nxt = ((n_dec - 1) * y + x / y ** (n - 1)) / n_dec
                if nxt == y:
                    break
                y = nxt

    result = context.plus(-y if negative else y)
    return result.normalize(context)


__all__ = ["format_exponent", "format_product", "as_exponent", "decimal_root"]
