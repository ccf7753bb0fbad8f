# measura.core.rational

from __future__ import annotations

from fractions import Fraction
from math import gcd
from typing import Any, ClassVar, TypeVar, Union

from measura import config
from measura.errors import DivisionByZeroError, RationalOverflowError

R = TypeVar("R", bound="RationalBase")
RationalLike = Union[int, Fraction, "RationalBase"]


class RationalBase(tuple):
    """
    Immutable ``(numerator, denominator)`` pair kept in lowest terms.

    Tuple subclass => hashable and cheap, but tuple concatenation/repetition
    is replaced by rational arithmetic. Concrete types differ only in the
    range they accept (see `Rational` and `BigRational`).
    """

    __slots__ = ()

    # Types of higher rank absorb lower ranks in mixed arithmetic.
    _rank: ClassVar[int] = 0

    def __new__(cls: type[R], numerator: int = 0, denominator: int = 1) -> R:
        if isinstance(numerator, bool) or not isinstance(numerator, int):
            raise TypeError(f"numerator must be int, got {type(numerator).__name__}")
        if isinstance(denominator, bool) or not isinstance(denominator, int):
            raise TypeError(f"denominator must be int, got {type(denominator).__name__}")
        if denominator == 0:
            raise DivisionByZeroError(f"zero denominator in {cls.__name__}({numerator}, 0)")

        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        g = gcd(numerator, denominator)
        if g > 1:
            numerator //= g
            denominator //= g
        cls._check_range(numerator, denominator)
        return tuple.__new__(cls, (numerator, denominator))

    @classmethod
    def _check_range(cls, numerator: int, denominator: int) -> None:
        """Hook for bounded subclasses."""

    @classmethod
    def of(cls: type[R], numerator: int, denominator: int = 1) -> R:
        return cls(numerator, denominator)

    @classmethod
    def coerce(cls: type[R], value: Any) -> R:
        """Convert ``int``, `Fraction` or another rational into ``cls``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, RationalBase):
            return cls(value[0], value[1])
        if isinstance(value, Fraction):
            return cls(value.numerator, value.denominator)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise TypeError(f"cannot convert {type(value).__name__} to {cls.__name__}")

    def _other(self: R, other: Any) -> R | None:
        # NotImplemented for higher-ranked rationals so their reflected operator runs.
        if isinstance(other, RationalBase) and other._rank > self._rank:
            return None
        try:
            return type(self).coerce(other)
        except TypeError:
            return None

    # --- Accessors ---
    @property
    def numerator(self) -> int:
        return self[0]

    @property
    def denominator(self) -> int:
        return self[1]

    @property
    def is_integer(self) -> bool:
        return self[1] == 1

    # --- Arithmetic ---
    def add(self: R, other: RationalLike) -> R:
        o = type(self).coerce(other)
        return type(self)(self[0] * o[1] + o[0] * self[1], self[1] * o[1])

    def subtract(self: R, other: RationalLike) -> R:
        return self.add(type(self).coerce(other).negate())

    def multiply(self: R, other: RationalLike) -> R:
        o = type(self).coerce(other)
        return type(self)(self[0] * o[0], self[1] * o[1])

    def divide(self: R, other: RationalLike) -> R:
        return self.multiply(type(self).coerce(other).reciprocal())

    def negate(self: R) -> R:
        return type(self)(-self[0], self[1])

    def reciprocal(self: R) -> R:
        if self[0] == 0:
            raise DivisionByZeroError("reciprocal of zero")
        return type(self)(self[1], self[0])

    def pow(self: R, exponent: int) -> R:
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            raise TypeError(f"exponent must be int, got {type(exponent).__name__}")
        if exponent == 0:
            return type(self)(1)
        if exponent < 0:
            return self.reciprocal().pow(-exponent)
        return type(self)(self[0] ** exponent, self[1] ** exponent)

    def abs(self: R) -> R:
        return self if self[0] >= 0 else self.negate()

    def signum(self) -> int:
        return (self[0] > 0) - (self[0] < 0)

    def compare(self, other: RationalLike) -> int:
        o = type(self).coerce(other) if not isinstance(other, RationalBase) else other
        lhs = self[0] * o[1]
        rhs = o[0] * self[1]
        return (lhs > rhs) - (lhs < rhs)

    # --- Operator overloads ---
    def __add__(self, other: Any) -> Any:  # type: ignore[override]
        o = self._other(other)
        return NotImplemented if o is None else self.add(o)

    def __radd__(self, other: Any) -> Any:
        o = self._other(other)
        return NotImplemented if o is None else o.add(self)

    def __sub__(self, other: Any) -> Any:
        o = self._other(other)
        return NotImplemented if o is None else self.subtract(o)

    def __rsub__(self, other: Any) -> Any:
        o = self._other(other)
        return NotImplemented if o is None else o.subtract(self)

    def __mul__(self, other: Any) -> Any:  # type: ignore[override]
        o = self._other(other)
        return NotImplemented if o is None else self.multiply(o)

    def __rmul__(self, other: Any) -> Any:  # type: ignore[override]
        o = self._other(other)
        return NotImplemented if o is None else o.multiply(self)

    def __truediv__(self, other: Any) -> Any:
        o = self._other(other)
        return NotImplemented if o is None else self.divide(o)

    def __rtruediv__(self, other: Any) -> Any:
        o = self._other(other)
        return NotImplemented if o is None else o.divide(self)

    def __pow__(self, exponent: Any, modulo: Any | None = None) -> Any:
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for rationals.")
        if isinstance(exponent, RationalBase) and exponent.is_integer:
            exponent = exponent[0]
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        return self.pow(exponent)

    def __neg__(self: R) -> R:
        return self.negate()

    def __pos__(self: R) -> R:
        return self

    def __abs__(self: R) -> R:
        return self.abs()

    def __bool__(self) -> bool:
        return self[0] != 0

    def __float__(self) -> float:
        # int / int is correctly rounded
        return self[0] / self[1]

    def __int__(self) -> int:
        q = abs(self[0]) // self[1]
        return q if self[0] >= 0 else -q

    # --- Comparison & hashing ---
    def __eq__(self, other: object) -> bool:
        if isinstance(other, RationalBase):
            return self[0] == other[0] and self[1] == other[1]
        if isinstance(other, int):
            return self[1] == 1 and self[0] == other
        if isinstance(other, Fraction):
            return self[0] == other.numerator and self[1] == other.denominator
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self) -> int:
        # Consistent with int and Fraction so mixed dict keys behave.
        if self[1] == 1:
            return hash(self[0])
        return hash(Fraction(self[0], self[1]))

    def _cmp(self, other: Any) -> int | None:
        o = self._other(other) if not isinstance(other, RationalBase) else other
        return None if o is None else self.compare(o)

    def __lt__(self, other: Any) -> bool:
        c = self._cmp(other)
        return NotImplemented if c is None else c < 0

    def __le__(self, other: Any) -> bool:
        c = self._cmp(other)
        return NotImplemented if c is None else c <= 0

    def __gt__(self, other: Any) -> bool:
        c = self._cmp(other)
        return NotImplemented if c is None else c > 0

    def __ge__(self, other: Any) -> bool:
        c = self._cmp(other)
        return NotImplemented if c is None else c >= 0

    def __getnewargs__(self) -> tuple[int, int]:  # pickling
        return (self[0], self[1])

    def as_fraction(self) -> Fraction:
        return Fraction(self[0], self[1])

    def __repr__(self) -> str:
        if self[1] == 1:
            return f"{type(self).__name__}({self[0]})"
        return f"{type(self).__name__}({self[0]}, {self[1]})"

    def __str__(self) -> str:
        return str(self[0]) if self[1] == 1 else f"{self[0]}/{self[1]}"


class Rational(RationalBase):
    """
    Exact fixed-width rational used for exponents.

    Numerator and denominator stay within the signed 64-bit range; a result
    leaving that range raises `RationalOverflowError`.

    >>> Rational(2, 4)
    Rational(1, 2)
    >>> Rational(1, 2) + Rational(1, 3)
    Rational(5, 6)
    """

    __slots__ = ()

    ZERO: ClassVar["Rational"]
    ONE: ClassVar["Rational"]

    @classmethod
    def _check_range(cls, numerator: int, denominator: int) -> None:
        if not (config.RATIONAL_MIN <= numerator <= config.RATIONAL_MAX) or denominator > config.RATIONAL_MAX:
            raise RationalOverflowError(f"{numerator}/{denominator} exceeds 64-bit range")


Rational.ZERO = Rational(0)
Rational.ONE = Rational(1)


__all__ = ["RationalBase", "Rational", "RationalLike"]
