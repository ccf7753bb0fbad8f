import math
from fractions import Fraction

import pytest

from measura.core.big_rational import BigRational
from measura.core.rational import Rational
from measura.errors import DivisionByZeroError, RationalOverflowError

# --- Construction & normalization ---------------------------------------------

@pytest.mark.parametrize("n, d", [
    (2, 4), (-6, 9), (6, -9), (0, 5), (7, 1), (-1, -3), (123456, 7890),
])
def test_constructed_fraction_is_reduced_with_positive_denominator(n, d):
    r = Rational(n, d)
    assert r.denominator > 0
    assert math.gcd(abs(r.numerator), r.denominator) == 1
    assert Fraction(r.numerator, r.denominator) == Fraction(n, d)


def test_equal_fractions_compare_equal():
    assert Rational.of(2, 4) == Rational.of(1, 2)
    assert Rational(0, 7) == Rational.ZERO
    assert Rational(0, -3).denominator == 1


def test_zero_denominator_raises():
    with pytest.raises(DivisionByZeroError):
        Rational(1, 0)
    # also a builtin ZeroDivisionError
    with pytest.raises(ZeroDivisionError):
        Rational.of(3, 0)


def test_rejects_non_integers():
    with pytest.raises(TypeError):
        Rational(1.5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Rational(True)  # type: ignore[arg-type]


def test_64_bit_bound():
    Rational(2**63 - 1)
    Rational(-(2**63))
    with pytest.raises(RationalOverflowError):
        Rational(2**63)
    with pytest.raises(OverflowError):
        Rational(2**62).multiply(4)


# --- Arithmetic -----------------------------------------------------------------

@pytest.mark.parametrize("a, b", [
    (Rational(1, 2), Rational(1, 3)),
    (Rational(-5, 7), Rational(2, 9)),
    (Rational(3), Rational(-3)),
])
def test_arithmetic_matches_fraction(a, b):
    fa, fb = a.as_fraction(), b.as_fraction()
    assert a.add(b) == fa + fb
    assert a.subtract(b) == fa - fb
    assert a.multiply(b) == fa * fb
    assert a - b == fa - fb
    assert a * b == fa * fb
    if b:
        assert a / b == fa / fb


def test_additive_inverse_is_zero():
    for r in (Rational(1, 2), Rational(-7, 3), Rational(0)):
        assert r.add(r.negate()) == Rational.ZERO
        assert r + (-r) == 0


def test_multiply_by_int():
    assert Rational(1, 3).multiply(3) == Rational.ONE
    assert 2 * Rational(1, 4) == Rational(1, 2)
    assert Rational(1, 4) * 2 == Rational(1, 2)


def test_reciprocal_and_pow():
    assert Rational(2, 3).reciprocal() == Rational(3, 2)
    assert Rational(-2, 3).reciprocal() == Rational(-3, 2)
    assert Rational(2, 3).pow(2) == Rational(4, 9)
    assert Rational(2, 3).pow(-2) == Rational(9, 4)
    assert Rational(5).pow(0) == Rational.ONE
    assert Rational(2, 3) ** 3 == Rational(8, 27)
    with pytest.raises(DivisionByZeroError):
        Rational.ZERO.reciprocal()


def test_compare_and_signum():
    assert Rational(1, 3).compare(Rational(1, 2)) == -1
    assert Rational(1, 2).compare(Rational(2, 4)) == 0
    assert Rational(3, 4).compare(Rational(1, 2)) == 1
    assert Rational(1, 3) < Rational(1, 2) <= Rational(2, 4) < 1
    assert Rational(-3, 4).signum() == -1
    assert Rational(0).signum() == 0
    assert Rational(9, 4).signum() == 1
    assert sorted([Rational(1, 2), Rational(-1), Rational(1, 3)]) == [Rational(-1), Rational(1, 3), Rational(1, 2)]


def test_hash_consistent_with_int_and_fraction():
    assert hash(Rational(3)) == hash(3)
    assert hash(Rational(1, 2)) == hash(Fraction(1, 2))
    assert {Rational(2): "x"}[2] == "x"


def test_bool_float_int_str():
    assert not Rational.ZERO
    assert Rational(1, 3)
    assert float(Rational(1, 4)) == 0.25
    assert int(Rational(-7, 2)) == -3
    assert str(Rational(3, 4)) == "3/4"
    assert str(Rational(5)) == "5"
    assert repr(Rational(3, 4)) == "Rational(3, 4)"


def test_mixed_with_big_rational_promotes():
    r = Rational(1, 2) + BigRational(1, 3)
    assert isinstance(r, BigRational)
    assert r == BigRational(5, 6)
    r2 = BigRational(10**30) * Rational(1, 2)
    assert isinstance(r2, BigRational)
    assert r2 == BigRational(5 * 10**29)
