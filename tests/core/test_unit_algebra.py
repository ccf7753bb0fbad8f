import gc
import weakref
from concurrent.futures import ThreadPoolExecutor
from fractions import Fraction

import pytest

from measura.core import converters as conv
from measura.core import unit_algebra
from measura.core.converters import RootConverter
from measura.core.dimensions import NONE, Dimension
from measura.core.rational import Rational
from measura.core.unit import ONE, BaseUnit, PrefixedUnit, ProductUnit
from measura.errors import InvalidArgumentError
from measura.units.prefixes import KILO, MEGA, MILLI

# ---- Canonicalization -----------------------------------------------------------------

def test_products_are_order_independent(u):
    assert u.m * u.s is u.s * u.m
    assert u.kg * u.m * u.A is u.A * (u.m * u.kg)


def test_factors_are_sorted_by_label(u):
    p = u.s * u.m * u.A
    assert [e.unit.symbol for e in p.elements] == ["A", "m", "s"]
    key = unit_algebra.canonical_key([(u.s, Rational(-1)), (u.m, Rational(1))])
    assert [e.unit for e in key] == [u.m, u.s]


def test_exponents_merge(u):
    assert u.m * u.m is u.m**2
    assert (u.m**2) * (u.m**-1) is u.m
    assert u.m**Fraction(1, 2) * u.m**Fraction(1, 2) is u.m


def test_cancellation(u):
    assert u.m * u.s / u.s is u.m
    assert u.m / u.m is ONE
    assert u.N / u.N is ONE


def test_inverse_round_trip(u):
    speed = u.m / u.s
    assert speed.inverse() is u.s / u.m
    assert speed.inverse().inverse() is speed
    assert u.s.inverse().inverse() is u.s


def test_product_of_matches_operators(u):
    assert unit_algebra.product_of(u.m, 1, u.s, -1) is u.m / u.s
    assert unit_algebra.product_of(u.m, 2, u.m, -2) is ONE
    assert unit_algebra.power_of(u.m / u.s, 2) is u.m**2 / u.s**2
    assert unit_algebra.power_of(u.km, 0) is ONE


@pytest.mark.regression(reason="Products whose scales cancel (km·mm) must return the coherent unit m², not a scaled product")
def test_same_system_scale_collapses_to_system_unit(u):
    assert u.km * u.mm is u.m**2
    assert u.km / u.m != ONE
    assert (u.km / u.m).get_converter_to(ONE).convert(1.0) == 1000.0
    assert u.km / u.m == ONE * 1000


def test_fractional_powers(u):
    root_km = u.km ** 0.5
    assert isinstance(root_km, ProductUnit)
    assert root_km.symbol == "km^(1/2)"
    assert isinstance(root_km.system_converter, RootConverter)
    assert root_km.get_converter_to(u.m ** 0.5).convert(1.0) == pytest.approx(1000 ** 0.5)
    assert (u.km ** 2) ** 0.5 == u.km


def test_integer_powers_of_scaled_units(u):
    assert (u.km**2).get_converter_to(u.m**2).convert(1.0) == 1e6
    assert (u.km**-2).get_converter_to(u.m**-2).convert(1.0) == 1e-6
    assert (u.km**3).system_converter == conv.multiply(10**9)


# ---- Dimensionless products -----------------------------------------------------------------

@pytest.mark.regression(reason="rad·s/s must stay rad; dimensionless atoms may not collapse to ONE")
def test_dimensionless_atoms_survive_cancellation(u):
    assert u.rad * u.s / u.s is u.rad
    assert u.rad == u.rad * u.m / u.m
    assert u.rad != u.m / u.m


def test_dimensionless_products_compare_by_atoms(u):
    assert u.rad**2 == u.rad * u.rad
    assert u.rad**2 != u.sr
    assert u.rad * u.sr == u.sr * u.rad
    assert (u.rad * u.sr).dimension is NONE


def test_dimensionless_products_are_not_cached(u):
    sq = u.rad**2
    assert sq not in unit_algebra.cached_units()


# ---- Named-unit interning ---------------------------------------------------------------------

@pytest.mark.parametrize("build, symbol", [
    (lambda u: u.kg * u.m / u.s**2, "N"),
    (lambda u: u.N * u.m, "J"),
    (lambda u: u.J / u.s, "W"),
    (lambda u: u.A * u.s, "C"),
    (lambda u: u.W / u.A, "V"),
    (lambda u: u.V / u.A, "Ω"),
    (lambda u: u.mol / u.s, "kat"),
    (lambda u: 1 / u.s, "Hz"),
])
def test_algebra_lands_on_named_units(u, build, symbol):
    assert build(u) is u(symbol)


def test_intern_named_only_accepts_named_system_products(u):
    assert unit_algebra.intern_named(u.N)
    assert not unit_algebra.intern_named(u.m)
    assert not unit_algebra.intern_named(u.g)
    assert not unit_algebra.intern_named(u.L)
    assert not unit_algebra.intern_named((u.rad**2).with_symbol("rad2"))


def test_intern_custom_named_unit(u):
    luminous_flow = (u.cd * u.mol * u.m).with_symbol("lfx")
    assert unit_algebra.intern_named(luminous_flow)
    assert u.m * u.mol * u.cd is luminous_flow
    assert luminous_flow in unit_algebra.cached_units()


def test_cache_entries_are_weak():
    widget = BaseUnit("wdg", Dimension.of_name("widget-weak"))
    ref = weakref.ref(widget**3)
    gc.collect()
    assert ref() is None


def test_concurrent_products_share_one_instance(u):
    gadget = BaseUnit("gdt", Dimension.of_name("gadget"))

    def build(_):
        return gadget**2 / u.s

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(build, range(64)))
    assert all(r is results[0] for r in results)


# ---- Transforms, prefixes and names ---------------------------------------------------------------

def test_transformed_identity_returns_unit(u):
    assert unit_algebra.transformed(u.m, conv.identity()) is u.m


def test_prefix_exponents_sum_within_a_family(u):
    km = u.m.with_prefix(KILO)
    assert km.with_prefix(MILLI) is u.m
    mega = km.with_prefix(KILO)
    assert isinstance(mega, PrefixedUnit)
    assert mega.prefix is MEGA
    assert mega.symbol == "Mm"
    assert mega.delegate is u.m


def test_prefix_with_unnamed_exponent(u):
    odd = u.m.with_prefix(KILO).with_prefix(KILO.with_exponent(1))
    assert odd.symbol == "10⁴m"
    assert odd.system_converter == conv.multiply(10**4)


def test_named_requires_symbol_or_name(u):
    with pytest.raises(InvalidArgumentError):
        unit_algebra.named(u.m, None)


def test_renaming_replaces_name(u):
    renamed = unit_algebra.named(u.N, "newton-force", "nf")
    assert renamed.delegate is u.N.delegate
    assert renamed.symbol == "newton-force"
    assert renamed.name == "nf"
