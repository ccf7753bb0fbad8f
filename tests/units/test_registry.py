# pytest tests for measura.units.registry
#
# These tests exercise normalization, aliases, SI-prefix synthesis,
# anti-stacking rules, thread-safety and the builder's registration rules.
# Most tests use a freshly built SI catalog; the builder tests assemble
# small catalogs of their own.

import threading

import pytest

from measura.core.dimensions import LENGTH
from measura.core.unit import BaseUnit, PrefixedUnit, Unit
from measura.errors import InvalidArgumentError, UnknownUnitError
from measura.units import si
from measura.units.prefixes import KILO, MICRO
from measura.units.registry import (
    UnitCatalog,
    UnitCatalogBuilder,
    UnitNamespace,
    normalize_symbol,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def cat(fresh_catalog):
    return fresh_catalog


@pytest.fixture()
def builder():
    b = UnitCatalogBuilder()
    b.register(si.METRE).register(si.SECOND).register(si.KILOGRAM)
    return b


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("inp, expected", [
    ("um", "µm"),        # ASCII micro-prefix fallback at start
    ("uA", "µA"),
    ("μs", "µs"),   # Greek small mu -> micro sign
    ("  km  ", "km"),
    ("ohm", "Ω"),        # textual alias -> canonical
    ("kOhm", "kΩ"),
    ("", ""),
])
def test_normalize_symbol(inp, expected):
    assert normalize_symbol(inp) == expected


@pytest.mark.parametrize("inp, expected", [
    ("um", "µm"),
    ("uA", "µA"),
    ("μs", "µs"),
    ("ohm", "Ω"),
    ("Ohm", "Ω"),
    ("OHM", "Ω"),
    ("kohm", "kΩ"),
])
def test_lookup_normalizes_before_resolving(cat, inp, expected):
    assert cat.get(inp) is cat.get(expected)


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("alias, canonical", [
    ("metre", "m"),
    ("meters", "m"),
    ("METRE", "m"),      # case-insensitive alias spelling
    ("sec", "s"),
    ("hr", "h"),
    ("Liter", "L"),
    ("l", "L"),
    ("degC", "°C"),
    ("celsius", "°C"),
    ("radian", "rad"),
])
def test_aliases_map_to_canonical(cat, alias, canonical):
    assert cat.get(alias) is cat.get(canonical)


def test_aliases_snapshot_is_a_copy(cat):
    aliases = cat.aliases()
    assert aliases["meter"] == "m"
    aliases["meter"] = "s"
    assert cat.get("meter") is si.METRE


def test_alias_requires_known_canonical(builder):
    with pytest.raises(InvalidArgumentError):
        builder.register_alias("foot", "ft")


def test_alias_may_not_shadow_another_unit(builder):
    with pytest.raises(InvalidArgumentError):
        builder.register_alias("s", "m")
    builder.register_alias("s", "m", replace=True)
    assert builder.build().get("s") is si.METRE


# ---------------------------------------------------------------------------
# Builder rules
# ---------------------------------------------------------------------------

def test_duplicate_registration_rejected(builder):
    with pytest.raises(InvalidArgumentError):
        builder.register(si.METRE)
    builder.register(si.METRE, replace=True)


def test_unit_named_like_an_alias_rejected(builder):
    builder.register_alias("metre", "m")
    with pytest.raises(InvalidArgumentError):
        builder.register(BaseUnit("metre", LENGTH))


def test_anonymous_units_cannot_be_registered(builder):
    with pytest.raises(InvalidArgumentError):
        builder.register(si.METRE * 3)


@pytest.mark.parametrize("reserved", ["__call__", "_reserved_names", "__getattr__"])
def test_reserved_namespace_names_rejected(builder, reserved):
    with pytest.raises(InvalidArgumentError):
        builder.register(BaseUnit(reserved, LENGTH))
    with pytest.raises(InvalidArgumentError):
        builder.register_alias(reserved, "m")


def test_builder_is_chainable_and_catalog_immutable(builder):
    cat = builder.build()
    assert isinstance(cat, UnitCatalog)
    assert len(cat) == 3
    assert sorted(cat) == ["kg", "m", "s"]
    # later builder changes never leak into a built catalog
    builder.register(si.AMPERE)
    assert "A" not in cat
    with pytest.raises(TypeError):
        cat._units["A"] = si.AMPERE


def test_catalog_interns_named_products():
    cat = (
        UnitCatalogBuilder()
        .register((si.AMPERE * si.MOLE).with_symbol("Amol", "ampere mole"))
        .build()
    )
    assert si.MOLE * si.AMPERE is cat.get("Amol")


# ---------------------------------------------------------------------------
# Prefix synthesis & anti-stacking
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("sym, base, factor", [
    ("km", "m", 1e3),
    ("Ms", "s", 1e6),
    ("µA", "A", 1e-6),
    ("nmol", "mol", 1e-9),
    ("kPa", "Pa", 1e3),
    ("mg", "g", 1e-6),
    ("mL", "L", 1e-6),
    ("dam", "m", 1e1),
])
def test_valid_prefix_synthesis(cat, sym, base, factor):
    base_u = cat.get(base)
    unit = cat.get(sym)
    assert isinstance(unit, PrefixedUnit)
    assert unit.symbol == sym
    assert unit.dimension is base_u.dimension
    assert unit.get_converter_to(base_u.system_unit).scale_float() == pytest.approx(factor)


def test_synthesis_is_lazy_and_idempotent(cat):
    base_len = len(cat)
    km1 = cat.get("km")
    km2 = cat.get("km")
    assert km1 is km2
    assert len(cat) == base_len
    assert "km" not in cat.all()
    assert "km" in cat


def test_synthesized_unit_matches_explicit_prefix(cat):
    assert cat.get("km") == si.METRE.with_prefix(KILO)
    assert cat.get("µs").prefix is MICRO


@pytest.mark.parametrize("bad_sym", [
    "kkm",      # kilo + (km): stacking
    "kµm",
    "mkg",      # kg refuses prefixes
    "kkg",
    "ukg",
    "kmin", "µmin", "umin",
    "kh", "mh",
    "kd",
    "k°C",
    "da",       # bare prefix
    "blorp",
])
def test_invalid_symbols_raise(cat, bad_sym):
    with pytest.raises(UnknownUnitError):
        cat.get(bad_sym)


def test_non_prefixable_does_not_accidentally_create_units(cat):
    base_len = len(cat)
    for bad in ["kmin", "umin", "kh", "mkg"]:
        with pytest.raises(ValueError):
            cat.get(bad)
    assert len(cat) == base_len
    assert cat.is_non_prefixable("kg")
    assert cat.is_non_prefixable(" min ")
    assert not cat.is_non_prefixable("m")


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

def test_unknown_symbol_error(cat):
    with pytest.raises(UnknownUnitError) as exc:
        cat.get("nope")
    assert exc.value.symbol == "nope"
    assert str(exc.value) == "Unknown unit symbol: nope"
    assert not cat.has("nope")
    assert "nope" not in cat


def test_lookup_requires_string(cat):
    with pytest.raises(TypeError):
        cat.get(3)
    assert 3 not in cat


# ---------------------------------------------------------------------------
# Thread-safety: concurrent synthesis of the same symbol
# ---------------------------------------------------------------------------

def test_thread_safe_prefixed_creation(cat):
    created = []
    errs = []

    def worker():
        try:
            created.append(cat.get("Gm"))
        except Exception as e:
            errs.append(e)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errs
    first = created[0]
    assert all(unit is first for unit in created)


# ---------------------------------------------------------------------------
# Namespace
# ---------------------------------------------------------------------------

@pytest.fixture()
def ns(cat):
    return UnitNamespace(cat)


def test_namespace_call_and_getattr(ns, cat):
    assert ns("m") is cat.get("m")
    assert ns.kg is cat.get("kg")
    assert ns("A") is ns.A
    assert isinstance(ns.km, Unit)


@pytest.mark.parametrize("alias", ["ohm", "Ohm", "OHM"])
def test_namespace_getattr_aliases(ns, cat, alias):
    assert ns.__getattr__(alias) is cat.get("Ω")


def test_namespace_unknown_symbols(ns):
    with pytest.raises(AttributeError):
        _ = ns.blorp
    with pytest.raises(ValueError):
        ns("blorp")


def test_namespace_contains(ns):
    assert "kPa" in ns
    assert "blorp" not in ns


def test_namespace_dir_includes_units_and_aliases(ns):
    names = dir(ns)
    assert "m" in names
    assert "Ω" in names
    assert "ohm" in names
    assert names == sorted(names)
