"""
measura.units.si
================

The International System of Units as module constants, plus the default
`UnitCatalog` built from them.

Base units are `BaseUnit` instances over the seven base dimensions. Named
coherent derived units (``N``, ``J``, ...) are `NamedUnit` wrappers over
product units and are interned when the catalog is built, so algebra lands
on them: ``KILOGRAM * METRE / SECOND**2 is NEWTON``. Dimensionless ``rad``
and ``sr`` (and ``Bq``, ``Sv``, kept apart from ``Hz``/``Gy``) are
`AlternateSystemUnit` instances.
"""

from __future__ import annotations

import logging

from measura.core.dimensions import (
    AMOUNT_OF_SUBSTANCE,
    ELECTRIC_CURRENT,
    LENGTH,
    LUMINOUS_INTENSITY,
    MASS,
    TEMPERATURE,
    TIME,
)
from measura.core.unit import ONE, AlternateSystemUnit, BaseUnit, Unit
from measura.units.prefixes import DECI
from measura.units.registry import UnitCatalog, UnitCatalogBuilder

logger = logging.getLogger(__name__)

# --- Base units ---------------------------------------------------------------
METRE = BaseUnit("m", LENGTH, "metre")
KILOGRAM = BaseUnit("kg", MASS, "kilogram")
SECOND = BaseUnit("s", TIME, "second")
AMPERE = BaseUnit("A", ELECTRIC_CURRENT, "ampere")
KELVIN = BaseUnit("K", TEMPERATURE, "kelvin")
MOLE = BaseUnit("mol", AMOUNT_OF_SUBSTANCE, "mole")
CANDELA = BaseUnit("cd", LUMINOUS_INTENSITY, "candela")

# --- Dimensionless ------------------------------------------------------------
RADIAN = AlternateSystemUnit(ONE, "rad", "radian")
STERADIAN = AlternateSystemUnit(ONE, "sr", "steradian")

# --- Named coherent derived units --------------------------------------------
HERTZ = (ONE / SECOND).with_symbol("Hz", "hertz")
NEWTON = (KILOGRAM * METRE / SECOND**2).with_symbol("N", "newton")
PASCAL = (NEWTON / METRE**2).with_symbol("Pa", "pascal")
JOULE = (NEWTON * METRE).with_symbol("J", "joule")
WATT = (JOULE / SECOND).with_symbol("W", "watt")
COULOMB = (AMPERE * SECOND).with_symbol("C", "coulomb")
VOLT = (WATT / AMPERE).with_symbol("V", "volt")
FARAD = (COULOMB / VOLT).with_symbol("F", "farad")
OHM = (VOLT / AMPERE).with_symbol("Ω", "ohm")
SIEMENS = (AMPERE / VOLT).with_symbol("S", "siemens")
WEBER = (VOLT * SECOND).with_symbol("Wb", "weber")
TESLA = (WEBER / METRE**2).with_symbol("T", "tesla")
HENRY = (WEBER / AMPERE).with_symbol("H", "henry")
LUMEN = (CANDELA * STERADIAN).with_symbol("lm", "lumen")
LUX = (LUMEN / METRE**2).with_symbol("lx", "lux")
GRAY = (JOULE / KILOGRAM).with_symbol("Gy", "gray")
KATAL = (MOLE / SECOND).with_symbol("kat", "katal")
BECQUEREL = AlternateSystemUnit(ONE / SECOND, "Bq", "becquerel")
SIEVERT = AlternateSystemUnit(JOULE / KILOGRAM, "Sv", "sievert")

# --- Accepted non-coherent units ---------------------------------------------
GRAM = KILOGRAM.divide(1000).with_symbol("g", "gram")
TONNE = KILOGRAM.multiply(1000).with_symbol("t", "tonne")
LITRE = (METRE.with_prefix(DECI) ** 3).with_symbol("L", "litre")
MINUTE = SECOND.multiply(60).with_symbol("min", "minute")
HOUR = MINUTE.multiply(60).with_symbol("h", "hour")
DAY = HOUR.multiply(24).with_symbol("d", "day")
CELSIUS = KELVIN.shift(273.15).with_symbol("°C", "degree Celsius")

SI_UNITS: tuple[Unit, ...] = (
    METRE, KILOGRAM, SECOND, AMPERE, KELVIN, MOLE, CANDELA,
    RADIAN, STERADIAN,
    HERTZ, NEWTON, PASCAL, JOULE, WATT, COULOMB, VOLT, FARAD, OHM, SIEMENS,
    WEBER, TESLA, HENRY, LUMEN, LUX, GRAY, KATAL, BECQUEREL, SIEVERT,
    GRAM, TONNE, LITRE, MINUTE, HOUR, DAY, CELSIUS,
)


def build_si_catalog() -> UnitCatalog:
    """Fresh catalog of the SI units above with their common spellings."""
    b = UnitCatalogBuilder()
    for unit in SI_UNITS:
        b.register(unit)

    # Common aliases
    b.register_alias("ohm", "Ω")
    b.register_alias("Ohm", "Ω")
    b.register_alias("OHM", "Ω")

    for alias, canonical in (
        ("metre", "m"), ("meter", "m"), ("meters", "m"), ("metres", "m"),
        ("second", "s"), ("seconds", "s"), ("sec", "s"),
        ("gram", "g"), ("grams", "g"),
        ("kilogram", "kg"), ("kilograms", "kg"),
        ("litre", "L"), ("liter", "L"), ("l", "L"),
        ("minute", "min"), ("minutes", "min"),
        ("hour", "h"), ("hours", "h"), ("hr", "h"),
        ("day", "d"), ("days", "d"),
        ("degC", "°C"), ("deg_celsius", "°C"), ("celsius", "°C"),
        ("radian", "rad"), ("steradian", "sr"),
        ("tonne", "t"),
    ):
        b.register_alias(alias, canonical)

    b.set_non_prefixable(["kg", "min", "h", "d", "°C"])
    catalog = b.build()
    logger.debug("SI catalog ready with %d units", len(catalog))
    return catalog


# Public, shared default catalog
DEFAULT_CATALOG: UnitCatalog = build_si_catalog()


def si_catalog() -> UnitCatalog:
    return DEFAULT_CATALOG


__all__ = [
    "build_si_catalog",
    "si_catalog",
    "DEFAULT_CATALOG",
    "SI_UNITS",
    "METRE", "KILOGRAM", "SECOND", "AMPERE", "KELVIN", "MOLE", "CANDELA",
    "RADIAN", "STERADIAN",
    "HERTZ", "NEWTON", "PASCAL", "JOULE", "WATT", "COULOMB", "VOLT", "FARAD",
    "OHM", "SIEMENS", "WEBER", "TESLA", "HENRY", "LUMEN", "LUX", "GRAY",
    "KATAL", "BECQUEREL", "SIEVERT",
    "GRAM", "TONNE", "LITRE", "MINUTE", "HOUR", "DAY", "CELSIUS",
]
