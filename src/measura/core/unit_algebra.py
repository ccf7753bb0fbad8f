"""
measura.core.unit_algebra
=========================

Construction of composite units: products/powers, prefixes, transforms and
renaming, plus the process-wide interning cache for product units.

Products are canonicalized before lookup: factors are merged, zero
exponents dropped and the remainder sorted by label, so the same multiset of
factors always yields the same cache key whatever the construction order.
The cache holds values weakly; a miss simply means "build it again".
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from measura.core import converters
from measura.core.converters import IDENTITY, UnitConverter
from measura.core.dimensions import NONE, Dimension
from measura.core.rational import Rational
from measura.core.unit import (
    ONE,
    NamedUnit,
    PrefixedUnit,
    ProductUnit,
    TransformedUnit,
    Unit,
    UnitElement,
    label_of,
)
from measura.core.utils import ExponentLike, as_exponent, format_product
from measura.errors import InvalidArgumentError

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from measura.units.prefixes import Prefix

logger = logging.getLogger(__name__)

CacheKey = Tuple[UnitElement, ...]

_cache: "weakref.WeakValueDictionary[CacheKey, Unit]" = weakref.WeakValueDictionary()
_lock = threading.Lock()


# --- Products ----------------------------------------------------------------

def product_of(left: Unit, left_exp: ExponentLike, right: Unit, right_exp: ExponentLike) -> Unit:
    """``left^left_exp · right^right_exp`` in canonical form."""
    le = as_exponent(left_exp)
    re = as_exponent(right_exp)
    elements = [(e.unit, e.exponent * le) for e in left.elements]
    elements += [(e.unit, e.exponent * re) for e in right.elements]
    return product_of_elements(elements)


def power_of(unit: Unit, exponent: ExponentLike) -> Unit:
    e = as_exponent(exponent)
    if e == 0:
        return ONE
    if e == 1:
        return unit
    return product_of_elements((el.unit, el.exponent * e) for el in unit.elements)


def product_of_elements(elements: Iterable[Tuple[Unit, Rational]]) -> Unit:
    """
    Merge, reduce and intern a list of ``(unit, exponent)`` factors.

    Each unit must already be non-composite (as reported by ``Unit.elements``).
    """
    merged: Dict[Unit, Rational] = {}
    for unit, e in elements:
        merged[unit] = merged.get(unit, Rational.ZERO) + e
    items = [(u, e) for u, e in merged.items() if e != 0]

    if not items:
        return ONE
    if len(items) == 1 and items[0][1] == 1:
        return items[0][0]

    key = canonical_key(items)
    dimension = _dimension_of(key)

    if dimension is not NONE:
        cached = _cache.get(key)
        if cached is not None:
            return cached

    unit = _build_product(key, dimension)

    # e.g. km·mm: numerically identical to its system unit m²
    if not unit.is_system_unit and unit.system_converter.is_identity:
        return unit.system_unit

    # dimensionless products are never cached, so rad·s/s and 1 stay apart
    if dimension is NONE:
        return unit

    with _lock:
        interned = _cache.setdefault(key, unit)
    if interned is unit:
        logger.debug("interned product unit %s", unit.symbol)
    return interned


def canonical_key(items: Iterable[Tuple[Unit, Rational]]) -> CacheKey:
    ordered = sorted(items, key=lambda it: (label_of(it[0]), str(it[0].system_converter)))
    return tuple(UnitElement(u, e) for u, e in ordered)


def _dimension_of(key: CacheKey) -> Dimension:
    dim = NONE
    for unit, e in key:
        dim = dim.multiply(unit.dimension.pow(e))
    return dim


def _element_converter(converter: UnitConverter, exponent: Rational) -> UnitConverter:
    if exponent.signum() < 0:
        converter = converter.inverse()
        exponent = -exponent
    if exponent.denominator != 1:
        return converters.root(converters.pow(converter, exponent.numerator), exponent.denominator)
    if exponent.numerator == 1:
        return converter
    return converters.pow(converter, exponent.numerator)


def _build_product(key: CacheKey, dimension: Dimension) -> ProductUnit:
    to_system = IDENTITY
    base: Dict[Unit, Rational] = {}
    for unit, e in key:
        to_system = to_system.and_then(_element_converter(unit.system_converter, e))
        for b, be in unit.base_units.items():
            base[b] = base.get(b, Rational.ZERO) + be * e

    return ProductUnit(
        factors=key,
        dimension=dimension,
        to_system=to_system,
        base_factors=tuple((b, e) for b, e in base.items() if e != 0),
        symbol=format_product((label_of(u), e) for u, e in key),
    )


# --- Transforms, prefixes, names ---------------------------------------------

def transformed(unit: Unit, converter: UnitConverter) -> Unit:
    """``unit`` seen through ``converter``; nested transforms collapse into one."""
    if converter.is_identity:
        return unit
    if isinstance(unit, TransformedUnit):
        return transformed(unit.delegate, converter.and_then(unit.converter))
    return TransformedUnit(unit, converter)


def with_prefix(unit: Unit, prefix: "Prefix") -> Unit:
    """
    Apply ``prefix`` to ``unit``.

    Re-prefixing within one prefix family sums the exponents instead of
    nesting: ``km`` with milli gives back ``m``, ``km`` with kilo gives ``Mm``.
    """
    if isinstance(unit, PrefixedUnit) and unit.prefix.base == prefix.base:
        exponent = unit.prefix.exponent + prefix.exponent
        if exponent == 0:
            return unit.delegate
        return PrefixedUnit(unit.delegate, prefix.with_exponent(exponent))
    return PrefixedUnit(unit, prefix)


def named(unit: Unit, symbol: Optional[str], name: Optional[str] = None) -> Unit:
    """Give ``unit`` a symbol and optional name; renaming a named unit replaces it."""
    if symbol is None and name is None:
        raise InvalidArgumentError("a named unit needs a symbol or a name")
    if isinstance(unit, NamedUnit):
        unit = unit.delegate
    return NamedUnit(unit, symbol, name)


def intern_named(unit: Unit) -> bool:
    """
    Make ``unit`` the canonical result for its factor list.

    After interning ``N`` (a name for ``kg·m/s²``), ``kg * m / s**2`` returns
    ``N`` itself. Only named system units over a non-dimensionless product
    qualify; returns whether ``unit`` was interned. The cache keeps ``unit``
    only while the caller holds a reference to it.
    """
    if not (
        isinstance(unit, NamedUnit)
        and isinstance(unit.delegate, ProductUnit)
        and unit.is_system_unit
        and unit.dimension is not NONE
    ):
        return False
    key = canonical_key(unit.elements)
    with _lock:
        previous = _cache.get(key)
        _cache[key] = unit
    if previous is not unit:
        logger.debug("interned named unit %s for %s", unit.symbol, unit.delegate.symbol)
    return True


def cached_units() -> List[Unit]:
    """Snapshot of the live product-unit cache (diagnostics)."""
    with _lock:
        return list(_cache.values())


__all__ = [
    "product_of",
    "power_of",
    "product_of_elements",
    "canonical_key",
    "transformed",
    "with_prefix",
    "named",
    "intern_named",
    "cached_units",
]
