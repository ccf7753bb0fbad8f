"""
measura.core.unit
=================

The unit type and its variants.

A unit is an immutable value with a symbol, a `Dimension`, a *system unit*
(the coherent unit of that dimension) and a *system converter* mapping values
in the unit to values in its system unit. Variants are plain frozen
dataclasses carrying only their own fields:

- `BaseUnit`             a coherent base unit such as ``m`` or ``kg``
- `AlternateSystemUnit`  declares itself a system unit relative to a parent (``rad``, ``Bq``)
- `ProductUnit`          a canonical product of ``(unit, exponent)`` factors
- `TransformedUnit`      a delegate unit seen through a converter
- `PrefixedUnit`         a delegate unit carrying a named prefix (``km``)
- `NamedUnit`            overrides symbol/name of a delegate (``N``, ``°C``)

Derived behaviour (system unit, system converter, base-unit decomposition,
factorization) lives in the module-level functions below, which dispatch on
the variant. Algebra that builds new units (products, prefixes, transforms,
interning) lives in `measura.core.unit_algebra`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, NamedTuple, Optional, Tuple, Union

from measura.core import converters
from measura.core.big_rational import BigRational
from measura.core.converters import IDENTITY, UnitConverter
from measura.core.dimensions import NONE, Dimension
from measura.core.rational import Rational, RationalBase
from measura.core.utils import ExponentLike
from measura.errors import DivisionByZeroError, IncommensurableError, InvalidArgumentError

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from measura.units.prefixes import Prefix

Scalar = Union[int, float, Decimal, RationalBase]


class UnitElement(NamedTuple):
    """One ``(unit, exponent)`` factor of a unit."""

    unit: "Unit"
    exponent: Rational


class _OnceCell:
    """Compute-once slot; a losing racer just discards its result."""

    __slots__ = ("_lock", "_value", "_ready")

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._value: Any = None
        self._ready = False

    def get(self, compute: Callable[[], Any]) -> Any:
        if self._ready:
            return self._value
        with self._lock:
            if not self._ready:
                self._value = compute()
                self._ready = True
        return self._value


class Unit:
    """
    Common surface of every unit variant.

    Equality is physical: two units are equal iff they share dimension and
    system converter. Dimensionless units are additionally told apart by
    the dimensionless atoms (``rad``, ``sr``, ...) they are built from, so
    ``rad != ONE``.
    """

    __slots__ = ("__weakref__",)

    # Variants provide ``symbol``, ``name`` and ``dimension`` as fields or properties.
    symbol: Optional[str]
    name: Optional[str]
    dimension: Dimension

    # --- Derived structure ---
    @property
    def is_system_unit(self) -> bool:
        return is_system_unit(self)

    @property
    def system_unit(self) -> "Unit":
        return system_unit_of(self)

    @property
    def system_converter(self) -> UnitConverter:
        return system_converter_of(self)

    @property
    def base_units(self) -> Dict["Unit", Rational]:
        return base_units_of(self)

    @property
    def elements(self) -> Tuple[UnitElement, ...]:
        return elements_of(self)

    @property
    def label(self) -> str:
        """Symbol, or a descriptive fallback for anonymous units."""
        return label_of(self)

    # --- Algebra ---
    def multiply(self, other: Union["Unit", Scalar]) -> "Unit":
        from measura.core import unit_algebra

        if isinstance(other, Unit):
            return unit_algebra.product_of(self, 1, other, 1)
        return self.transform(converters.multiply(other))

    def divide(self, other: Union["Unit", Scalar]) -> "Unit":
        from measura.core import unit_algebra

        if isinstance(other, Unit):
            return unit_algebra.product_of(self, 1, other, -1)
        factor = BigRational.from_value(other)
        if not factor:
            raise DivisionByZeroError(f"cannot divide unit {self.label} by zero")
        return self.transform(converters.multiply(factor.reciprocal()))

    def pow(self, n: ExponentLike) -> "Unit":
        from measura.core import unit_algebra

        return unit_algebra.power_of(self, n)

    def root(self, n: int) -> "Unit":
        from measura.core import unit_algebra

        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"root index must be int, got {type(n).__name__}")
        if n <= 0:
            raise InvalidArgumentError(f"Unsupported root '{n}', only positive numbers are allowed.")
        return unit_algebra.power_of(self, Rational(1, n))

    def inverse(self) -> "Unit":
        from measura.core import unit_algebra

        return unit_algebra.product_of(ONE, 1, self, -1)

    def shift(self, offset: Scalar) -> "Unit":
        """Unit whose zero sits at ``offset`` of this unit (``K.shift(273.15)`` is °C)."""
        return self.transform(converters.shift(offset))

    def transform(self, converter: UnitConverter) -> "Unit":
        from measura.core import unit_algebra

        return unit_algebra.transformed(self, converter)

    def with_prefix(self, prefix: "Prefix") -> "Unit":
        from measura.core import unit_algebra

        return unit_algebra.with_prefix(self, prefix)

    def with_symbol(self, symbol: str, name: Optional[str] = None) -> "Unit":
        from measura.core import unit_algebra

        return unit_algebra.named(self, symbol, name)

    def with_name(self, name: str) -> "Unit":
        from measura.core import unit_algebra

        return unit_algebra.named(self, self.symbol, name)

    # --- Conversion ---
    def is_compatible(self, other: "Unit") -> bool:
        return self.dimension == other.dimension

    def get_converter_to(self, other: "Unit") -> UnitConverter:
        """Converter from values in ``self`` to values in ``other``."""
        if not isinstance(other, Unit):
            raise TypeError(f"expected Unit, got {type(other).__name__}")
        if self is other:
            return IDENTITY
        if not self.is_compatible(other):
            raise IncommensurableError(self, other)
        return self.system_converter.and_then(other.system_converter.inverse())

    # --- Operator overloads ---
    def __mul__(self, other: Any) -> "Unit":
        if isinstance(other, (Unit, int, float, Decimal, RationalBase)) and not isinstance(other, bool):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other: Any) -> "Unit":
        if isinstance(other, (int, float, Decimal, RationalBase)) and not isinstance(other, bool):
            return self.multiply(other)
        return NotImplemented

    def __truediv__(self, other: Any) -> "Unit":
        if isinstance(other, (Unit, int, float, Decimal, RationalBase)) and not isinstance(other, bool):
            return self.divide(other)
        return NotImplemented

    def __rtruediv__(self, other: Any) -> "Unit":
        """``1 / s`` is the reciprocal unit; ``1000 / s`` scales it."""
        if isinstance(other, (int, float, Decimal, RationalBase)) and not isinstance(other, bool):
            inv = self.inverse()
            return inv if other == 1 else inv.multiply(other)
        return NotImplemented

    def __pow__(self, n: Any, modulo: Any | None = None) -> "Unit":
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Unit.")
        return self.pow(n)

    # --- Equality ---
    def _identity_key(self) -> Tuple[Any, ...]:
        dim = self.dimension
        tag = _dimensionless_tag(self) if dim is NONE else ()
        return (dim, self.system_converter, tag)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Unit):
            return NotImplemented
        return self._identity_key() == other._identity_key()

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self) -> int:
        return hash(self._identity_key())

    def __str__(self) -> str:
        return label_of(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({label_of(self)!r})"


def _check_symbol(symbol: Optional[str], *, required: bool) -> None:
    if symbol is None:
        if required:
            raise InvalidArgumentError("unit symbol is required")
        return
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidArgumentError(f"invalid unit symbol {symbol!r}")


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class BaseUnit(Unit):
    symbol: str
    dimension: Dimension
    name: Optional[str] = None

    def __post_init__(self) -> None:
        _check_symbol(self.symbol, required=True)
        if not isinstance(self.dimension, Dimension):
            raise TypeError(f"dimension must be a Dimension, got {type(self.dimension).__name__}")


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class AlternateSystemUnit(Unit):
    """A system unit in its own right, sharing the dimension of ``parent``."""

    parent: Unit
    symbol: str
    name: Optional[str] = None

    def __post_init__(self) -> None:
        _check_symbol(self.symbol, required=True)
        if not self.parent.is_system_unit:
            raise InvalidArgumentError(f"parent of {self.symbol!r} must be a system unit, got {self.parent.label}")

    @property
    def dimension(self) -> Dimension:
        return self.parent.dimension


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class ProductUnit(Unit):
    """
    Canonical product of factors; build through `unit_algebra.product_of`.

    ``factors`` are sorted by label. Dimension, system converter and base
    decomposition are computed once at construction; the system unit is
    computed lazily on first access.
    """

    factors: Tuple[UnitElement, ...]
    dimension: Dimension
    to_system: UnitConverter
    base_factors: Tuple[Tuple[Unit, Rational], ...]
    symbol: str
    _system: _OnceCell = field(default_factory=_OnceCell, init=False, repr=False)

    @property
    def name(self) -> Optional[str]:
        return None if self.factors else "one"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class TransformedUnit(Unit):
    """``delegate`` seen through ``converter`` (value here -> value in delegate)."""

    delegate: Unit
    converter: UnitConverter

    @property
    def symbol(self) -> Optional[str]:
        return None

    @property
    def name(self) -> Optional[str]:
        return None

    @property
    def dimension(self) -> Dimension:
        return self.delegate.dimension


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class PrefixedUnit(Unit):
    delegate: Unit
    prefix: "Prefix"

    @property
    def symbol(self) -> Optional[str]:
        sym = self.delegate.symbol
        if sym is None:
            return None
        if isinstance(self.delegate, ProductUnit):
            return f"{self.prefix.symbol}({sym})"
        return self.prefix.symbol + sym

    @property
    def name(self) -> Optional[str]:
        if self.prefix.name is None or self.delegate.name is None:
            return None
        return self.prefix.name + self.delegate.name

    @property
    def dimension(self) -> Dimension:
        return self.delegate.dimension

    @property
    def converter(self) -> UnitConverter:
        return self.prefix.converter


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class NamedUnit(Unit):
    delegate: Unit
    symbol: Optional[str]
    name: Optional[str] = None

    def __post_init__(self) -> None:
        _check_symbol(self.symbol, required=False)

    @property
    def dimension(self) -> Dimension:
        return self.delegate.dimension


# --- Variant dispatch --------------------------------------------------------

_ATOMIC = (BaseUnit, AlternateSystemUnit)


def _unknown(unit: object) -> TypeError:
    return TypeError(f"unsupported unit variant {type(unit).__name__}")


def is_system_unit(unit: Unit) -> bool:
    if isinstance(unit, _ATOMIC):
        return True
    if isinstance(unit, ProductUnit):
        return all(is_system_unit(f.unit) for f in unit.factors)
    if isinstance(unit, (TransformedUnit, PrefixedUnit)):
        return False
    if isinstance(unit, NamedUnit):
        return is_system_unit(unit.delegate)
    raise _unknown(unit)


def system_unit_of(unit: Unit) -> Unit:
    if isinstance(unit, _ATOMIC):
        return unit
    if isinstance(unit, ProductUnit):
        if not unit.factors:
            return unit
        return unit._system.get(lambda: _product_system_unit(unit))
    if isinstance(unit, (TransformedUnit, PrefixedUnit)):
        return system_unit_of(unit.delegate)
    if isinstance(unit, NamedUnit):
        return unit if is_system_unit(unit.delegate) else system_unit_of(unit.delegate)
    raise _unknown(unit)


def _product_system_unit(unit: ProductUnit) -> Unit:
    from measura.core.unit_algebra import product_of

    result: Unit = ONE
    for f in unit.factors:
        result = product_of(result, 1, system_unit_of(f.unit), f.exponent)
    if result.dimension != unit.dimension:
        raise AssertionError(
            f"system unit {result.label} has dimension {result.dimension!r}, "
            f"expected {unit.dimension!r} for {unit.label}"
        )
    return result


def system_converter_of(unit: Unit) -> UnitConverter:
    if isinstance(unit, _ATOMIC):
        return IDENTITY
    if isinstance(unit, ProductUnit):
        return unit.to_system
    if isinstance(unit, (TransformedUnit, PrefixedUnit)):
        return unit.converter.and_then(system_converter_of(unit.delegate))
    if isinstance(unit, NamedUnit):
        return system_converter_of(unit.delegate)
    raise _unknown(unit)


def base_units_of(unit: Unit) -> Dict[Unit, Rational]:
    """Decomposition into atomic system units with exponents."""
    if isinstance(unit, BaseUnit):
        return {unit: Rational.ONE}
    if isinstance(unit, AlternateSystemUnit):
        if unit.dimension is NONE:
            return {unit: Rational.ONE}
        return base_units_of(unit.parent)
    if isinstance(unit, ProductUnit):
        return dict(unit.base_factors)
    if isinstance(unit, (TransformedUnit, PrefixedUnit, NamedUnit)):
        return base_units_of(unit.delegate)
    raise _unknown(unit)


def elements_of(unit: Unit) -> Tuple[UnitElement, ...]:
    """Factorization used for recombination; non-composite units are their own factor."""
    if isinstance(unit, ProductUnit):
        return unit.factors
    if isinstance(unit, NamedUnit) and isinstance(unit.delegate, ProductUnit):
        return unit.delegate.factors
    if isinstance(unit, Unit):
        return (UnitElement(unit, Rational.ONE),)
    raise _unknown(unit)


def label_of(unit: Unit) -> str:
    sym = unit.symbol
    if sym is not None:
        return sym
    if isinstance(unit, TransformedUnit):
        return f"({label_of(unit.delegate)}{unit.converter})"
    if isinstance(unit, PrefixedUnit):
        return f"{unit.prefix.symbol}({label_of(unit.delegate)})"
    if isinstance(unit, NamedUnit):
        return unit.name if unit.name is not None else label_of(unit.delegate)
    raise _unknown(unit)


def _dimensionless_tag(unit: Unit) -> Tuple[Tuple[str, str, Rational], ...]:
    # atoms tag themselves so hashing them never recurses
    if isinstance(unit, _ATOMIC):
        return ((type(unit).__name__, unit.symbol, Rational.ONE),)
    return tuple(
        sorted(
            (type(b).__name__, b.symbol, e)
            for b, e in base_units_of(unit).items()
            if isinstance(b, _ATOMIC) and b.dimension is NONE
        )
    )


# The dimensionless identity unit.
ONE: ProductUnit = ProductUnit(
    factors=(),
    dimension=NONE,
    to_system=IDENTITY,
    base_factors=(),
    symbol="1",
)


__all__ = [
    "Unit",
    "UnitElement",
    "BaseUnit",
    "AlternateSystemUnit",
    "ProductUnit",
    "TransformedUnit",
    "PrefixedUnit",
    "NamedUnit",
    "ONE",
    "is_system_unit",
    "system_unit_of",
    "system_converter_of",
    "base_units_of",
    "elements_of",
    "label_of",
]
