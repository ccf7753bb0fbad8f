# measura.core.dimensions

from __future__ import annotations

import enum
import logging
import threading
import weakref
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from measura.core.rational import Rational
from measura.core.utils import ExponentLike, as_exponent, format_product
from measura.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class BaseDimension(enum.Enum):
    """The seven SI base dimensions, in conventional (L, M, T, I, Θ, N, J) order."""

    LENGTH = "L"
    MASS = "M"
    TIME = "T"
    ELECTRIC_CURRENT = "I"
    TEMPERATURE = "Θ"
    AMOUNT_OF_SUBSTANCE = "N"
    LUMINOUS_INTENSITY = "J"

    @property
    def symbol(self) -> str:
        return self.value


_BASE_ORDER: Dict[BaseDimension, int] = {b: i for i, b in enumerate(BaseDimension)}

# An atom is a base dimension or the name of a non-physical dimension.
Atom = Union[BaseDimension, str]
Items = Tuple[Tuple[Atom, Rational], ...]


def _atom_key(atom: Atom) -> Tuple[int, int, str]:
    if isinstance(atom, BaseDimension):
        return (0, _BASE_ORDER[atom], "")
    return (1, 0, atom)


def _atom_symbol(atom: Atom) -> str:
    return atom.symbol if isinstance(atom, BaseDimension) else f"[{atom}]"


def _normalize(exponents: Iterable[Tuple[Atom, Any]]) -> Items:
    acc: Dict[Atom, Rational] = {}
    for atom, e in exponents:
        if not isinstance(atom, (BaseDimension, str)) or atom == "":
            raise InvalidArgumentError(f"invalid dimension atom {atom!r}")
        acc[atom] = acc.get(atom, Rational.ZERO) + as_exponent(e)
    return tuple(sorted(((a, e) for a, e in acc.items() if e != 0), key=lambda it: _atom_key(it[0])))


class Dimension:
    """
    Immutable physical dimension: a sparse map atom -> `Rational` exponent.

    Atoms are the seven `BaseDimension` members plus arbitrary named,
    non-physical dimensions (see `Dimension.of_name`). Zero exponents are
    pruned, so `NONE` (the empty map) is the multiplicative identity.

    Instances are interned: constructing a structurally equal dimension
    returns the identical object while any reference to it is alive.
    """

    __slots__ = ("_items", "_hash", "__weakref__")

    _items: Items
    _hash: int

    _cache: "weakref.WeakValueDictionary[Items, Dimension]" = weakref.WeakValueDictionary()
    _lock = threading.Lock()

    def __new__(cls, exponents: Union[Mapping[Atom, ExponentLike], Iterable[Tuple[Atom, ExponentLike]]] = ()) -> "Dimension":
        if isinstance(exponents, Dimension):
            return exponents
        if isinstance(exponents, Mapping):
            exponents = exponents.items()
        items = _normalize(exponents)

        existing = cls._cache.get(items)
        if existing is not None:
            return existing

        candidate = object.__new__(cls)
        object.__setattr__(candidate, "_items", items)
        object.__setattr__(candidate, "_hash", hash(items))
        with cls._lock:
            # insert-if-absent: a racing thread may have won
            interned = cls._cache.setdefault(items, candidate)
        if interned is candidate:
            logger.debug("interned dimension %s", candidate)
        return interned

    @classmethod
    def of_name(cls, name: str) -> "Dimension":
        """A named, non-physical dimension such as ``information`` or ``money``."""
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("named dimension requires a non-empty name")
        return cls(((name.strip(), 1),))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> Tuple[Any, ...]:
        return (Dimension, (self._items,))

    # --- Structure ---
    @property
    def items(self) -> Items:
        """Normalized ``(atom, exponent)`` pairs, base atoms first."""
        return self._items

    @property
    def physical_part(self) -> "Dimension":
        """Exponents over the seven base atoms only."""
        return Dimension((a, e) for a, e in self._items if isinstance(a, BaseDimension))

    @property
    def named_elements(self) -> List[Tuple["Dimension", Rational]]:
        """``(named dimension, exponent)`` pairs."""
        return [(Dimension.of_name(a), e) for a, e in self._items if isinstance(a, str)]

    @property
    def is_dimensionless(self) -> bool:
        return not self._items

    @property
    def is_named(self) -> bool:
        """True for a bare named dimension (single named atom, exponent 1)."""
        return len(self._items) == 1 and isinstance(self._items[0][0], str) and self._items[0][1] == 1

    def exponent(self, atom: Union[Atom, "Dimension"]) -> Rational:
        if isinstance(atom, Dimension):
            if len(atom._items) != 1 or atom._items[0][1] != 1:
                raise InvalidArgumentError(f"{atom!r} is not a single base or named dimension")
            atom = atom._items[0][0]
        for a, e in self._items:
            if a == atom:
                return e
        return Rational.ZERO

    def get_base_dimensions(self) -> Dict["Dimension", Rational]:
        """
        Fully flattened map of this dimension.

        Keys are the base-dimension singletons (`LENGTH`, ...) and named
        dimensions; zero entries never appear.
        """
        return {Dimension(((a, 1),)): e for a, e in self._items}

    # --- Algebra ---
    def multiply(self, other: "Dimension") -> "Dimension":
        if not isinstance(other, Dimension):
            raise TypeError(f"cannot multiply Dimension by {type(other).__name__}")
        if self is NONE:
            return other
        if other is NONE:
            return self

        physical: Dict[Atom, Rational] = {}
        named: Dict[Atom, Rational] = {}
        for a, e in self._items + other._items:
            target = physical if isinstance(a, BaseDimension) else named
            target[a] = target.get(a, Rational.ZERO) + e

        # A lone named element with exponent 1 normalizes to the named dimension itself.
        return Dimension(list(physical.items()) + list(named.items()))

    def divide(self, other: "Dimension") -> "Dimension":
        if not isinstance(other, Dimension):
            raise TypeError(f"cannot divide Dimension by {type(other).__name__}")
        return self.multiply(other.pow(-1))

    def pow(self, n: ExponentLike) -> "Dimension":
        e = as_exponent(n)
        if e == 1:
            return self
        if e == 0:
            return NONE
        return Dimension((a, x * e) for a, x in self._items)

    def root(self, n: int) -> "Dimension":
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"root index must be int, got {type(n).__name__}")
        if n <= 0:
            raise InvalidArgumentError(f"Unsupported root '{n}', only positive numbers are allowed.")
        if n == 1:
            return self
        inv = Rational(1, n)
        return Dimension((a, x * inv) for a, x in self._items)

    # --- Operator overloads ---
    def __mul__(self, other: Any) -> "Dimension":
        if not isinstance(other, Dimension):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other: Any) -> "Dimension":
        if not isinstance(other, Dimension):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other: Any) -> "Dimension":
        """Supports ``1 / LENGTH``."""
        if other == 1:
            return self.pow(-1)
        return NotImplemented

    def __pow__(self, n: ExponentLike, modulo: Any | None = None) -> "Dimension":
        # Python may call __pow__ with a third arg (modulo); reject it
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Dimension.")
        return self.pow(n)

    # --- Equality ---
    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Dimension):
            return NotImplemented
        return self._items == other._items

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self) -> int:
        return self._hash

    def __str__(self) -> str:
        return format_product((_atom_symbol(a), e) for a, e in self._items)

    def __repr__(self) -> str:
        # readable, but still unambiguous
        parts = ""
        for a, e in self._items:
            exp = f"({e.numerator}/{e.denominator})" if e.denominator != 1 else str(e.numerator)
            parts += f"[{_atom_symbol(a)}^{exp}]"
        return f"Dimension({parts or '1'})"


# --- Public constants --------------------------------------------------------

NONE = Dimension()
LENGTH = Dimension({BaseDimension.LENGTH: 1})
MASS = Dimension({BaseDimension.MASS: 1})
TIME = Dimension({BaseDimension.TIME: 1})
ELECTRIC_CURRENT = Dimension({BaseDimension.ELECTRIC_CURRENT: 1})
TEMPERATURE = Dimension({BaseDimension.TEMPERATURE: 1})
AMOUNT_OF_SUBSTANCE = Dimension({BaseDimension.AMOUNT_OF_SUBSTANCE: 1})
LUMINOUS_INTENSITY = Dimension({BaseDimension.LUMINOUS_INTENSITY: 1})

BASE_DIMENSIONS = (
    LENGTH,
    MASS,
    TIME,
    ELECTRIC_CURRENT,
    TEMPERATURE,
    AMOUNT_OF_SUBSTANCE,
    LUMINOUS_INTENSITY,
)


__all__ = [
    "BaseDimension",
    "Dimension",
    "NONE",
    "LENGTH",
    "MASS",
    "TIME",
    "ELECTRIC_CURRENT",
    "TEMPERATURE",
    "AMOUNT_OF_SUBSTANCE",
    "LUMINOUS_INTENSITY",
    "BASE_DIMENSIONS",
]
