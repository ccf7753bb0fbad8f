# measura/units/prefixes.py
"""
Metric (SI, base 10) and binary (IEC, base 1024) unit prefixes.

A `Prefix` scales a unit by ``base ** exponent``. Prefixes of one family are
interchangeable through `Prefix.with_exponent`, which is what lets
``km.with_prefix(MILLI)`` collapse back to ``m``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from measura.core import converters
from measura.core.big_rational import BigRational
from measura.core.converters import UnitConverter
from measura.core.rational import Rational
from measura.core.utils import format_exponent
from measura.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class Prefix:
    symbol: str
    name: Optional[str]
    base: int
    exponent: int

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise InvalidArgumentError(f"invalid prefix symbol {self.symbol!r}")
        if isinstance(self.base, bool) or not isinstance(self.base, int) or self.base < 2:
            raise InvalidArgumentError(f"prefix base must be an integer >= 2, got {self.base!r}")
        if isinstance(self.exponent, bool) or not isinstance(self.exponent, int):
            raise InvalidArgumentError(f"prefix exponent must be an integer, got {self.exponent!r}")

    @property
    def factor(self) -> BigRational:
        return BigRational(self.base).pow(self.exponent)

    @property
    def converter(self) -> UnitConverter:
        return converters.power_of(self.base, self.exponent)

    def with_exponent(self, exponent: int) -> "Prefix":
        """Member of this prefix's family with ``exponent``, or a generic ``10ⁿ`` prefix."""
        known = _FAMILIES.get(self.base, {}).get(exponent)
        if known is not None:
            return known
        return Prefix(f"{self.base}{format_exponent(Rational(exponent))}", None, self.base, exponent)

    def __str__(self) -> str:
        return self.symbol


# --- Metric -------------------------------------------------------------------

YOTTA = Prefix("Y", "yotta", 10, 24)
ZETTA = Prefix("Z", "zetta", 10, 21)
EXA = Prefix("E", "exa", 10, 18)
PETA = Prefix("P", "peta", 10, 15)
TERA = Prefix("T", "tera", 10, 12)
GIGA = Prefix("G", "giga", 10, 9)
MEGA = Prefix("M", "mega", 10, 6)
KILO = Prefix("k", "kilo", 10, 3)
HECTO = Prefix("h", "hecto", 10, 2)
DEKA = Prefix("da", "deka", 10, 1)
DECI = Prefix("d", "deci", 10, -1)
CENTI = Prefix("c", "centi", 10, -2)
MILLI = Prefix("m", "milli", 10, -3)
MICRO = Prefix("µ", "micro", 10, -6)
NANO = Prefix("n", "nano", 10, -9)
PICO = Prefix("p", "pico", 10, -12)
FEMTO = Prefix("f", "femto", 10, -15)
ATTO = Prefix("a", "atto", 10, -18)
ZEPTO = Prefix("z", "zepto", 10, -21)
YOCTO = Prefix("y", "yocto", 10, -24)

METRIC_PREFIXES: Tuple[Prefix, ...] = (
    YOTTA, ZETTA, EXA, PETA, TERA, GIGA, MEGA, KILO, HECTO, DEKA,
    DECI, CENTI, MILLI, MICRO, NANO, PICO, FEMTO, ATTO, ZEPTO, YOCTO,
)

# --- Binary -------------------------------------------------------------------

KIBI = Prefix("Ki", "kibi", 1024, 1)
MEBI = Prefix("Mi", "mebi", 1024, 2)
GIBI = Prefix("Gi", "gibi", 1024, 3)
TEBI = Prefix("Ti", "tebi", 1024, 4)
PEBI = Prefix("Pi", "pebi", 1024, 5)
EXBI = Prefix("Ei", "exbi", 1024, 6)
ZEBI = Prefix("Zi", "zebi", 1024, 7)
YOBI = Prefix("Yi", "yobi", 1024, 8)

BINARY_PREFIXES: Tuple[Prefix, ...] = (KIBI, MEBI, GIBI, TEBI, PEBI, EXBI, ZEBI, YOBI)

_FAMILIES: Dict[int, Dict[int, Prefix]] = {
    10: {p.exponent: p for p in METRIC_PREFIXES},
    1024: {p.exponent: p for p in BINARY_PREFIXES},
}

PREFIXES_BY_SYMBOL: Dict[str, Prefix] = {p.symbol: p for p in METRIC_PREFIXES}


__all__ = [
    "Prefix",
    "METRIC_PREFIXES",
    "BINARY_PREFIXES",
    "PREFIXES_BY_SYMBOL",
    *(p.name.upper() for p in METRIC_PREFIXES + BINARY_PREFIXES if p.name),
]
