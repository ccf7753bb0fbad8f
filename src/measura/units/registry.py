"""
measura.units.registry
======================

Immutable unit catalogs with symbol lookup.

- `UnitCatalogBuilder` collects units, aliases and non-prefixable symbols.
- `build()` freezes them into a `UnitCatalog`; named system units are
  interned so that algebra such as ``kg * m / s**2`` returns the catalog's ``N``.
- Lookup normalizes Unicode (NFC), maps a leading ASCII ``u`` to ``µ``,
  resolves aliases (e.g. "ohm" → "Ω") and synthesizes metric-prefixed units
  on demand (``km``, ``µs``), refusing stacked prefixes.
- `UnitNamespace` offers attribute access (``u.km``) for interactive use.

This catalog does *not* parse compound expressions (like "m/s^2"); combine
looked-up units with ``*``, ``/`` and ``**`` instead.
"""
from __future__ import annotations

import logging
import re
import threading
import unicodedata
from types import MappingProxyType
from typing import ClassVar, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from measura.core.unit import NamedUnit, PrefixedUnit, Unit
from measura.core.unit_algebra import intern_named
from measura.errors import InvalidArgumentError, UnknownUnitError
from measura.units.prefixes import PREFIXES_BY_SYMBOL

logger = logging.getLogger(__name__)

# Ordered list of prefix symbols by descending length for robust matching
_PREFIX_SYMBOLS_DESC = tuple(sorted(PREFIXES_BY_SYMBOL, key=len, reverse=True))

_OHM_RE = re.compile(r"(?i)ohm")


def normalize_symbol(s: str) -> str:
    """Normalize user-provided unit symbols.

    Rules:
    - Unicode normalize to NFC; Greek small mu becomes the micro sign.
    - Replace ASCII leading 'u' micro with 'µ' **only** at start.
    - Map textual aliases to canonical symbols (e.g. any 'ohm' → 'Ω').
    - Strip surrounding whitespace.
    """
    if not s:
        return s

    s = s.strip()
    s = unicodedata.normalize("NFC", s).replace("μ", "µ")

    # Leading 'u' as ASCII micro → 'µ'
    if s.startswith("u"):
        s = "µ" + s[1:]

    # Replace all forms of 'ohm' with Ω
    s = _OHM_RE.sub("Ω", s)
    return s


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
class UnitCatalogBuilder:
    """Mutable staging area for a `UnitCatalog`."""

    def __init__(self) -> None:
        self._units: Dict[str, Unit] = {}
        self._aliases: Dict[str, str] = {}
        self._non_prefixable: set[str] = set()

    def register(self, unit: Unit, replace: bool = False) -> "UnitCatalogBuilder":
        """Register ``unit`` under its symbol.

        Use `register_alias` to add additional spellings without duplication.
        """
        symbol = unit.symbol
        if not symbol:
            raise InvalidArgumentError(f"cannot register {unit!r}: unit has no symbol")
        if symbol in UnitNamespace._reserved_names:
            raise InvalidArgumentError(
                f"Cannot register unit '{symbol}': name conflicts with UnitNamespace attribute/method."
            )
        if not replace:
            if symbol in self._units:
                raise InvalidArgumentError(f"Cannot register unit '{symbol}': a unit with this symbol already exists.")
            if symbol in self._aliases:
                raise InvalidArgumentError(f"Cannot register unit '{symbol}': an alias with this name already exists.")
        self._units[symbol] = unit
        return self

    def register_alias(self, alias: str, canonical: str, replace: bool = False) -> "UnitCatalogBuilder":
        # 1) normalized form (e.g., 'ohm' -> 'Ω')
        norm_key = normalize_symbol(alias)
        # 2) literal, NFC/trimmed spelling (for discoverability in __dir__)
        literal_key = unicodedata.normalize("NFC", alias.strip())
        # 3) casefolded literal (for case-insensitive alias matching)
        folded_key = literal_key.casefold()

        reserved = UnitNamespace._reserved_names
        if literal_key in reserved or folded_key in reserved or norm_key in reserved:
            raise InvalidArgumentError(
                f"Cannot register alias '{alias}': name conflicts with UnitNamespace attribute/method."
            )
        if canonical not in self._units:
            raise InvalidArgumentError(f"Cannot register alias '{alias}': unknown unit '{canonical}'.")
        if not replace:
            for key in {literal_key, folded_key, norm_key}:
                # shadowing a different unit is only allowed with replace=True
                if key in self._units and key != canonical:
                    raise InvalidArgumentError(
                        f"Cannot register alias '{alias}' (which maps to '{key}'): "
                        f"a unit with the name '{key}' already exists."
                    )

        self._aliases[norm_key] = canonical
        self._aliases[literal_key] = canonical
        self._aliases[folded_key] = canonical
        return self

    def set_non_prefixable(self, symbols: Iterable[str]) -> "UnitCatalogBuilder":
        """Mark unit symbols that must not accept SI prefixes (e.g., 'kg', 'min')."""
        self._non_prefixable = {normalize_symbol(s) for s in symbols}
        return self

    def build(self) -> "UnitCatalog":
        return UnitCatalog(self._units, self._aliases, self._non_prefixable)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class UnitCatalog:
    """Read-only symbol → unit catalog with SI prefix synthesis.

    The registered content never changes after construction; synthesized
    prefixed units are memoized internally under a lock.
    """

    def __init__(self, units: Mapping[str, Unit], aliases: Mapping[str, str], non_prefixable: Iterable[str]) -> None:
        self._units: Mapping[str, Unit] = MappingProxyType(dict(units))
        self._aliases: Mapping[str, str] = MappingProxyType(dict(aliases))
        self._non_prefixable = frozenset(non_prefixable)
        self._lock = threading.RLock()
        self._synthesized: Dict[str, Unit] = {}

        interned = [u.symbol for u in self._units.values() if isinstance(u, NamedUnit) and intern_named(u)]
        logger.debug("built unit catalog: %d units, %d aliases, interned %s", len(self._units), len(self._aliases), interned)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.has(symbol)

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def is_non_prefixable(self, symbol: str) -> bool:
        """Query helper (symbol may be alias; we normalize only the token)."""
        return normalize_symbol(symbol) in self._non_prefixable

    # -------------------------- public API ---------------------------------
    def has(self, symbol: str) -> bool:
        try:
            self.get(symbol)
            return True
        except UnknownUnitError:
            return False

    def get(self, symbol: str) -> Unit:
        """Lookup a unit by symbol. If missing, try to synthesize via SI prefix.

        Raises `UnknownUnitError` if unknown.
        """
        if not isinstance(symbol, str):
            raise TypeError(f"unit symbol must be str, got {type(symbol).__name__}")
        sym = normalize_symbol(symbol)

        # alias redirect (literal and case-folded spellings too)
        for key in (sym, symbol.strip(), symbol.strip().casefold()):
            target = self._aliases.get(key)
            if target is not None:
                sym = target
                break

        u = self._units.get(sym)
        if u is not None:
            return u

        with self._lock:
            synthesized = self._try_synthesize_prefixed(sym)
        if synthesized is not None:
            return synthesized

        raise UnknownUnitError(symbol)

    def all(self) -> Mapping[str, Unit]:
        return dict(self._units)

    def aliases(self) -> Mapping[str, str]:
        return dict(self._aliases)

    def as_namespace(self) -> "UnitNamespace":
        return UnitNamespace(self)

    # ------------------------- internals -----------------------------------
    def _split_prefix(self, symbol: str) -> Tuple[Optional[str], str]:
        for p in _PREFIX_SYMBOLS_DESC:
            if symbol.startswith(p):
                return p, symbol[len(p):]
        return None, symbol

    def _try_synthesize_prefixed(self, sym: str) -> Optional[Unit]:
        # Already synthesized by an earlier lookup?
        if sym in self._synthesized:
            return self._synthesized[sym]

        prefix, base_sym = self._split_prefix(sym)
        if prefix is None or not base_sym:
            return None

        base = self._units.get(base_sym)
        if base is None:
            return None

        # Prevent stacked prefixes: base itself must not be prefixed
        if isinstance(base, PrefixedUnit):
            return None

        if base_sym in self._non_prefixable:
            return None

        new_unit = base.with_prefix(PREFIXES_BY_SYMBOL[prefix])
        self._synthesized[sym] = new_unit
        logger.debug("synthesized prefixed unit %s", sym)
        return new_unit


class UnitNamespace:
    """Attribute-style access to a catalog: ``u.km``, ``u("µs")``, ``"kPa" in u``."""

    _reserved_names: ClassVar[set[str]] = set()

    def __init__(self, catalog: UnitCatalog) -> None:
        self._catalog = catalog

    def __contains__(self, symbol: str) -> bool:
        return self._catalog.has(symbol)

    def __call__(self, symbol: str) -> Unit:
        return self._catalog.get(symbol)

    def __getattr__(self, name: str) -> Unit:
        try:
            return self._catalog.get(name)
        except UnknownUnitError as e:
            # Unknown symbol should look like a missing attribute
            raise AttributeError(name) from e

    def __dir__(self) -> list[str]:
        """List all available unit symbols for autocomplete."""
        base_dir = set(super().__dir__())
        units = set(self._catalog.all().keys())
        aliases = set(self._catalog.aliases().keys())
        return sorted(base_dir | units | aliases)


UnitNamespace._reserved_names = set(dir(UnitNamespace))


__all__ = [
    "normalize_symbol",
    "UnitCatalogBuilder",
    "UnitCatalog",
    "UnitNamespace",
]
