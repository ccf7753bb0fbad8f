from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from measura.units.registry import UnitCatalog
# Lazy access helpers -------------------------------------------------------

def _get_default_catalog() -> "UnitCatalog":
    # Import here to avoid import-time side-effects / circular imports.
    from measura.units.si import DEFAULT_CATALOG  # local import
    return DEFAULT_CATALOG

def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'u' will construct a namespace over the
    package's default SI catalog on first use.
    """
    if name == "u":
        return _get_default_catalog().as_namespace()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["u"])
