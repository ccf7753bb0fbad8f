"""
Measura: exact unit and dimension algebra for Python.

Measura models units of measurement, their physical dimensions and the
converters translating values between them. Units combine algebraically
(multiply, divide, powers, roots, prefixes) and structurally-equal results
collapse to a single canonical instance.
This module exposes a minimal, stable public API. Heavy subsystems (e.g. the SI
catalog) are imported lazily to avoid import-time side effects.
"""

from importlib import metadata as _metadata
from pathlib import Path as _Path


__author__ = "Parneet Sidhu"
__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("measura")
except _metadata.PackageNotFoundError:
    import tomllib
    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public names exposed by the package. Keep this minimal and stable.
__all__ = ["__version__", "__author__", "__license__"]
