# tests/conftest.py
import pytest

from measura.units import si as _si
from measura.units.si import build_si_catalog


@pytest.fixture(scope="session")
def catalog():
    return _si.DEFAULT_CATALOG


@pytest.fixture(scope="session")
def u(catalog):
    return catalog.as_namespace()


@pytest.fixture()
def fresh_catalog():
    """Independently built SI catalog (re-interns the same SI constants)."""
    return build_si_catalog()
