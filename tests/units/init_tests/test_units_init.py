import pytest

import measura.units.si as simod
from measura.units.si import build_si_catalog


@pytest.fixture()
def fresh_catalog():
    return build_si_catalog()


def test__get_default_catalog_returns_DEFAULT(monkeypatch, fresh_catalog):
    # Patch the DEFAULT_CATALOG and verify the helper returns it
    monkeypatch.setattr(simod, "DEFAULT_CATALOG", fresh_catalog, raising=True)

    # Import the private helper from the package module
    import measura.units as units
    get_default = getattr(units, "_get_default_catalog")

    assert get_default() is fresh_catalog


def test_lazy_u_binds_to_default_catalog(monkeypatch, fresh_catalog):
    # When DEFAULT_CATALOG is patched, accessing `measura.units.u` should
    # lazily resolve to a UnitNamespace bound to that catalog.
    monkeypatch.setattr(simod, "DEFAULT_CATALOG", fresh_catalog, raising=True)

    from measura.units import u
    # UnitNamespace has an internal _catalog reference to the catalog
    assert hasattr(u, "_catalog")
    assert u._catalog is fresh_catalog

    # Sanity: attribute access flows through to the catalog
    assert u.m is fresh_catalog.get("m")
    assert u.km is fresh_catalog.get("km")


def test_unknown_module_attribute_raises_attributeerror():
    import measura.units as units
    with pytest.raises(AttributeError):
        _ = getattr(units, "definitely_not_a_public_attr")


def test_dir_includes_u():
    import measura.units as units
    names = dir(units)
    assert "u" in names
    # Should be sorted for better discoverability
    assert names == sorted(names)
