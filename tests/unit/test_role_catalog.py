"""Role catalog loading tests."""

import pytest
from pydantic import ValidationError

from baton.config import DEFAULT_ROLE_SEQUENCE
from baton.errors import PersistenceError
from baton.roles import Role, RoleCatalog, default_catalog, load_catalog


def test_default_catalog_covers_role_sequence():
    assert default_catalog().names() == DEFAULT_ROLE_SEQUENCE


def test_from_yaml_accepts_aliases_and_skips_invalid(tmp_path):
    path = tmp_path / "roles.yaml"
    path.write_text(
        """
roles:
  - name: Frontend
    description: Builds user interfaces
    discoveryKeywords: [react, ui]
    capabilities: [component]
    priority: 5
  - name: Data
    keywords: "pandas, sql"
  - description: missing a name
"""
    )

    catalog = RoleCatalog.from_yaml(path)

    assert catalog.names() == ["Frontend", "Data"]
    assert catalog.get("frontend").discovery_keywords == ("react", "ui")
    assert catalog.get("Data").discovery_keywords == ("pandas", "sql")


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(PersistenceError):
        RoleCatalog.from_yaml(tmp_path / "missing.yaml")


def test_roles_are_immutable():
    role = Role(name="Frontend")
    with pytest.raises(ValidationError):
        role.name = "Backend"


def test_reload_replaces_roles():
    catalog = RoleCatalog([Role(name="One")])
    catalog.reload([Role(name="Two"), Role(name="Three")])
    assert catalog.names() == ["Two", "Three"]
    assert catalog.get("One") is None


def test_load_catalog_defaults_without_path():
    assert len(load_catalog(None)) == len(DEFAULT_ROLE_SEQUENCE)
