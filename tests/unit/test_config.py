"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from baton.config import DEFAULT_ROLE_SEQUENCE, load_config
from baton.persistence import FileWorkflowRepository, InMemoryWorkflowRepository, get_repository


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv("BATON_HOME", raising=False)
    monkeypatch.setenv("BATON_CONFIG", str(tmp_path / "missing.yaml"))

    config = load_config()

    assert config.storage.root == ".baton"
    assert config.storage.backend == "file"
    assert config.workflow.role_sequence == DEFAULT_ROLE_SEQUENCE
    assert config.checkpoints.git_timeout == 5.0
    assert config.checkpoints.list_limit == 10
    assert config.roles.catalog_path is None
    assert config.log_level == "WARNING"


def test_load_config_from_env(tmp_path, monkeypatch):
    monkeypatch.delenv("BATON_HOME", raising=False)
    config_path = tmp_path / "baton.yaml"
    config_path.write_text(
        """
storage:
  root: /var/lib/baton
  backend: inmemory
workflow:
  role_sequence:
    - Planner
    - Builder
checkpoints:
  list_limit: 3
log_level: DEBUG
"""
    )
    monkeypatch.setenv("BATON_CONFIG", str(config_path))

    config = load_config()
    assert config.storage.backend == "inmemory"
    assert config.storage_root == Path("/var/lib/baton")
    assert config.workflow.role_sequence == ["Planner", "Builder"]
    assert config.checkpoints.list_limit == 3
    assert config.log_level == "DEBUG"


def test_baton_home_overrides_storage_root(tmp_path, monkeypatch):
    config_path = tmp_path / "baton.yaml"
    config_path.write_text("storage:\n  root: elsewhere\n")
    monkeypatch.setenv("BATON_HOME", str(tmp_path / "home"))

    config = load_config(str(config_path))

    assert config.storage_root == tmp_path / "home"


def test_get_repository_uses_config(tmp_path, monkeypatch):
    monkeypatch.setenv("BATON_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("BATON_HOME", str(tmp_path))

    repo = get_repository()
    assert isinstance(repo, FileWorkflowRepository)
    assert repo.workflows_dir == tmp_path / "workflows"

    assert isinstance(get_repository("inmemory"), InMemoryWorkflowRepository)


def test_role_sequence_rejects_repeated_roles(tmp_path, monkeypatch):
    monkeypatch.delenv("BATON_HOME", raising=False)
    config_path = tmp_path / "baton.yaml"
    config_path.write_text("workflow:\n  role_sequence: [Planner, Builder, Planner, Tester]\n")

    with pytest.raises(ValidationError, match="Planner"):
        load_config(str(config_path))
