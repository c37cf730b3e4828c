from __future__ import annotations

import os
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_ROLE_SEQUENCE: List[str] = [
    "Issue Analyst",
    "Code Archaeologist",
    "Solution Architect",
    "Build Engineer",
    "Implementation Specialist",
    "Test Engineer",
    "Quality Assurance Specialist",
    "Documentation Specialist",
]


class StorageConfig(BaseModel):
    """Where workflow, checkpoint and correction documents live."""

    root: str = ".baton"
    backend: Literal["file", "inmemory"] = "file"


class WorkflowConfig(BaseModel):
    """Workflow progression settings."""

    role_sequence: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ROLE_SEQUENCE), min_length=1
    )

    @field_validator("role_sequence")
    @classmethod
    def _unique_roles(cls, v: List[str]) -> List[str]:
        duplicates = sorted({role for role in v if v.count(role) > 1})
        if duplicates:
            raise ValueError(f"role_sequence repeats roles: {', '.join(duplicates)}")
        return v


class CheckpointConfig(BaseModel):
    """Checkpoint store settings."""

    git_timeout: float = 5.0  # seconds for the whole git probe
    list_limit: int = 10


class RolesConfig(BaseModel):
    """Role catalog source."""

    catalog_path: Optional[str] = None


class BatonConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    checkpoints: CheckpointConfig = Field(default_factory=CheckpointConfig)
    roles: RolesConfig = Field(default_factory=RolesConfig)
    log_level: str = "WARNING"

    @property
    def storage_root(self) -> Path:
        return Path(self.storage.root).expanduser()


def load_config(path: Optional[str] = None) -> BatonConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to BATON_CONFIG env
            variable or 'baton.yaml' in the current directory.
    """

    config_path = path or os.getenv("BATON_CONFIG", "baton.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = BatonConfig(**data)
    else:
        config = BatonConfig()

    env_root = os.getenv("BATON_HOME")
    if env_root:
        config.storage.root = env_root
    return config
