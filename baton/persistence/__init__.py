"""Persistence layer for baton workflows."""

from __future__ import annotations

from typing import Optional

from ..config import BatonConfig, load_config
from .filesystem import FileWorkflowRepository
from .inmemory import InMemoryWorkflowRepository
from .repository import WorkflowRepository


def get_repository(
    backend: Optional[str] = None, config: Optional[BatonConfig] = None
) -> WorkflowRepository:
    """Factory function to obtain a workflow repository.

    The backend is taken from ``backend`` or the loaded configuration's
    ``storage.backend``. The file backend writes under ``storage.root``.
    """

    config = config or load_config()
    backend = (backend or config.storage.backend).lower()

    if backend == "inmemory":
        return InMemoryWorkflowRepository()
    if backend == "file":
        return FileWorkflowRepository(config.storage_root)
    raise ValueError(f"Unsupported storage backend: {backend}")


__all__ = [
    "WorkflowRepository",
    "FileWorkflowRepository",
    "InMemoryWorkflowRepository",
    "get_repository",
]
