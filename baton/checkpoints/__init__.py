"""Resumable task checkpoints."""

from __future__ import annotations

from .git import GitInfo, GitInfoProvider, NullGitInfoProvider, SubprocessGitInfoProvider
from .models import (
    Checkpoint,
    CheckpointFile,
    CheckpointIndex,
    CheckpointIndexEntry,
    CheckpointMetadata,
)
from .store import CheckpointStore

__all__ = [
    "Checkpoint",
    "CheckpointFile",
    "CheckpointIndex",
    "CheckpointIndexEntry",
    "CheckpointMetadata",
    "CheckpointStore",
    "GitInfo",
    "GitInfoProvider",
    "NullGitInfoProvider",
    "SubprocessGitInfoProvider",
]
