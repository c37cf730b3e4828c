"""Data models for resumable task checkpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from ..models import DocumentModel, utc_now

FileStatus = Literal["completed", "in-progress", "pending"]


class CheckpointFile(DocumentModel):
    path: str
    description: str = ""
    status: FileStatus = "pending"


class CheckpointMetadata(DocumentModel):
    """VCS details are best-effort and omitted when unavailable."""

    branch: Optional[str] = None
    last_commit: Optional[str] = None
    modified_files: List[str] = Field(default_factory=list)
    total_files: int = 0
    completed_count: int = 0


class Checkpoint(DocumentModel):
    """Durable snapshot of in-progress, resumable task state."""

    id: str
    task_id: Optional[str] = None
    workflow_id: Optional[str] = None
    task_description: str = "Task in progress"
    checkpoint: datetime = Field(default_factory=utc_now)
    completed: List[CheckpointFile] = Field(default_factory=list)
    pending: List[CheckpointFile] = Field(default_factory=list)
    context: str = ""
    next_step: str = ""
    metadata: CheckpointMetadata = Field(default_factory=CheckpointMetadata)
    is_active: bool = True


class CheckpointIndexEntry(DocumentModel):
    id: str
    task_id: Optional[str] = None
    task_description: str
    checkpoint: datetime
    completed_count: int = 0
    total_files: int = 0
    is_active: bool = True


class CheckpointIndex(DocumentModel):
    version: str = "1.0"
    last_updated: datetime = Field(default_factory=utc_now)
    total_checkpoints: int = 0
    checkpoints: List[CheckpointIndexEntry] = Field(default_factory=list)
