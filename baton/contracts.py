"""Workflow state, execution records and the handoff baton."""

from __future__ import annotations

import hashlib
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Literal, Optional

from pydantic import Field

from .errors import InvalidTransitionError
from .models import DocumentModel, utc_now

logger = logging.getLogger(__name__)

WorkflowStatus = Literal["pending", "in_progress", "completed", "failed", "blocked"]
ExecutionStatus = Literal["pending", "in_progress", "completed", "failed"]

TERMINAL_STATUSES: FrozenSet[str] = frozenset({"completed", "failed"})

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"in_progress"}),
    "in_progress": frozenset({"in_progress", "completed", "failed", "blocked"}),
    "blocked": frozenset({"in_progress"}),
    "completed": frozenset(),
    "failed": frozenset(),
}


class WorkflowExecution(DocumentModel):
    """One role's attempt. Frozen in practice once ``end_time`` is set."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role_id: str
    status: ExecutionStatus = "pending"
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    output: Optional[str] = None
    deliverables: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.end_time is not None

    def complete(self, output: str, deliverables: List[str]) -> None:
        self.status = "completed"
        self.end_time = utc_now()
        self.output = output
        self.deliverables = list(deliverables)

    def fail(self, error: str) -> None:
        self.status = "failed"
        self.end_time = utc_now()
        self.error = error


class HandoffData(DocumentModel):
    """Accreting context passed from one role's execution to the next."""

    current_role: str
    previous_role: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    completed_tasks: List[str] = Field(default_factory=list)
    pending_tasks: List[str] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class WorkflowState(DocumentModel):
    """Aggregate root of an orchestration run."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    issue_id: Optional[str] = None
    issue_title: Optional[str] = None
    issue_description: Optional[str] = None
    current_role: str
    status: WorkflowStatus = "pending"
    executions: List[WorkflowExecution] = Field(default_factory=list)
    handoff_data: HandoffData
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def workspace_id(self) -> Optional[str]:
        value = self.handoff_data.context.get("workspaceId")
        return str(value) if value else None

    def can_transition(self, target: str) -> bool:
        return target in ALLOWED_TRANSITIONS.get(self.status, frozenset())

    def transition(self, target: WorkflowStatus) -> None:
        """Move to ``target`` or raise ``InvalidTransitionError``."""
        if not self.can_transition(target):
            raise InvalidTransitionError(self.id, self.status, target)
        if target != self.status:
            logger.debug(f"Workflow {self.id}: {self.status} -> {target}")
        self.status = target
        self.touch()
        if target == "completed":
            self.completed_at = self.updated_at

    def touch(self) -> None:
        self.updated_at = utc_now()


def workspace_hash(workflow_id: str, title: str, created_at: datetime) -> str:
    """Short, non-cryptographic id used to partition on-disk artifacts."""
    digest = hashlib.md5(
        f"{workflow_id}-{title}-{created_at.isoformat()}".encode("utf-8"),
        usedforsecurity=False,
    )
    return digest.hexdigest()[:8]
