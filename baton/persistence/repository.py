"""Repository abstraction for workflow state persistence."""

from __future__ import annotations

from typing import Protocol

from ..contracts import WorkflowState


class WorkflowRepository(Protocol):
    """Protocol for workflow state persistence backends.

    Each save replaces the whole document for that workflow id.
    """

    async def save_workflow(self, state: WorkflowState) -> None:
        """Persist the full workflow state."""

    async def get_workflow(self, workflow_id: str) -> WorkflowState | None:
        """Retrieve the workflow state by id."""

    async def list_workflows(self) -> list[WorkflowState]:
        """Return all persisted workflows."""
