"""In-memory implementation of the workflow repository."""

from __future__ import annotations

from typing import Dict

from ..contracts import WorkflowState
from .repository import WorkflowRepository


class InMemoryWorkflowRepository(WorkflowRepository):
    """Store workflow state in local memory.

    Useful for tests or when no storage root is configured. Data is not
    persisted across process restarts. Stored states are copies so callers
    cannot mutate them without saving.
    """

    def __init__(self) -> None:
        self._workflows: Dict[str, WorkflowState] = {}

    async def save_workflow(self, state: WorkflowState) -> None:
        self._workflows[state.id] = state.model_copy(deep=True)

    async def get_workflow(self, workflow_id: str) -> WorkflowState | None:
        wf = self._workflows.get(workflow_id)
        return wf.model_copy(deep=True) if wf else None

    async def list_workflows(self) -> list[WorkflowState]:
        return [wf.model_copy(deep=True) for wf in self._workflows.values()]
