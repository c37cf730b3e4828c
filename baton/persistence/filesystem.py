"""JSON-file implementation of the workflow repository."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..contracts import WorkflowState
from ..errors import PersistenceError
from ..storage import path_exists, read_model, write_model
from .repository import WorkflowRepository

logger = logging.getLogger(__name__)


class FileWorkflowRepository(WorkflowRepository):
    """Persist each workflow as ``<root>/workflows/<id>.json``."""

    def __init__(self, root: str | Path):
        self.workflows_dir = Path(root) / "workflows"

    def _path(self, workflow_id: str) -> Path:
        return self.workflows_dir / f"{workflow_id}.json"

    async def save_workflow(self, state: WorkflowState) -> None:
        await write_model(self._path(state.id), state)

    async def get_workflow(self, workflow_id: str) -> WorkflowState | None:
        path = self._path(workflow_id)
        if not await path_exists(path):
            return None
        return await read_model(path, WorkflowState)

    async def list_workflows(self) -> list[WorkflowState]:
        if not await path_exists(self.workflows_dir):
            return []
        files = await asyncio.to_thread(
            lambda: sorted(self.workflows_dir.glob("*.json"))
        )
        workflows: list[WorkflowState] = []
        for path in files:
            try:
                workflows.append(await read_model(path, WorkflowState))
            except PersistenceError as exc:
                logger.warning(f"Skipping unreadable workflow document: {exc}")
        return workflows
