"""Exception taxonomy for baton orchestration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .contracts import WorkflowExecution


class BatonError(Exception):
    """Base class for all baton errors."""


class NotFoundError(BatonError):
    """A workflow, checkpoint or correction id does not exist."""

    def __init__(self, kind: str, identifier: Optional[str] = None) -> None:
        self.kind = kind
        self.identifier = identifier
        if identifier:
            message = f"{kind} not found: {identifier}"
        else:
            message = f"No {kind} found"
        super().__init__(message)


class PersistenceError(BatonError):
    """Reading or writing a JSON document failed."""

    def __init__(self, operation: str, path: Any, reason: str = "") -> None:
        self.operation = operation
        self.path = str(path)
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to {operation} {self.path}{detail}")


class ExecutionError(BatonError):
    """The role execution delegate raised while running a role."""

    def __init__(
        self,
        workflow_id: str,
        role_id: str,
        reason: str,
        execution: "WorkflowExecution | None" = None,
    ) -> None:
        self.workflow_id = workflow_id
        self.role_id = role_id
        self.execution = execution
        super().__init__(
            f"Role '{role_id}' failed for workflow {workflow_id}: {reason}"
        )


class InvalidTransitionError(BatonError):
    """A workflow status change is not allowed from its current status."""

    def __init__(self, workflow_id: str, current: str, target: str) -> None:
        self.workflow_id = workflow_id
        self.current = current
        self.target = target
        super().__init__(
            f"Workflow {workflow_id} cannot move from '{current}' to '{target}'"
        )


__all__ = [
    "BatonError",
    "NotFoundError",
    "PersistenceError",
    "ExecutionError",
    "InvalidTransitionError",
]
