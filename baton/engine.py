"""Workflow engine: sequences roles for a task and records their results."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from .config import DEFAULT_ROLE_SEQUENCE
from .contracts import HandoffData, WorkflowExecution, WorkflowState, workspace_hash
from .corrections import CorrectionStore
from .errors import ExecutionError, InvalidTransitionError, NotFoundError, PersistenceError
from .handoff import format_handoff, format_pull_request
from .persistence import InMemoryWorkflowRepository, WorkflowRepository
from .responders import RoleRequest, RoleResponder
from .roles import RoleCatalog, RoleRecommendation, RoleSelector, Task

logger = logging.getLogger(__name__)

PENDING_TASKS: Dict[str, List[str]] = {
    "Issue Analyst": ["Analyze requirements", "Identify stakeholders"],
    "Code Archaeologist": ["Review existing code", "Identify patterns"],
    "Solution Architect": ["Design solution", "Create architecture"],
    "Build Engineer": ["Setup environment", "Configure build"],
    "Implementation Specialist": ["Write code", "Implement features"],
    "Test Engineer": ["Write tests", "Run test suite"],
    "Quality Assurance Specialist": ["Code review", "Quality check"],
    "Documentation Specialist": ["Update docs", "Create guides"],
}


class RoleSchedule:
    """Static ordered list of roles; the last entry is terminal."""

    def __init__(self, roles: Sequence[str] = DEFAULT_ROLE_SEQUENCE) -> None:
        if not roles:
            raise ValueError("role schedule must contain at least one role")
        self.roles: List[str] = list(roles)
        duplicates = sorted({r for r in self.roles if self.roles.count(r) > 1})
        if duplicates:
            # next_role looks roles up by name
            raise ValueError(f"role schedule repeats roles: {', '.join(duplicates)}")

    @property
    def first(self) -> str:
        return self.roles[0]

    @property
    def terminal(self) -> str:
        return self.roles[-1]

    def is_terminal(self, role: str) -> bool:
        return role == self.terminal

    def next_role(self, current: str) -> str:
        """Following role, clamped to the terminal role."""
        try:
            index = self.roles.index(current)
        except ValueError:
            return self.terminal
        if index >= len(self.roles) - 1:
            return self.terminal
        return self.roles[index + 1]


class WorkspaceInfo(BaseModel):
    id: str
    workflow_id: str
    handoff_file: Path
    pr_file: Path


class WorkflowEngine:
    """Finite state machine driving a workflow through its role schedule.

    Role content comes from the injected ``responder``. Correction warnings,
    when a ``corrections`` store is given, are appended to the context each
    role receives. Artifacts (``handoff.md``/``pr.md``) are written under
    ``workspace_root`` when one is configured.
    """

    def __init__(
        self,
        responder: RoleResponder,
        repository: WorkflowRepository | None = None,
        schedule: RoleSchedule | None = None,
        catalog: RoleCatalog | None = None,
        selector: RoleSelector | None = None,
        corrections: CorrectionStore | None = None,
        workspace_root: str | Path | None = None,
    ) -> None:
        self._responder = responder
        self._repository = repository or InMemoryWorkflowRepository()
        self.schedule = schedule or RoleSchedule()
        self._catalog = catalog
        self._selector = selector or (RoleSelector(catalog) if catalog else None)
        self._corrections = corrections
        self._workspaces = Path(workspace_root) / "workspaces" if workspace_root else None

    # ------------------------------------------------------------------
    # Lifecycle
    async def create_workflow(
        self,
        issue_id: Optional[str],
        title: str,
        description: str = "",
    ) -> WorkflowState:
        """Create and persist a pending workflow at the first scheduled role."""
        first_role = self.schedule.first
        state = WorkflowState(
            issue_id=issue_id,
            issue_title=title,
            issue_description=description,
            current_role=first_role,
            handoff_data=HandoffData(current_role=first_role),
        )
        state.updated_at = state.created_at
        state.handoff_data.context["workspaceId"] = workspace_hash(
            state.id, title, state.created_at
        )

        await self._repository.save_workflow(state)
        await self._write_artifact(state, "handoff.md", format_handoff(state))
        logger.info(f"Created workflow {state.id} for '{title}'")
        return state

    async def get_workflow_state(self, workflow_id: str) -> WorkflowState | None:
        return await self._repository.get_workflow(workflow_id)

    async def list_workflows(self) -> List[WorkflowState]:
        workflows = await self._repository.list_workflows()
        return sorted(workflows, key=lambda wf: wf.updated_at, reverse=True)

    async def _require(self, workflow_id: str) -> WorkflowState:
        state = await self._repository.get_workflow(workflow_id)
        if state is None:
            raise NotFoundError("workflow", workflow_id)
        return state

    async def execute_next_role(self, workflow_id: str) -> WorkflowExecution:
        """Run the current role and advance or finish the workflow.

        Raises:
            NotFoundError: the workflow does not exist.
            InvalidTransitionError: the workflow is completed, failed or blocked.
            ExecutionError: the responder raised; the execution and the
                workflow are persisted as failed before this is raised.
        """
        state = await self._require(workflow_id)
        if state.status not in ("pending", "in_progress"):
            raise InvalidTransitionError(state.id, state.status, "in_progress")

        role_id = state.current_role
        enhanced_context = await self._build_context(state)
        execution = WorkflowExecution(role_id=role_id, status="in_progress")
        state.transition("in_progress")
        state.executions.append(execution)
        await self._repository.save_workflow(state)
        logger.info(f"Executing role {role_id} for workflow {state.id}")

        try:
            result = await self._responder.run(
                RoleRequest(
                    role_id=role_id,
                    workflow_state=state.model_copy(deep=True),
                    enhanced_context=enhanced_context,
                    role=self._catalog.get(role_id) if self._catalog else None,
                )
            )
        except Exception as exc:
            execution.fail(str(exc))
            state.transition("failed")
            await self._repository.save_workflow(state)
            logger.error(f"Role {role_id} failed for workflow {state.id}: {exc}")
            raise ExecutionError(
                state.id, role_id, str(exc), execution.model_copy()
            ) from exc

        execution.complete(result.output, result.deliverables)
        state.handoff_data = self._next_handoff(state, role_id, result.output, execution.deliverables)

        if self.schedule.is_terminal(role_id):
            state.transition("completed")
            logger.info(f"Workflow {state.id} completed")
        else:
            state.current_role = self.schedule.next_role(role_id)
            state.touch()
            logger.info(f"Workflow {state.id} handed off from {role_id} to {state.current_role}")

        await self._repository.save_workflow(state)
        await self._write_artifact(state, "handoff.md", format_handoff(state))
        if state.status == "completed":
            await self._write_artifact(state, "pr.md", format_pull_request(state))
        return execution

    async def run_to_completion(self, workflow_id: str) -> WorkflowState:
        """Execute roles until the workflow reaches a terminal status."""
        state = await self._require(workflow_id)
        while not state.is_terminal:
            await self.execute_next_role(workflow_id)
            state = await self._require(workflow_id)
        return state

    async def block(self, workflow_id: str, reason: str = "") -> WorkflowState:
        """Pause an in-progress workflow until ``unblock`` is called."""
        state = await self._require(workflow_id)
        if state.status != "in_progress":
            raise InvalidTransitionError(state.id, state.status, "blocked")
        state.transition("blocked")
        if reason:
            state.handoff_data.context["blockedReason"] = reason
        await self._repository.save_workflow(state)
        logger.info(f"Workflow {state.id} blocked: {reason or 'no reason given'}")
        return state

    async def unblock(self, workflow_id: str) -> WorkflowState:
        state = await self._require(workflow_id)
        if state.status != "blocked":
            raise InvalidTransitionError(state.id, state.status, "in_progress")
        state.transition("in_progress")
        state.handoff_data.context.pop("blockedReason", None)
        await self._repository.save_workflow(state)
        logger.info(f"Workflow {state.id} unblocked")
        return state

    # ------------------------------------------------------------------
    # Roles and workspaces
    async def recommend_roles(self, workflow_id: str) -> List[RoleRecommendation]:
        """Explainable role suggestions for the workflow's task."""
        if self._selector is None:
            return []
        state = await self._require(workflow_id)
        task = Task.from_description(
            f"{state.issue_title or ''} {state.issue_description or ''}".strip(),
            context={"workflowId": state.id},
        )
        return self._selector.get_role_recommendations(task)

    async def get_workspace_info(self, workflow_id: str) -> WorkspaceInfo | None:
        state = await self._repository.get_workflow(workflow_id)
        if state is None or self._workspaces is None or not state.workspace_id:
            return None
        workspace_dir = self._workspaces / state.workspace_id
        return WorkspaceInfo(
            id=state.workspace_id,
            workflow_id=state.id,
            handoff_file=workspace_dir / "handoff.md",
            pr_file=workspace_dir / "pr.md",
        )

    async def _build_context(self, state: WorkflowState) -> str:
        role = self._catalog.get(state.current_role) if self._catalog else None
        sections = [
            f"Role: {state.current_role}. Task: {state.issue_title or ''}. "
            f"Description: {state.issue_description or ''}"
        ]
        if role is not None and role.description:
            sections.append(f"Role focus: {role.description}")
        if self._corrections is not None:
            warnings = await self._corrections.get_warnings(
                task_description=f"{state.issue_title or ''} {state.issue_description or ''}",
                phase=state.current_role,
            )
            warning_text = self._corrections.format_warnings_as_context(warnings)
            if warning_text:
                sections.append(warning_text)
        return "\n".join(sections)

    def _next_handoff(
        self, state: WorkflowState, role_id: str, output: str, deliverables: List[str]
    ) -> HandoffData:
        previous = state.handoff_data
        prior_roles = [e.role_id for e in state.executions[:-1] if e.status == "completed"]
        next_role = self.schedule.next_role(role_id)
        if self.schedule.is_terminal(role_id):
            next_steps = ["Review deliverables", "Open pull request"]
        else:
            next_steps = [f"Hand off to {next_role}", "Review deliverables", "Update progress"]
        return HandoffData(
            current_role=role_id,
            previous_role=prior_roles[-1] if prior_roles else None,
            context={**previous.context, "lastRole": role_id},
            completed_tasks=[*previous.completed_tasks, *deliverables],
            pending_tasks=list(PENDING_TASKS.get(role_id, [])),
            deliverables=[*previous.deliverables, *deliverables],
            next_steps=next_steps,
            notes=output,
        )

    async def _write_artifact(self, state: WorkflowState, name: str, content: str) -> None:
        if self._workspaces is None or not state.workspace_id:
            return
        path = self._workspaces / state.workspace_id / name

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise PersistenceError("write", path, str(exc)) from exc
