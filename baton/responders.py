"""Role execution delegates.

The engine treats a responder as a black box: it receives the role id, the
workflow state and an enhanced context string and returns output text plus a
list of deliverables.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from pydantic import BaseModel, Field

from .contracts import WorkflowState
from .roles import Role


class RoleRequest(BaseModel):
    """Input handed to a role responder."""

    role_id: str
    workflow_state: WorkflowState
    enhanced_context: str
    role: Optional[Role] = None


class RoleResult(BaseModel):
    """Output of one role execution."""

    output: str
    deliverables: List[str] = Field(default_factory=list)


class RoleResponder(Protocol):
    """Generates the actual content for a role."""

    async def run(self, request: RoleRequest) -> RoleResult:
        """Execute the role and return its output."""


def extract_deliverables(response: str) -> List[str]:
    """Collect unique ``- `` bullet lines from a markdown response."""
    deliverables: List[str] = []
    for line in response.splitlines():
        stripped = line.strip()
        if not stripped.startswith("- "):
            continue
        item = stripped[2:].strip()
        if item and item not in deliverables:
            deliverables.append(item)
    return deliverables


class TemplateResponder:
    """Offline responder that renders a structured placeholder analysis.

    Stands in for a language model when the host has none wired up.
    """

    async def run(self, request: RoleRequest) -> RoleResult:
        state = request.workflow_state
        focus = request.role.description if request.role else request.role_id
        output = (
            f"# {request.role_id} Analysis\n\n"
            f"## Task Understanding\n"
            f"{state.issue_title or 'Untitled task'}: {state.issue_description or ''}\n\n"
            f"## Enhanced Context\n{request.enhanced_context}\n\n"
            f"## Analysis\n"
            f"Based on my expertise as a {request.role_id}, I recommend:\n\n"
            f"1. **Immediate Actions**: Analyze the requirements thoroughly\n"
            f"2. **Key Considerations**: Focus on {focus}\n"
            f"3. **Next Steps**: Proceed with detailed implementation\n\n"
            f"## Deliverables\n"
            f"- {request.role_id} analysis report\n"
            f"- {request.role_id} recommendations\n"
            f"- {request.role_id} next action items"
        )
        return RoleResult(output=output, deliverables=extract_deliverables(output))
