"""Human-readable workflow artifacts: the handoff summary and PR summary."""

from __future__ import annotations

import json
from typing import Iterable

from .contracts import WorkflowState


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def format_handoff(state: WorkflowState) -> str:
    """Cumulative handoff summary rendered from the current HandoffData."""
    handoff = state.handoff_data
    return f"""# Workflow Handoff

## Current Status
- **Workflow ID**: {state.id}
- **Current Role**: {state.current_role}
- **Status**: {state.status}
- **Last Updated**: {state.updated_at.isoformat()}

## Issue Details
- **Title**: {state.issue_title or ""}
- **Description**: {state.issue_description or ""}

## Completed Tasks
{_bullets(handoff.completed_tasks)}

## Pending Tasks
{_bullets(handoff.pending_tasks)}

## Deliverables
{_bullets(handoff.deliverables)}

## Next Steps
{_bullets(handoff.next_steps)}

## Context
{json.dumps(handoff.context, indent=2, default=str)}

## Notes
{handoff.notes or "No additional notes"}
"""


def format_pull_request(state: WorkflowState) -> str:
    """Pull-request style summary of a finished workflow."""
    deliverables = state.handoff_data.deliverables
    testing = [d for d in deliverables if "test" in d.lower()]
    documentation = [d for d in deliverables if "doc" in d.lower()]
    related = [state.issue_id] if state.issue_id else []
    completed_at = state.completed_at.isoformat() if state.completed_at else ""
    return f"""# Pull Request

## Title
{state.issue_title or "Multi-Role Workflow Implementation"}

## Description
{state.issue_description or "Automated workflow execution"}

## Testing
{_bullets(testing)}

## Documentation
{_bullets(documentation)}

## Related Issues
{_bullets(related)}

## Workflow Details
- **Workflow ID**: {state.id}
- **Completed At**: {completed_at}
- **Total Executions**: {len(state.executions)}
"""
