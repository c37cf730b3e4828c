"""Markdown artifacts rendered from workflow state."""

from baton.contracts import HandoffData, WorkflowState
from baton.handoff import format_handoff, format_pull_request
from baton.responders import extract_deliverables


def _state() -> WorkflowState:
    state = WorkflowState(
        issue_id="GH-3",
        issue_title="Add search",
        issue_description="Full text search over notes",
        current_role="Test Engineer",
        handoff_data=HandoffData(
            current_role="Test Engineer",
            completed_tasks=["schema drafted"],
            pending_tasks=["Write tests"],
            deliverables=["Search test plan", "API docs", "Index schema"],
            next_steps=["Hand off to QA"],
            context={"workspaceId": "deadbeef"},
        ),
    )
    return state


def test_handoff_lists_sections():
    text = format_handoff(_state())

    assert text.startswith("# Workflow Handoff")
    assert "- **Current Role**: Test Engineer" in text
    assert "## Completed Tasks\n- schema drafted" in text
    assert "## Pending Tasks\n- Write tests" in text
    assert '"workspaceId": "deadbeef"' in text
    assert "No additional notes" in text


def test_pull_request_groups_deliverables():
    state = _state()
    state.transition("in_progress")
    state.transition("completed")

    text = format_pull_request(state)

    assert "## Title\nAdd search" in text
    assert "## Testing\n- Search test plan\n" in text
    assert "## Documentation\n- API docs\n" in text
    assert "## Related Issues\n- GH-3" in text
    assert state.completed_at.isoformat() in text


def test_extract_deliverables_deduplicates_bullets():
    response = "intro\n- one\n  - two\n- one\n-not a bullet\n"
    assert extract_deliverables(response) == ["one", "two"]
