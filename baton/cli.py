"""Command line interface for baton workflows, checkpoints and corrections."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from baton import (
    BatonError,
    CheckpointStore,
    CorrectionStore,
    RoleSchedule,
    RoleSelector,
    SubprocessGitInfoProvider,
    Task,
    TemplateResponder,
    WorkflowEngine,
    get_repository,
    load_config,
)
from baton.config import BatonConfig
from baton.roles import load_catalog

app = typer.Typer(help="CLI for baton workflows")

workflow_app = typer.Typer(help="Commands for managing workflows")
checkpoint_app = typer.Typer(help="Commands for saving and resuming checkpoints")
correction_app = typer.Typer(help="Commands for recording corrections")
role_app = typer.Typer(help="Commands for role selection")

app.add_typer(workflow_app, name="workflow")
app.add_typer(checkpoint_app, name="checkpoint")
app.add_typer(correction_app, name="correction")
app.add_typer(role_app, name="role")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Logging level, e.g. INFO"),
) -> None:
    """Baton CLI entry point."""
    level = (log_level or load_config().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _engine(config: BatonConfig) -> WorkflowEngine:
    catalog = load_catalog(config.roles.catalog_path)
    return WorkflowEngine(
        responder=TemplateResponder(),
        repository=get_repository(config=config),
        schedule=RoleSchedule(config.workflow.role_sequence),
        catalog=catalog,
        corrections=CorrectionStore(config.storage_root),
        workspace_root=config.storage_root,
    )


def _checkpoints(config: BatonConfig) -> CheckpointStore:
    return CheckpointStore(
        config.storage_root,
        git_info=SubprocessGitInfoProvider(Path.cwd(), timeout=config.checkpoints.git_timeout),
    )


def _fail(exc: BatonError) -> NoReturn:
    typer.secho(str(exc), fg=typer.colors.RED)
    raise typer.Exit(code=1)


# ----------------------------------------------------------------------
# Workflows
@workflow_app.command("create")
def workflow_create(
    title: str,
    description: str = typer.Option("", help="Task description"),
    issue_id: Optional[str] = typer.Option(None, help="External issue id"),
) -> None:
    """
    Create a workflow for a task.

    Example:
        baton workflow create "Add auth" --description "JWT login" --issue-id 42
        # Output: Workflow <id> created (pending, role: Issue Analyst)
    """
    engine = _engine(load_config())
    state = asyncio.run(engine.create_workflow(issue_id, title, description))
    typer.echo(f"Workflow {state.id} created ({state.status}, role: {state.current_role})")


@workflow_app.command("run")
def workflow_run(
    workflow_id: str,
    all_roles: bool = typer.Option(False, "--all", help="Run until the workflow finishes"),
) -> None:
    """Execute the next role, or every remaining role with --all."""
    engine = _engine(load_config())
    try:
        if all_roles:
            state = asyncio.run(engine.run_to_completion(workflow_id))
            typer.echo(f"Workflow {state.id}: {state.status} after {len(state.executions)} roles")
            return
        execution = asyncio.run(engine.execute_next_role(workflow_id))
    except BatonError as exc:
        _fail(exc)
    typer.echo(f"{execution.role_id}: {execution.status}")
    for item in execution.deliverables:
        typer.echo(f"  - {item}")


@workflow_app.command("list")
def workflow_list() -> None:
    """List workflows with their status and current role."""
    workflows = asyncio.run(_engine(load_config()).list_workflows())
    if not workflows:
        typer.echo("No workflows found")
        return
    for wf in workflows:
        typer.echo(f"{wf.id}\t{wf.status}\t{wf.current_role}\t{wf.issue_title or ''}")


@workflow_app.command("show")
def workflow_show(workflow_id: str) -> None:
    """Show status, handoff summary and execution history for a workflow."""
    wf = asyncio.run(_engine(load_config()).get_workflow_state(workflow_id))
    if wf is None:
        typer.echo("Workflow not found")
        raise typer.Exit(code=1)
    typer.echo(f"Workflow {wf.id}: {wf.status}")
    typer.echo(f"Title: {wf.issue_title or ''}")
    typer.echo(f"Current role: {wf.current_role}")
    for execution in wf.executions:
        typer.echo(
            f"- {execution.role_id}: {execution.status}"
            + (f" ({execution.error})" if execution.error else "")
        )


@workflow_app.command("block")
def workflow_block(workflow_id: str, reason: str = typer.Option("", help="Why it is blocked")) -> None:
    """Pause an in-progress workflow."""
    try:
        state = asyncio.run(_engine(load_config()).block(workflow_id, reason))
    except BatonError as exc:
        _fail(exc)
    typer.echo(f"Workflow {state.id}: {state.status}")


@workflow_app.command("unblock")
def workflow_unblock(workflow_id: str) -> None:
    """Resume a blocked workflow."""
    try:
        state = asyncio.run(_engine(load_config()).unblock(workflow_id))
    except BatonError as exc:
        _fail(exc)
    typer.echo(f"Workflow {state.id}: {state.status}")


# ----------------------------------------------------------------------
# Checkpoints
@checkpoint_app.command("save")
def checkpoint_save(
    task_description: str,
    completed: List[str] = typer.Option([], "--completed", help="Completed file path"),
    pending: List[str] = typer.Option([], "--pending", help="Pending file path"),
    context: str = typer.Option("", help="Free-text context"),
    next_step: str = typer.Option("", help="Where to resume"),
    workflow_id: Optional[str] = typer.Option(None, help="Related workflow id"),
) -> None:
    """Save task progress so it can be resumed later."""
    store = _checkpoints(load_config())
    checkpoint_id = asyncio.run(
        store.save(
            task_description,
            completed=[{"path": p, "status": "completed"} for p in completed],
            pending=[{"path": p, "status": "pending"} for p in pending],
            context=context,
            next_step=next_step,
            workflow_id=workflow_id,
        )
    )
    typer.echo(f"Checkpoint saved: {checkpoint_id}")


@checkpoint_app.command("resume")
def checkpoint_resume(checkpoint_id: Optional[str] = typer.Argument(None)) -> None:
    """Resume the given checkpoint, or the most recent one."""
    store = _checkpoints(load_config())
    try:
        checkpoint = asyncio.run(store.resume(checkpoint_id))
    except BatonError as exc:
        _fail(exc)
    typer.echo(store.format_as_context(checkpoint))


@checkpoint_app.command("list")
def checkpoint_list(limit: Optional[int] = typer.Option(None, help="Maximum entries")) -> None:
    """List checkpoints, newest first."""
    config = load_config()
    checkpoints = asyncio.run(
        _checkpoints(config).list(limit or config.checkpoints.list_limit)
    )
    if not checkpoints:
        typer.echo("No checkpoints found")
        return
    for cp in checkpoints:
        meta = cp.metadata
        active = "active" if cp.is_active else "inactive"
        typer.echo(
            f"{cp.id}\t{cp.task_description}\t{meta.completed_count}/{meta.total_files}\t{active}"
        )


@checkpoint_app.command("clear")
def checkpoint_clear(checkpoint_id: Optional[str] = typer.Argument(None)) -> None:
    """Clear one checkpoint, or all checkpoints when no id is given."""
    removed = asyncio.run(_checkpoints(load_config()).clear(checkpoint_id))
    if checkpoint_id and removed == 0:
        typer.echo(f"Checkpoint not found: {checkpoint_id}")
        return
    typer.echo(f"Cleared {removed} checkpoint(s)")


# ----------------------------------------------------------------------
# Corrections
@correction_app.command("record")
def correction_record(
    wrong: str = typer.Option(..., help="What was done wrong"),
    correct: str = typer.Option(..., help="What should be done instead"),
    keyword: List[str] = typer.Option([], "--keyword", help="Trigger keyword"),
    file_pattern: List[str] = typer.Option([], "--file-pattern", help="File pattern"),
    tech: List[str] = typer.Option([], "--tech", help="Tech stack entry"),
    phase: List[str] = typer.Option([], "--phase", help="Phase or role name"),
    severity: str = typer.Option("moderate", help="minor, moderate or critical"),
) -> None:
    """Remember a correction so it can be warned about later."""
    store = CorrectionStore(load_config().storage_root)
    correction_id = asyncio.run(
        store.record_correction(
            wrong_behavior=wrong,
            correct_behavior=correct,
            context={
                "triggerKeywords": keyword,
                "filePatterns": file_pattern,
                "techStack": tech,
                "phases": phase,
            },
            severity=severity,
        )
    )
    typer.echo(f"Correction recorded: {correction_id}")


@correction_app.command("warnings")
def correction_warnings(
    task_description: str,
    file: List[str] = typer.Option([], "--file", help="File about to be touched"),
    tech: List[str] = typer.Option([], "--tech", help="Tech stack entry"),
    phase: Optional[str] = typer.Option(None, help="Current phase"),
) -> None:
    """Show corrections relevant to a task description."""
    store = CorrectionStore(load_config().storage_root)
    warnings = asyncio.run(
        store.get_warnings(task_description, files=file, tech_stack=tech, phase=phase)
    )
    if not warnings:
        typer.echo("No relevant corrections")
        return
    typer.echo(store.format_warnings_as_context(warnings))


@correction_app.command("list")
def correction_list() -> None:
    """List recorded corrections."""
    entries = asyncio.run(CorrectionStore(load_config().storage_root).list_corrections())
    if not entries:
        typer.echo("No corrections recorded")
        return
    for entry in entries:
        typer.echo(f"{entry.id}\t{entry.severity}\t{entry.wrong_behavior}")


# ----------------------------------------------------------------------
# Roles
@role_app.command("recommend")
def role_recommend(
    description: str,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Show the top role recommendations for a task description."""
    config = load_config()
    selector = RoleSelector(load_catalog(config.roles.catalog_path))
    recommendations = selector.get_role_recommendations(Task.from_description(description))
    if as_json:
        typer.echo(
            json.dumps(
                [
                    {"role": r.role.name, "confidence": r.confidence, "reason": r.reason}
                    for r in recommendations
                ],
                indent=2,
            )
        )
        return
    if not recommendations:
        typer.echo(f"No matching role; default: {selector.default_role().name}")
        return
    for rec in recommendations:
        typer.echo(f"{rec.role.name}\t{rec.confidence:.2f}\t{rec.reason}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
