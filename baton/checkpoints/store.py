"""Checkpoint persistence for resumable work sessions."""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..errors import NotFoundError
from ..models import utc_now
from ..storage import path_exists, read_model, remove_file, write_model
from .git import GitInfoProvider, NullGitInfoProvider
from .models import (
    Checkpoint,
    CheckpointFile,
    CheckpointIndex,
    CheckpointIndexEntry,
    CheckpointMetadata,
    FileStatus,
)

logger = logging.getLogger(__name__)


def _as_files(
    items: Optional[Iterable[CheckpointFile | Dict[str, Any]]], status: FileStatus
) -> List[CheckpointFile]:
    """Coerce entries to ``CheckpointFile``; mappings without a status get ``status``."""
    files: List[CheckpointFile] = []
    for item in items or []:
        if isinstance(item, CheckpointFile):
            files.append(item)
        else:
            files.append(CheckpointFile.model_validate({"status": status, **item}))
    return files


class CheckpointStore:
    """Save, resume, list and clear task checkpoints.

    Each checkpoint is one JSON document under ``<root>/checkpoints`` plus an
    entry in ``<root>/checkpoints-index.json``. The index is kept outside the
    checkpoints directory; no checkpoint id maps onto it. More than one
    checkpoint may be marked active at a time; nothing here enforces
    exclusivity.
    """

    def __init__(
        self, root: str | Path, git_info: Optional[GitInfoProvider] = None
    ) -> None:
        self.checkpoints_dir = Path(root) / "checkpoints"
        self.index_path = Path(root) / "checkpoints-index.json"
        self._git_info = git_info or NullGitInfoProvider()

    def _path(self, checkpoint_id: str) -> Path:
        return self.checkpoints_dir / f"{checkpoint_id}.json"

    async def _load_index(self) -> CheckpointIndex:
        if not await path_exists(self.index_path):
            return CheckpointIndex()
        return await read_model(self.index_path, CheckpointIndex)

    async def _save_index(self, index: CheckpointIndex) -> None:
        index.total_checkpoints = len(index.checkpoints)
        index.last_updated = utc_now()
        await write_model(self.index_path, index)

    async def _write(self, checkpoint: Checkpoint) -> None:
        await write_model(self._path(checkpoint.id), checkpoint, exclude_none=True)

    @staticmethod
    def _newest_first(entries: List[CheckpointIndexEntry]) -> List[CheckpointIndexEntry]:
        # Later insertion wins when timestamps are equal.
        ordered = sorted(
            enumerate(entries), key=lambda pair: (pair[1].checkpoint, pair[0]), reverse=True
        )
        return [entry for _, entry in ordered]

    # ------------------------------------------------------------------
    async def save(
        self,
        task_description: str,
        completed: Optional[Iterable[CheckpointFile | Dict[str, Any]]] = None,
        pending: Optional[Iterable[CheckpointFile | Dict[str, Any]]] = None,
        context: str = "",
        next_step: str = "",
        workflow_id: Optional[str] = None,
    ) -> str:
        """Persist a new checkpoint and return its id."""
        checkpoint_id = f"checkpoint-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
        completed_files = _as_files(completed, "completed")
        pending_files = _as_files(pending, "pending")
        git = await self._git_info.probe()

        checkpoint = Checkpoint(
            id=checkpoint_id,
            task_id=checkpoint_id,
            workflow_id=workflow_id,
            task_description=task_description or "Task in progress",
            completed=completed_files,
            pending=pending_files,
            context=context,
            next_step=next_step,
            metadata=CheckpointMetadata(
                branch=git.branch,
                last_commit=git.last_commit,
                modified_files=git.modified_files,
                total_files=len(completed_files) + len(pending_files),
                completed_count=len(completed_files),
            ),
        )
        await self._write(checkpoint)

        index = await self._load_index()
        index.checkpoints = [c for c in index.checkpoints if c.id != checkpoint.id]
        index.checkpoints.append(
            CheckpointIndexEntry(
                id=checkpoint.id,
                task_id=checkpoint.task_id,
                task_description=checkpoint.task_description,
                checkpoint=checkpoint.checkpoint,
                completed_count=checkpoint.metadata.completed_count,
                total_files=checkpoint.metadata.total_files,
                is_active=checkpoint.is_active,
            )
        )
        await self._save_index(index)

        logger.info(
            f"Saved checkpoint {checkpoint_id}: {len(completed_files)} completed, "
            f"{len(pending_files)} pending"
        )
        return checkpoint_id

    async def load(self, checkpoint_id: str) -> Optional[Checkpoint]:
        path = self._path(checkpoint_id)
        if not await path_exists(path):
            return None
        return await read_model(path, Checkpoint)

    async def latest(self) -> Optional[Checkpoint]:
        index = await self._load_index()
        for entry in self._newest_first(index.checkpoints):
            checkpoint = await self.load(entry.id)
            if checkpoint is not None:
                return checkpoint
        return None

    async def resume(self, checkpoint_id: Optional[str] = None) -> Checkpoint:
        """Load a checkpoint (latest by default) and mark it active."""
        if checkpoint_id:
            checkpoint = await self.load(checkpoint_id)
            if checkpoint is None:
                raise NotFoundError("checkpoint", checkpoint_id)
        else:
            checkpoint = await self.latest()
            if checkpoint is None:
                raise NotFoundError("checkpoints")

        checkpoint.is_active = True
        await self._write(checkpoint)

        index = await self._load_index()
        for entry in index.checkpoints:
            if entry.id == checkpoint.id:
                entry.is_active = True
        await self._save_index(index)

        logger.info(f"Resumed checkpoint {checkpoint.id}")
        return checkpoint

    async def list(self, limit: int = 10) -> List[Checkpoint]:
        """Checkpoints ordered newest first, at most ``limit`` of them."""
        if limit <= 0:
            return []
        index = await self._load_index()
        checkpoints: List[Checkpoint] = []
        for entry in self._newest_first(index.checkpoints):
            if len(checkpoints) >= limit:
                break
            checkpoint = await self.load(entry.id)
            if checkpoint is not None:
                checkpoints.append(checkpoint)
        return checkpoints

    async def clear(self, checkpoint_id: Optional[str] = None) -> int:
        """Remove one checkpoint, or all of them; return how many were removed."""
        index = await self._load_index()

        if checkpoint_id is None:
            removed = 0
            for entry in index.checkpoints:
                if await remove_file(self._path(entry.id)):
                    removed += 1
            index.checkpoints = []
            await self._save_index(index)
            logger.info(f"Cleared {removed} checkpoint(s)")
            return removed

        if not await remove_file(self._path(checkpoint_id)):
            logger.warning(f"Checkpoint not found: {checkpoint_id}")
            return 0
        index.checkpoints = [c for c in index.checkpoints if c.id != checkpoint_id]
        await self._save_index(index)
        logger.info(f"Cleared checkpoint {checkpoint_id}")
        return 1

    @staticmethod
    def format_as_context(checkpoint: Checkpoint) -> str:
        """Markdown summary used when resuming a checkpoint."""
        meta = checkpoint.metadata
        lines = [
            "## 📍 Resuming from Checkpoint",
            "",
            f"**Task**: {checkpoint.task_description}",
            f"**Checkpoint**: {checkpoint.checkpoint.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
            "",
            "### Progress",
            f"- **Completed**: {meta.completed_count}/{meta.total_files} files",
            "",
        ]
        if checkpoint.completed:
            lines.append("### ✅ Completed Files")
            lines.extend(f"- `{f.path}` - {f.description}" for f in checkpoint.completed)
            lines.append("")
        if checkpoint.pending:
            lines.append("### ⏳ Pending Files")
            lines.extend(f"- `{f.path}` - {f.description}" for f in checkpoint.pending)
            lines.append("")
        if checkpoint.context:
            lines.extend(["### 📝 Context", checkpoint.context, ""])
        if checkpoint.next_step:
            lines.extend(["### ➡️ Next Step", checkpoint.next_step, ""])
        if meta.branch:
            lines.append(f"**Branch**: `{meta.branch}`")
        return "\n".join(lines)
