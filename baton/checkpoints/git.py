"""Best-effort VCS metadata probes for checkpoints."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class GitInfo(BaseModel):
    branch: Optional[str] = None
    last_commit: Optional[str] = None
    modified_files: List[str] = Field(default_factory=list)


class GitInfoProvider(Protocol):
    """Supplies branch, commit and modified files for a working tree."""

    async def probe(self) -> GitInfo:
        """Return whatever metadata is available; never raise."""


class NullGitInfoProvider:
    """Provider used when no VCS metadata should be captured."""

    def __init__(self, info: Optional[GitInfo] = None) -> None:
        self._info = info or GitInfo()

    async def probe(self) -> GitInfo:
        return self._info.model_copy(deep=True)


class SubprocessGitInfoProvider:
    """Query ``git`` in ``repo_root``.

    ``timeout`` bounds the whole probe, not each git command. Commands that
    would start after the deadline are skipped and their fields left empty.
    """

    def __init__(
        self,
        repo_root: str | Path,
        timeout: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.repo_root = Path(repo_root)
        self.timeout = timeout
        self._clock = clock

    def _run_git(self, args: List[str], deadline: float) -> Optional[str]:
        remaining = deadline - self._clock()
        if remaining <= 0:
            logger.warning(f"git {' '.join(args)} skipped: probe timeout exhausted")
            return None
        try:
            proc = subprocess.run(
                ["git", "--no-pager", *args],
                cwd=self.repo_root,
                text=True,
                capture_output=True,
                timeout=remaining,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning(f"git {' '.join(args)} unavailable: {exc}")
            return None
        if proc.returncode != 0:
            logger.debug(f"git {' '.join(args)} failed: {proc.stderr.strip()}")
            return None
        return proc.stdout

    def _probe_sync(self) -> GitInfo:
        deadline = self._clock() + self.timeout
        branch = self._run_git(["rev-parse", "--abbrev-ref", "HEAD"], deadline)
        if branch is None:
            return GitInfo()
        commit = self._run_git(["rev-parse", "--short", "HEAD"], deadline)
        status = self._run_git(["status", "--porcelain"], deadline) or ""
        modified = [line[3:].strip() for line in status.splitlines() if line.strip()]
        return GitInfo(
            branch=branch.strip() or None,
            last_commit=commit.strip() if commit else None,
            modified_files=modified,
        )

    async def probe(self) -> GitInfo:
        return await asyncio.to_thread(self._probe_sync)
