"""Durable store of corrections with contextual warning lookup."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..errors import NotFoundError
from ..models import utc_now
from ..storage import path_exists, read_model, write_model
from .matching import extract_tags, score_correction
from .models import (
    Correction,
    CorrectionContext,
    CorrectionIndex,
    CorrectionIndexEntry,
    CorrectionWarning,
    SEVERITY_ORDER,
    WarningContext,
)

logger = logging.getLogger(__name__)

MAX_WARNINGS = 5
INDEX_SUMMARY_LENGTH = 100


class CorrectionStore:
    """Records "wrong → correct" pairs and warns before they repeat.

    Layout under ``root``::

        memory/corrections/<id>.json
        memory/corrections-index.json

    Loaded corrections are cached per instance; recording a correction drops
    the cache instead of patching it.
    """

    def __init__(self, root: str | Path) -> None:
        memory_dir = Path(root) / "memory"
        self.corrections_dir = memory_dir / "corrections"
        self.index_path = memory_dir / "corrections-index.json"
        self._cache: Optional[List[Correction]] = None

    def _path(self, correction_id: str) -> Path:
        return self.corrections_dir / f"{correction_id}.json"

    async def _load_index(self) -> CorrectionIndex:
        if not await path_exists(self.index_path):
            return CorrectionIndex()
        return await read_model(self.index_path, CorrectionIndex)

    # ------------------------------------------------------------------
    async def record_correction(
        self,
        wrong_behavior: str = "",
        correct_behavior: str = "",
        context: CorrectionContext | Dict[str, Any] | None = None,
        severity: str = "moderate",
        workflow_ids: Optional[Iterable[str]] = None,
        tags: Optional[Iterable[str]] = None,
        correction_id: Optional[str] = None,
    ) -> str:
        """Persist a correction, filling defaults, and return its id."""
        if context is None:
            context = CorrectionContext()
        elif isinstance(context, dict):
            context = CorrectionContext.model_validate(context)

        data: Dict[str, Any] = {
            "wrong_behavior": wrong_behavior,
            "correct_behavior": correct_behavior,
            "context": context,
            "severity": severity,
            "workflow_ids": list(workflow_ids or []),
            "tags": list(tags)
            if tags is not None
            else extract_tags(wrong_behavior, correct_behavior, context.tech_stack),
        }
        if correction_id:
            data["id"] = correction_id
        correction = Correction(**data)

        await write_model(self._path(correction.id), correction)
        await self._append_to_index(correction)
        self._cache = None

        logger.info(f"Recorded correction {correction.id} ({correction.severity})")
        return correction.id

    async def get_warnings(
        self,
        task_description: str,
        files: Optional[Iterable[str]] = None,
        tech_stack: Optional[Iterable[str]] = None,
        phase: Optional[str] = None,
    ) -> List[CorrectionWarning]:
        """Corrections matching the context, most confident first (max 5).

        Ties on confidence are broken by severity, critical first.

        Every matching correction has its ``warn_count`` incremented and
        persisted, including matches beyond the returned top five.
        """
        context = WarningContext(
            task_description=task_description,
            files=list(files or []),
            tech_stack=list(tech_stack or []),
            phase=phase,
        )
        warnings: List[CorrectionWarning] = []
        for correction in await self._load_all():
            result = score_correction(correction, context)
            if not result.matches:
                continue
            correction.warn_count += 1
            await write_model(self._path(correction.id), correction)
            warnings.append(
                CorrectionWarning(
                    correction=correction.model_copy(deep=True),
                    match_reason=result.reason,
                    confidence=result.confidence,
                )
            )

        warnings.sort(
            key=lambda w: (w.confidence, SEVERITY_ORDER[w.correction.severity]),
            reverse=True,
        )
        logger.debug(f"{len(warnings)} correction(s) matched task context")
        return warnings[:MAX_WARNINGS]

    async def get_correction(self, correction_id: str) -> Correction:
        path = self._path(correction_id)
        if not await path_exists(path):
            raise NotFoundError("correction", correction_id)
        return await read_model(path, Correction)

    async def list_corrections(self) -> List[CorrectionIndexEntry]:
        index = await self._load_index()
        return list(index.corrections)

    @staticmethod
    def format_warnings_as_context(warnings: List[CorrectionWarning]) -> str:
        """Render warnings as a markdown block to inject into a role's context."""
        if not warnings:
            return ""

        lines = [
            "",
            "## ⚠️ Previous Corrections (IMPORTANT)",
            "",
            "The following corrections have been recorded from past sessions. "
            "**Avoid repeating these mistakes:**",
            "",
        ]
        for number, warning in enumerate(warnings, start=1):
            correction = warning.correction
            lines.append(f"### {number}. Correction ({correction.severity})")
            lines.append(f"**❌ Wrong**: {correction.wrong_behavior}")
            lines.append(f"**✅ Correct**: {correction.correct_behavior}")
            if warning.match_reason:
                lines.append(f"**Why this warning**: {warning.match_reason}")
            lines.append("")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    async def _load_all(self) -> List[Correction]:
        if self._cache is not None:
            return self._cache

        corrections: List[Correction] = []
        if await path_exists(self.corrections_dir):
            files = await asyncio.to_thread(
                lambda: sorted(self.corrections_dir.glob("*.json"))
            )
            for path in files:
                corrections.append(await read_model(path, Correction))
        self._cache = corrections
        return corrections

    async def _append_to_index(self, correction: Correction) -> None:
        index = await self._load_index()
        index.corrections = [c for c in index.corrections if c.id != correction.id]
        index.corrections.append(
            CorrectionIndexEntry(
                id=correction.id,
                wrong_behavior=correction.wrong_behavior[:INDEX_SUMMARY_LENGTH],
                severity=correction.severity,
                created_at=correction.created_at,
            )
        )
        index.total_corrections = len(index.corrections)
        index.last_updated = utc_now()
        await write_model(self.index_path, index)
