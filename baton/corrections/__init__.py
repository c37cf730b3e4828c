"""Correction memory: remembered mistakes and proactive warnings."""

from __future__ import annotations

from .matching import ACCEPTANCE_THRESHOLD, MatchResult, extract_tags, score_correction
from .models import (
    Correction,
    CorrectionContext,
    CorrectionIndex,
    CorrectionIndexEntry,
    CorrectionWarning,
    WarningContext,
)
from .store import CorrectionStore

__all__ = [
    "ACCEPTANCE_THRESHOLD",
    "Correction",
    "CorrectionContext",
    "CorrectionIndex",
    "CorrectionIndexEntry",
    "CorrectionStore",
    "CorrectionWarning",
    "MatchResult",
    "WarningContext",
    "extract_tags",
    "score_correction",
]
