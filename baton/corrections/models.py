"""Data models for remembered corrections."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import DocumentModel, utc_now

Severity = Literal["minor", "moderate", "critical"]

SEVERITY_ORDER = {"minor": 0, "moderate": 1, "critical": 2}


class CorrectionContext(DocumentModel):
    """Where a correction applies."""

    file_patterns: List[str] = Field(default_factory=list)
    tech_stack: List[str] = Field(default_factory=list)
    trigger_keywords: List[str] = Field(default_factory=list)
    phases: List[str] = Field(default_factory=list)


class Correction(DocumentModel):
    """A remembered mistake and its fix."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    wrong_behavior: str = ""
    correct_behavior: str = ""
    context: CorrectionContext = Field(default_factory=CorrectionContext)
    severity: Severity = "moderate"
    created_at: datetime = Field(default_factory=utc_now)
    warn_count: int = 0
    workflow_ids: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("severity", mode="before")
    @classmethod
    def _legacy_severity(cls, v: Any) -> Any:
        if isinstance(v, str) and v.lower() == "major":
            return "critical"
        return v.lower() if isinstance(v, str) else v


class CorrectionWarning(BaseModel):
    """A correction matched against the current task context."""

    correction: Correction
    match_reason: str
    confidence: float


class WarningContext(BaseModel):
    """Description of the work about to be dispatched."""

    task_description: str
    files: List[str] = Field(default_factory=list)
    tech_stack: List[str] = Field(default_factory=list)
    phase: Optional[str] = None


class CorrectionIndexEntry(DocumentModel):
    id: str
    wrong_behavior: str
    severity: Severity
    created_at: datetime


class CorrectionIndex(DocumentModel):
    """Summary file allowing listing without loading every correction."""

    version: str = "1.0"
    last_updated: datetime = Field(default_factory=utc_now)
    total_corrections: int = 0
    corrections: List[CorrectionIndexEntry] = Field(default_factory=list)
