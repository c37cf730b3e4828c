"""Pydantic models describing roles and role-matching requests."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "with", "this", "that", "from", "into", "are",
        "was", "were", "has", "have", "had", "not", "but", "you", "your",
        "our", "its", "can", "should", "would", "could", "will", "need",
        "all", "any", "some", "use", "using", "about", "then", "than",
    }
)

_WORD_RE = re.compile(r"[a-z0-9][a-z0-9_\-\.\+#]*")


class Role(BaseModel):
    """Capability profile used to decide which kind of work handles a task."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ""
    discovery_keywords: Tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices(
            "discovery_keywords", "discoveryKeywords", "keywords"
        ),
    )
    capabilities: Tuple[str, ...] = ()
    priority: float = 1.0
    guidelines: str = Field(
        default="",
        validation_alias=AliasChoices(
            "guidelines", "implementationGuidelines", "implementation_guidelines"
        ),
    )
    tags: Tuple[str, ...] = ()
    version: str = "1.0.0"

    @field_validator("name")
    @classmethod
    def _ensure_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("role name must be a non-empty string")
        return v.strip()

    @field_validator("discovery_keywords", "capabilities", "tags", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return v


class Task(BaseModel):
    """A unit of work to be role-matched."""

    description: str
    keywords: List[str] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_description(
        cls, description: str, context: Optional[Dict[str, Any]] = None
    ) -> "Task":
        """Build a task whose keywords are derived from ``description``."""
        return cls(
            description=description,
            keywords=derive_keywords(description),
            context=context or {},
        )


def derive_keywords(text: str) -> List[str]:
    """Lowercase words longer than two characters, minus stop-words, in order."""
    keywords: List[str] = []
    for match in _WORD_RE.findall(text.lower()):
        word = match.strip(".-+")
        if len(word) <= 2 or word in STOP_WORDS or word in keywords:
            continue
        keywords.append(word)
    return keywords
