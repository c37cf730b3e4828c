"""Cheap, explainable scoring of corrections against a task context."""

from __future__ import annotations

import os
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .models import Correction, WarningContext

KEYWORD_SCORE = 0.3
FILE_PATTERN_SCORE = 0.2
TECH_STACK_SCORE = 0.15
PHASE_SCORE = 0.15
TAG_SCORE = 0.1
CONTENT_SCORE = 0.25

CONTENT_MIN_OVERLAP = 2
CONTENT_MIN_WORD_LENGTH = 3
ACCEPTANCE_THRESHOLD = 0.25
# Scores are compared at this precision so additive float error cannot push
# an exact threshold score below the line.
SCORE_PRECISION = 9

TECH_TERMS = (
    "lodash",
    "react",
    "typescript",
    "javascript",
    "node",
    "npm",
    "api",
    "async",
    "promise",
    "error",
    "test",
    "component",
)


class MatchResult(BaseModel):
    score: float = 0.0
    reasons: List[str] = Field(default_factory=list)

    @property
    def matches(self) -> bool:
        return round(self.score, SCORE_PRECISION) >= ACCEPTANCE_THRESHOLD

    @property
    def confidence(self) -> float:
        return min(self.score, 1.0)

    @property
    def reason(self) -> str:
        return "; ".join(self.reasons) or "Low similarity"


def extract_tags(
    wrong_behavior: str, correct_behavior: str, tech_stack: Optional[Iterable[str]] = None
) -> List[str]:
    """Known technology terms in the texts plus the declared tech stack."""
    words = f"{wrong_behavior} {correct_behavior}".lower().split()
    tags = [term for term in TECH_TERMS if term in words]
    tags.extend(t.lower() for t in tech_stack or () if t)
    return list(dict.fromkeys(tags))


def score_correction(correction: Correction, context: WarningContext) -> MatchResult:
    result = MatchResult()
    description = context.task_description.lower()
    task_words = description.split()

    for keyword in correction.context.trigger_keywords:
        if keyword and keyword.lower() in description:
            result.score += KEYWORD_SCORE
            result.reasons.append(f'Keyword match: "{keyword}"')

    for file in context.files:
        base = os.path.basename(file)
        for pattern in correction.context.file_patterns:
            if not pattern:
                continue
            if pattern in file or (base and base in pattern):
                result.score += FILE_PATTERN_SCORE
                result.reasons.append(f'File pattern match: "{pattern}"')

    declared = {t.lower() for t in correction.context.tech_stack}
    for tech in context.tech_stack:
        if tech.lower() in declared:
            result.score += TECH_STACK_SCORE
            result.reasons.append(f'Tech stack match: "{tech}"')

    if context.phase and context.phase in correction.context.phases:
        result.score += PHASE_SCORE
        result.reasons.append(f'Phase match: "{context.phase}"')

    tag_matches = [tag for tag in correction.tags if tag.lower() in task_words]
    if tag_matches:
        result.score += len(tag_matches) * TAG_SCORE
        result.reasons.append(f"Tag matches: {', '.join(tag_matches)}")

    overlap = [
        w
        for w in correction.wrong_behavior.lower().split()
        if len(w) > CONTENT_MIN_WORD_LENGTH and w in task_words
    ]
    if len(overlap) > CONTENT_MIN_OVERLAP:
        result.score += CONTENT_SCORE
        result.reasons.append(f"Content similarity: {len(overlap)} common words")

    return result
