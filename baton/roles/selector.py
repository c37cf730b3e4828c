"""Weighted role scoring and selection."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from .catalog import RoleCatalog
from .defaults import FALLBACK_ROLE
from .models import Role, Task

logger = logging.getLogger(__name__)

KEYWORD_WEIGHT = 0.40
DESCRIPTION_WEIGHT = 0.25
CAPABILITY_WEIGHT = 0.20
USAGE_WEIGHT = 0.10
PRIORITY_WEIGHT = 0.05

DESCRIPTION_CANDIDATE_THRESHOLD = 0.3
USAGE_PENALTY = 0.1
FALLBACK_NAME_HINTS = ("assistant", "general", "helper")


class RoleRecommendation(BaseModel):
    """Explainable scoring result for one role."""

    role: Role
    confidence: float
    reason: str


def text_similarity(text1: str, text2: str) -> float:
    """Jaccard similarity of the word sets (words longer than 2 characters)."""
    words1 = {w for w in text1.lower().split() if len(w) > 2}
    words2 = {w for w in text2.lower().split() if len(w) > 2}
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def _overlaps(keyword: str, terms: Iterable[str]) -> bool:
    return any(term in keyword or keyword in term for term in terms)


def _matching_keywords(task_keywords: List[str], terms: Iterable[str]) -> List[str]:
    lowered = [t.lower() for t in terms if t]
    return [k for k in task_keywords if _overlaps(k, lowered)]


class RoleSelector:
    """Pick the best role in a catalog for a described task.

    Usage history is per-instance and in-memory only. Every selection
    lowers the selected role's recency score to favour variety within a
    session.
    """

    def __init__(self, catalog: RoleCatalog) -> None:
        self._catalog = catalog
        self._usage: Dict[str, int] = {}

    @property
    def catalog(self) -> RoleCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Public API
    def select_optimal_role(self, task: Task) -> Role:
        """Return the highest scoring role, recording the selection."""
        ranked = self._rank(task)
        if not ranked or ranked[0][1] <= 0:
            role = self.default_role()
            logger.debug(f"No candidate role for task; falling back to {role.name}")
            return role

        role, score = ranked[0]
        self._usage[role.name] = self._usage.get(role.name, 0) + 1
        logger.debug(f"Selected role {role.name} with score {score:.3f}")
        return role

    def get_role_recommendations(
        self, task: Task, limit: int = 3
    ) -> List[RoleRecommendation]:
        """Top scoring roles with reasons. Does not touch usage history."""
        return [
            RoleRecommendation(
                role=role, confidence=score, reason=self._reason(role, task)
            )
            for role, score in self._rank(task)[:limit]
        ]

    def score(self, role: Role, task: Task) -> float:
        keywords = self._task_keywords(task)
        score = 0.0
        score += self._keyword_score(role, keywords) * KEYWORD_WEIGHT
        score += text_similarity(task.description, role.description) * DESCRIPTION_WEIGHT
        score += self._capability_score(role, keywords) * CAPABILITY_WEIGHT
        score += self._usage_score(role) * USAGE_WEIGHT
        score += self._priority_score(role) * PRIORITY_WEIGHT
        return score

    def default_role(self) -> Role:
        for role in self._catalog:
            lowered = role.name.lower()
            if any(hint in lowered for hint in FALLBACK_NAME_HINTS):
                return role
        return FALLBACK_ROLE

    def usage_statistics(self) -> Dict[str, int]:
        return dict(self._usage)

    def reset_usage_history(self) -> None:
        self._usage.clear()

    def update_catalog(self, catalog: RoleCatalog) -> None:
        self._catalog = catalog

    # ------------------------------------------------------------------
    # Scoring helpers
    @staticmethod
    def _task_keywords(task: Task) -> List[str]:
        return [k.lower() for k in task.keywords if k]

    def _is_candidate(self, role: Role, task: Task) -> bool:
        keywords = self._task_keywords(task)
        if _matching_keywords(keywords, role.discovery_keywords):
            return True
        if text_similarity(task.description, role.description) > DESCRIPTION_CANDIDATE_THRESHOLD:
            return True
        return bool(_matching_keywords(keywords, role.capabilities))

    def _rank(self, task: Task) -> List[tuple[Role, float]]:
        scored = [
            (role, self.score(role, task))
            for role in self._catalog
            if self._is_candidate(role, task)
        ]
        # sorted() is stable, so equal scores keep catalog order
        return sorted(scored, key=lambda item: item[1], reverse=True)

    @staticmethod
    def _keyword_score(role: Role, keywords: List[str]) -> float:
        if not keywords:
            return 0.0
        return len(_matching_keywords(keywords, role.discovery_keywords)) / len(keywords)

    @staticmethod
    def _capability_score(role: Role, keywords: List[str]) -> float:
        if not keywords:
            return 0.0
        return len(_matching_keywords(keywords, role.capabilities)) / len(keywords)

    def _usage_score(self, role: Role) -> float:
        return max(0.0, 1 - self._usage.get(role.name, 0) * USAGE_PENALTY)

    @staticmethod
    def _priority_score(role: Role) -> float:
        return min(max(role.priority / 10, 0.0), 1.0)

    def _reason(self, role: Role, task: Task) -> str:
        matching = _matching_keywords(self._task_keywords(task), role.discovery_keywords)
        if matching:
            return f"Matches keywords: {', '.join(matching)}"

        relevance = text_similarity(task.description, role.description)
        if relevance > DESCRIPTION_CANDIDATE_THRESHOLD:
            return f"High description relevance ({round(relevance * 100)}%)"

        project_type: Optional[str] = task.context.get("projectType") or task.context.get(
            "project_type"
        )
        return f"General capability match for {project_type or 'general'} projects"
