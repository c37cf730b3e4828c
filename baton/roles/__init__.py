"""Role catalog and selection."""

from __future__ import annotations

from .catalog import RoleCatalog, default_catalog, load_catalog
from .defaults import DEFAULT_ROLES, FALLBACK_ROLE
from .models import Role, Task, derive_keywords
from .selector import RoleRecommendation, RoleSelector, text_similarity

__all__ = [
    "Role",
    "Task",
    "RoleCatalog",
    "RoleSelector",
    "RoleRecommendation",
    "DEFAULT_ROLES",
    "FALLBACK_ROLE",
    "default_catalog",
    "load_catalog",
    "derive_keywords",
    "text_similarity",
]
