"""Ordered collection of roles loaded at startup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import yaml
from pydantic import ValidationError

from ..errors import PersistenceError
from .defaults import DEFAULT_ROLES
from .models import Role

logger = logging.getLogger(__name__)


class RoleCatalog:
    """Ordered, immutable-per-load set of roles.

    Catalog order is significant: it breaks ties during role selection.
    Reloading replaces the whole role list; individual roles are never mutated.
    """

    def __init__(self, roles: Iterable[Role] = ()) -> None:
        self._roles: List[Role] = list(roles)

    def __iter__(self) -> Iterator[Role]:
        return iter(self._roles)

    def __len__(self) -> int:
        return len(self._roles)

    @property
    def roles(self) -> List[Role]:
        return list(self._roles)

    def names(self) -> List[str]:
        return [role.name for role in self._roles]

    def get(self, name: str) -> Optional[Role]:
        """Case-insensitive lookup by role name."""
        wanted = name.strip().lower()
        return next((r for r in self._roles if r.name.lower() == wanted), None)

    def reload(self, roles: Iterable[Role]) -> None:
        self._roles = list(roles)
        logger.info(f"Role catalog reloaded with {len(self._roles)} roles")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RoleCatalog":
        """Load roles from a YAML document.

        The document is either a list of role mappings or a mapping with a
        ``roles`` key. Entries that fail validation are skipped.
        """

        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or []
        except (OSError, yaml.YAMLError) as exc:
            raise PersistenceError("read", path, str(exc)) from exc

        if isinstance(data, dict):
            data = data.get("roles", [])
        if not isinstance(data, list):
            raise PersistenceError("read", path, "expected a list of roles")

        roles: List[Role] = []
        for entry in data:
            try:
                roles.append(Role.model_validate(entry))
            except ValidationError as exc:
                logger.warning(f"Skipping invalid role entry in {path}: {exc}")
        return cls(roles)


def default_catalog() -> RoleCatalog:
    return RoleCatalog(DEFAULT_ROLES)


def load_catalog(catalog_path: Optional[str] = None) -> RoleCatalog:
    """Return the configured catalog or the built-in defaults."""
    if catalog_path:
        return RoleCatalog.from_yaml(catalog_path)
    return default_catalog()
