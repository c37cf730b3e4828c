"""Whole-document JSON persistence helpers.

Every entity is stored as one JSON document. Saves rewrite the full document
through a temporary file and ``os.replace``; there is no locking, the last
writer wins.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import PersistenceError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


async def write_model(path: Path, model: BaseModel, exclude_none: bool = False) -> None:
    """Persist a pydantic model using its camelCase aliases."""
    try:
        content = model.model_dump_json(
            by_alias=True, exclude_none=exclude_none, indent=2
        )
        await asyncio.to_thread(_write_text, path, content)
    except OSError as exc:
        raise PersistenceError("write", path, str(exc)) from exc


async def read_model(path: Path, model_type: Type[ModelT]) -> ModelT:
    try:
        content = await asyncio.to_thread(_read_text, path)
        return model_type.model_validate_json(content)
    except (OSError, ValidationError) as exc:
        raise PersistenceError("read", path, str(exc)) from exc


async def remove_file(path: Path) -> bool:
    """Delete ``path``; return ``False`` when it did not exist."""
    try:
        await asyncio.to_thread(path.unlink)
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise PersistenceError("delete", path, str(exc)) from exc
    return True


async def path_exists(path: Path) -> bool:
    return await asyncio.to_thread(path.exists)
