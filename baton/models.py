from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    """Base for persisted entities.

    Attributes are snake_case in Python and camelCase in the JSON documents.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
