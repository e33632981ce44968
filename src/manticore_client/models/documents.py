"""Typed documents.

Subclass :class:`ManticoreDocument` to describe the columns of a table. Field
names are emitted in snake_case regardless of how the attributes are spelled.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_snake


class ManticoreDocument(BaseModel):
    """Base class for typed table documents."""

    model_config = ConfigDict(alias_generator=to_snake, populate_by_name=True, extra="allow")


def document_to_dict(document: ManticoreDocument) -> Dict[str, Any]:
    """Return the JSON-ready mapping for a typed document (unset fields omitted)."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)
