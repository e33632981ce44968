"""Payload encoding for request models.

Single requests become one JSON document; bulk requests become
newline-delimited JSON (one request object per line).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pydantic import BaseModel

JSON = "application/json"
NDJSON = "application/x-ndjson"
TEXT = "text/plain"


@dataclass(frozen=True, slots=True)
class Payload:
    body: bytes
    content_type: str


def _dump(model: BaseModel) -> str:
    return model.model_dump_json(by_alias=True, exclude_none=True)


def encode_json(model: BaseModel, *, content_type: str = JSON) -> Payload:
    """Serialize one request model.

    Insert and replace send a single document under the ndjson content type,
    which the server accepts for one-line bodies as well.
    """
    return Payload(body=_dump(model).encode("utf-8"), content_type=content_type)


def encode_ndjson(models: Iterable[BaseModel]) -> Payload:
    lines = "\n".join(_dump(m) for m in models)
    return Payload(body=lines.encode("utf-8"), content_type=NDJSON)


def encode_text(text: str) -> Payload:
    return Payload(body=text.encode("utf-8"), content_type=TEXT)
