"""Result envelopes returned by every structured operation.

An envelope holds exactly one populated variant (a success shape or an error
shape) together with the verbatim response body and the capture time.
Envelopes are built through :meth:`ManticoreResponse.success` and
:meth:`ManticoreResponse.failure` (or the family constructors of the
subclasses) and are immutable afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Generic, Optional, Tuple, TypeVar

from manticore_client.models.responses import (
    DeleteByQuerySuccess,
    DeleteSuccess,
    ErrorMessage,
    ErrorResponse,
    PercolateSuccess,
    SearchSuccess,
)

SuccessT = TypeVar("SuccessT")
ErrorT = TypeVar("ErrorT")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ManticoreResponse(Generic[SuccessT, ErrorT]):
    """Success XOR error, plus the raw body and capture time.

    Attributes
    ----------
    raw_response: str
        The response body exactly as received.
    response: SuccessT | None
        Decoded success shape, if the call succeeded.
    error: ErrorT | None
        Decoded error shape, if the server rejected the call.
    timestamp: datetime
        UTC time at which the envelope was built.
    """

    raw_response: str
    response: Optional[SuccessT] = None
    error: Optional[ErrorT] = None
    timestamp: datetime = field(default_factory=_utcnow, compare=False)

    def __post_init__(self) -> None:
        populated = [value for value in self._variants() if value is not None]
        if len(populated) != 1:
            raise ValueError(
                f"{type(self).__name__} must hold exactly one variant, got {len(populated)}"
            )

    def _variants(self) -> Tuple[Any, ...]:
        names = [f.name for f in fields(self) if f.name not in ("raw_response", "timestamp")]
        return tuple(getattr(self, name) for name in names)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: SuccessT, raw_response: str) -> "ManticoreResponse[SuccessT, ErrorT]":
        return cls(raw_response=raw_response, response=value)

    @classmethod
    def failure(cls, error: ErrorT, raw_response: str) -> "ManticoreResponse[SuccessT, ErrorT]":
        return cls(raw_response=raw_response, error=error)


@dataclass(frozen=True)
class DeleteResponse(ManticoreResponse[DeleteSuccess, ErrorResponse]):
    """Delete envelope; deletes by query land in ``query_response``."""

    query_response: Optional[DeleteByQuerySuccess] = None

    @classmethod
    def by_query(cls, value: DeleteByQuerySuccess, raw_response: str) -> "DeleteResponse":
        return cls(raw_response=raw_response, query_response=value)


@dataclass(frozen=True)
class PercolateResponse(ManticoreResponse[PercolateSuccess, ErrorMessage]):
    """Percolate envelope; search-shaped answers land in ``search_response``."""

    search_response: Optional[SearchSuccess] = None

    @classmethod
    def search_shaped(cls, value: SearchSuccess, raw_response: str) -> "PercolateResponse":
        return cls(raw_response=raw_response, search_response=value)
