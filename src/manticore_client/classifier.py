"""Response classification.

The Manticore HTTP API does not wrap its answers in a common envelope, so the
shape of a body has to be worked out after the fact. Each endpoint family has
its own rule:

* modification, delete and percolate look at which top-level keys are present
  and ignore the HTTP status (some rejections arrive with 200);
* update, search, get-percolate, autocomplete and mapping trust the HTTP
  status;
* bulk tries the success shape first and falls back to the error list, since
  bulk rejections are a bare JSON array.

Once a shape is chosen its decoding errors propagate (``pydantic.ValidationError``
covers malformed JSON as well); the client wraps them into the family error.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from manticore_client.envelope import DeleteResponse, ManticoreResponse, PercolateResponse
from manticore_client.models.responses import (
    AutocompleteSuccess,
    BulkError,
    BulkSuccess,
    DeleteByQuerySuccess,
    DeleteSuccess,
    ErrorMessage,
    ErrorResponse,
    MappingSuccess,
    ModificationSuccess,
    PercolateSuccess,
    SearchSuccess,
    UpdateSuccess,
)
from manticore_client.transport import RawResponse

T = TypeVar("T")

# (key, builder) pairs checked in order against the parsed body; the first
# key present wins. A ``None`` key matches unconditionally.
KeyRule = Tuple[Optional[str], Callable[[str], Any]]

_BULK_SUCCESS = TypeAdapter(BulkSuccess)
_BULK_ERRORS = TypeAdapter(List[BulkError])
# Autocomplete and mapping answer with a list of result sets or a single object
_AUTOCOMPLETE = TypeAdapter(Union[List[AutocompleteSuccess], AutocompleteSuccess])
_MAPPING = TypeAdapter(Union[List[MappingSuccess], MappingSuccess])


@dataclass(frozen=True, slots=True)
class Decoded(Generic[T]):
    """Outcome of a tentative decode: ``value`` on success, ``problem`` otherwise."""

    value: Optional[T] = None
    problem: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.problem is None


def try_decode(adapter: TypeAdapter[T], text: str) -> Decoded[T]:
    try:
        return Decoded(value=adapter.validate_json(text))
    except ValidationError as exc:
        return Decoded(problem=exc)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else [value]


def parse_object(text: str) -> Dict[str, Any]:
    """Parse ``text`` as a JSON object, for key inspection."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def select_by_keys(text: str, rules: Sequence[KeyRule]) -> Any:
    body = parse_object(text)
    for key, build in rules:
        if key is None or key in body:
            return build(text)
    raise ValueError("no classification rule matched")


def classify_modification(raw: RawResponse) -> ManticoreResponse[ModificationSuccess, ErrorResponse]:
    return select_by_keys(
        raw.body,
        [
            ("error", lambda t: ManticoreResponse.failure(ErrorResponse.model_validate_json(t), t)),
            (None, lambda t: ManticoreResponse.success(ModificationSuccess.model_validate_json(t), t)),
        ],
    )


def classify_update(raw: RawResponse) -> ManticoreResponse[UpdateSuccess, ErrorResponse]:
    if raw.is_success:
        return ManticoreResponse.success(UpdateSuccess.model_validate_json(raw.body), raw.body)
    return ManticoreResponse.failure(ErrorResponse.model_validate_json(raw.body), raw.body)


def classify_bulk(raw: RawResponse) -> ManticoreResponse[BulkSuccess, List[BulkError]]:
    decoded = try_decode(_BULK_SUCCESS, raw.body)
    if decoded.ok:
        return ManticoreResponse.success(decoded.value, raw.body)
    return ManticoreResponse.failure(_BULK_ERRORS.validate_json(raw.body), raw.body)


def classify_search(raw: RawResponse) -> ManticoreResponse[SearchSuccess, ErrorMessage]:
    if raw.is_success:
        return ManticoreResponse.success(SearchSuccess.model_validate_json(raw.body), raw.body)
    return ManticoreResponse.failure(ErrorMessage.model_validate_json(raw.body), raw.body)


def classify_delete(raw: RawResponse) -> DeleteResponse:
    return select_by_keys(
        raw.body,
        [
            ("error", lambda t: DeleteResponse.failure(ErrorResponse.model_validate_json(t), t)),
            ("deleted", lambda t: DeleteResponse.by_query(DeleteByQuerySuccess.model_validate_json(t), t)),
            (None, lambda t: DeleteResponse.success(DeleteSuccess.model_validate_json(t), t)),
        ],
    )


def classify_percolate(raw: RawResponse) -> PercolateResponse:
    # "result" is checked before "hits" so a body carrying both is a stored-query answer
    return select_by_keys(
        raw.body,
        [
            ("result", lambda t: PercolateResponse.success(PercolateSuccess.model_validate_json(t), t)),
            ("hits", lambda t: PercolateResponse.search_shaped(SearchSuccess.model_validate_json(t), t)),
            (None, lambda t: PercolateResponse.failure(ErrorMessage.model_validate_json(t), t)),
        ],
    )


def classify_get_percolate(raw: RawResponse) -> ManticoreResponse[SearchSuccess, ErrorMessage]:
    return classify_search(raw)


def classify_autocomplete(raw: RawResponse) -> ManticoreResponse[List[AutocompleteSuccess], ErrorMessage]:
    if raw.is_success:
        return ManticoreResponse.success(_as_list(_AUTOCOMPLETE.validate_json(raw.body)), raw.body)
    return ManticoreResponse.failure(ErrorMessage.model_validate_json(raw.body), raw.body)


def classify_mapping(raw: RawResponse) -> ManticoreResponse[List[MappingSuccess], ErrorMessage]:
    if raw.is_success:
        return ManticoreResponse.success(_as_list(_MAPPING.validate_json(raw.body)), raw.body)
    return ManticoreResponse.failure(ErrorMessage.model_validate_json(raw.body), raw.body)
