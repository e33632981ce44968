"""Response shapes returned by the Manticore HTTP API.

The API has no common envelope: each endpoint family answers with its own
success shape and one of three error shapes (``ErrorResponse``,
``ErrorMessage`` or a bare list of ``BulkError``). Unknown keys are ignored
so that newer server versions keep decoding.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from manticore_client.models.documents import ManticoreDocument

DocumentT = TypeVar("DocumentT", bound=ManticoreDocument)


class ResponseModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


def _id_field() -> Any:
    # The server reports ids as "_id" on most endpoints and "id" on a few
    return Field(default=0, validation_alias=AliasChoices("_id", "id"))


# ----- Errors -----


class ErrorDetails(ResponseModel):
    type: Optional[str] = None
    reason: Optional[str] = None
    table: Optional[str] = None


class ErrorResponse(ResponseModel):
    """Structured error of the modification, update and delete endpoints."""

    error: Optional[Union[ErrorDetails, str]] = None
    status: Optional[int] = None

    @property
    def reason(self) -> str:
        if isinstance(self.error, ErrorDetails):
            return self.error.reason or self.error.type or ""
        return self.error or ""


class ErrorMessage(ResponseModel):
    """Plain error of the search, percolate, autocomplete and mapping endpoints."""

    error: Union[str, ErrorDetails]

    @property
    def message(self) -> str:
        if isinstance(self.error, ErrorDetails):
            return self.error.reason or self.error.type or ""
        return self.error


class BulkError(ResponseModel):
    """One entry of the bare JSON array returned when a bulk request is rejected."""

    total: int = 0
    error: Optional[str] = None
    warning: Optional[str] = None


# ----- Modification / update -----


class ModificationSuccess(ResponseModel):
    table: Optional[str] = None
    id: int = _id_field()
    created: Optional[bool] = None
    result: Optional[str] = None
    status: Optional[int] = None


class UpdateSuccess(ResponseModel):
    table: Optional[str] = None
    id: int = _id_field()
    result: Optional[str] = None
    # Set instead of id/result when updating by query
    updated: Optional[int] = None


# ----- Bulk -----


class BulkDetails(ResponseModel):
    table: Optional[str] = None
    id: int = _id_field()
    created: int = 0
    deleted: int = 0
    updated: int = 0
    result: Optional[str] = None
    status: Optional[int] = None


class BulkItemError(ResponseModel):
    error: Union[ErrorDetails, str, None] = None
    status: Optional[int] = None


class BulkItem(ResponseModel):
    bulk: Optional[BulkDetails] = None
    insert: Optional[BulkItemError] = None
    replace: Optional[BulkItemError] = None
    update: Optional[BulkItemError] = None
    delete: Optional[BulkItemError] = None


class BulkSuccess(ResponseModel):
    items: List[BulkItem]
    current_line: int = 0
    skipped_lines: int = 0
    errors: bool = False
    error: Optional[str] = None


# ----- Search -----


class Hit(ResponseModel):
    id: int = _id_field()
    score: float = Field(default=0.0, alias="_score")
    source: Dict[str, Any] = Field(default_factory=dict, alias="_source")
    highlight: Optional[Dict[str, List[str]]] = None
    knn_dist: Optional[float] = Field(default=None, alias="_knn_dist")


class HitsObject(ResponseModel):
    hits: List[Hit] = Field(default_factory=list)
    total: int = 0
    total_relation: Optional[str] = None


class ProfileQuery(ResponseModel):
    status: Optional[str] = None
    duration: Optional[float] = None
    switches: Optional[int] = None
    percent: Optional[float] = None


class Profile(ResponseModel):
    query: Optional[List[ProfileQuery]] = None


class SearchSuccess(ResponseModel):
    took: int = 0
    timed_out: bool = False
    hits: HitsObject = Field(default_factory=HitsObject)
    profile: Optional[Profile] = None
    scroll: Optional[str] = None
    aggregations: Optional[Dict[str, Any]] = None

    def documents(self, model: Type[DocumentT]) -> List[DocumentT]:
        """Decode every hit's ``_source`` as ``model``."""
        return [model.model_validate(hit.source) for hit in self.hits.hits]


# ----- Delete -----


class DeleteSuccess(ResponseModel):
    """Result of deleting a single document by id."""

    table: Optional[str] = None
    id: int = _id_field()
    found: Optional[bool] = None
    result: Optional[str] = None


class DeleteByQuerySuccess(ResponseModel):
    """Result of deleting by query; reports a count instead of an id."""

    table: Optional[str] = None
    deleted: int = 0


# ----- Percolate -----


class PercolateSuccess(ResponseModel):
    table: Optional[str] = Field(default=None, validation_alias=AliasChoices("table", "_index", "index"))
    type: Optional[str] = Field(default=None, validation_alias=AliasChoices("type", "_type"))
    id: int = _id_field()
    result: Optional[str] = None


# ----- Autocomplete / mapping -----


class AutocompleteColumn(ResponseModel):
    query: Dict[str, Any] = Field(default_factory=dict)


class AutocompleteSuccess(ResponseModel):
    total: int = 0
    error: Optional[str] = None
    warning: Optional[str] = None
    columns: List[AutocompleteColumn] = Field(default_factory=list)
    data: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def suggestions(self) -> List[str]:
        return [str(row["query"]) for row in self.data if "query" in row]


class MappingSuccess(ResponseModel):
    total: int = 0
    error: Optional[str] = None
    warning: Optional[str] = None
