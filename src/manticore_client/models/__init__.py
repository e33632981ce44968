"""Request and response models for the Manticore HTTP API."""

from .documents import ManticoreDocument, document_to_dict
from .requests import (
    AutocompleteOptions,
    AutocompleteRequest,
    BoolQuery,
    BulkDeleteRequest,
    BulkInsertRequest,
    BulkItemRequest,
    BulkReplaceRequest,
    BulkUpdateRequest,
    DeleteRequest,
    FieldType,
    GeoDistance,
    GeoLocation,
    HighlightEncoder,
    HighlightOptions,
    HtmlStripMode,
    IdfFlag,
    JiebaMode,
    JoinOn,
    JoinSide,
    JoinType,
    KeyboardLayout,
    KnnOptions,
    MappingField,
    MappingRequest,
    ModificationRequest,
    PercolateDocument,
    PercolateQuery,
    PercolateRequest,
    PercolationActionRequest,
    Query,
    RangeFilter,
    Ranker,
    SearchJoin,
    SearchOptions,
    SearchRequest,
    SnippetBoundary,
    SortMethod,
    SortMode,
    SortOrder,
    SourceOptions,
    UpdateRequest,
)
from .responses import (
    AutocompleteColumn,
    AutocompleteSuccess,
    BulkDetails,
    BulkError,
    BulkItem,
    BulkItemError,
    BulkSuccess,
    DeleteByQuerySuccess,
    DeleteSuccess,
    ErrorDetails,
    ErrorMessage,
    ErrorResponse,
    Hit,
    HitsObject,
    MappingSuccess,
    ModificationSuccess,
    PercolateSuccess,
    Profile,
    SearchSuccess,
    UpdateSuccess,
)

__all__ = [
    "ManticoreDocument",
    "document_to_dict",
    # requests
    "AutocompleteOptions",
    "AutocompleteRequest",
    "BoolQuery",
    "BulkDeleteRequest",
    "BulkInsertRequest",
    "BulkItemRequest",
    "BulkReplaceRequest",
    "BulkUpdateRequest",
    "DeleteRequest",
    "FieldType",
    "GeoDistance",
    "GeoLocation",
    "HighlightEncoder",
    "HighlightOptions",
    "HtmlStripMode",
    "IdfFlag",
    "JiebaMode",
    "JoinOn",
    "JoinSide",
    "JoinType",
    "KeyboardLayout",
    "KnnOptions",
    "MappingField",
    "MappingRequest",
    "ModificationRequest",
    "PercolateDocument",
    "PercolateQuery",
    "PercolateRequest",
    "PercolationActionRequest",
    "Query",
    "RangeFilter",
    "Ranker",
    "SearchJoin",
    "SearchOptions",
    "SearchRequest",
    "SnippetBoundary",
    "SortMethod",
    "SortMode",
    "SortOrder",
    "SourceOptions",
    "UpdateRequest",
    # responses
    "AutocompleteColumn",
    "AutocompleteSuccess",
    "BulkDetails",
    "BulkError",
    "BulkItem",
    "BulkItemError",
    "BulkSuccess",
    "DeleteByQuerySuccess",
    "DeleteSuccess",
    "ErrorDetails",
    "ErrorMessage",
    "ErrorResponse",
    "Hit",
    "HitsObject",
    "MappingSuccess",
    "ModificationSuccess",
    "PercolateSuccess",
    "Profile",
    "SearchSuccess",
    "UpdateSuccess",
]
