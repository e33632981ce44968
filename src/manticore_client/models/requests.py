"""Request models for the Manticore HTTP API.

All requests are frozen pydantic models. Field names are the snake_case wire
names; the few wire names that are not valid Python identifiers (``bool``,
``in``, ``from``, ``_source``) are declared as aliases. Unset (``None``)
fields are left out of the payload by the encoder.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_snake

from manticore_client.models.documents import ManticoreDocument, document_to_dict

Number = Union[int, float]


class RequestModel(BaseModel):
    """Base for request value objects."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_snake)


# ----- Enumerations -----


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortMode(str, Enum):
    MIN = "min"
    MAX = "max"


class JoinType(str, Enum):
    INNER = "inner"
    LEFT = "left"


class HtmlStripMode(str, Enum):
    NONE = "none"
    STRIP = "strip"
    INDEX = "index"
    RETAIN = "retain"


class SnippetBoundary(str, Enum):
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    ZONE = "zone"


class HighlightEncoder(str, Enum):
    DEFAULT = "default"
    HTML = "html"


class IdfFlag(str, Enum):
    NORMALIZED = "normalized"
    PLAIN = "plain"
    TFIDF_NORMALIZED = "tfidf_normalized"
    TFIDF_UNNORMALIZED = "tfidf_unnormalized"


class JiebaMode(str, Enum):
    ACCURATE = "accurate"
    FULL = "full"
    SEARCH = "search"


class Ranker(str, Enum):
    PROXIMITY_BM25 = "proximity_bm25"
    BM25 = "bm25"
    NONE = "none"
    WORDCOUNT = "wordcount"
    PROXIMITY = "proximity"
    MATCHANY = "matchany"
    FIELDMASK = "fieldmask"
    SPH04 = "sph04"
    EXPR = "expr"
    EXPORT = "export"


class SortMethod(str, Enum):
    PQ = "pq"
    KBUFFER = "kbuffer"


class KeyboardLayout(str, Enum):
    """Keyboard layouts used for fuzzy search and autocomplete."""

    BE = "be"
    BG = "bg"
    BR = "br"
    CH = "ch"
    DE = "de"
    DK = "dk"
    ES = "es"
    FR = "fr"
    UK = "uk"
    GR = "gr"
    IT = "it"
    NO = "no"
    PT = "pt"
    RU = "ru"
    SE = "se"
    UA = "ua"
    US = "us"


class FieldType(str, Enum):
    """Field types accepted by the ``_mapping`` endpoint."""

    AGGREGATE_METRIC = "aggregate_metric"
    BINARY = "binary"
    BOOLEAN = "boolean"
    BYTE = "byte"
    COMPLETION = "completion"
    DATE = "date"
    DATE_NANOS = "date_nanos"
    DATE_RANGE = "date_range"
    DENSE_VECTOR = "dense_vector"
    FLATTENED = "flattened"
    FLAT_OBJECT = "flat_object"
    FLOAT = "float"
    FLOAT_RANGE = "float_range"
    GEO_POINT = "geo_point"
    GEO_SHAPE = "geo_shape"
    HALF_FLOAT = "half_float"
    HISTOGRAM = "histogram"
    INTEGER = "integer"
    INTEGER_RANGE = "integer_range"
    IP = "ip"
    IP_RANGE = "ip_range"
    KEYWORD = "keyword"
    KNN_VECTOR = "knn_vector"
    LONG = "long"
    LONG_RANGE = "long_range"
    MATCH_ONLY_TEXT = "match_only_text"
    OBJECT = "object"
    POINT = "point"
    SCALED_FLOAT = "scaled_float"
    SEARCH_AS_YOU_TYPE = "search_as_you_type"
    SHAPE = "shape"
    SHORT = "short"
    TEXT = "text"
    UNSIGNED_LONG = "unsigned_long"
    VERSION = "version"


# ----- Query DSL -----


class RangeFilter(RequestModel):
    gte: Optional[Number] = None
    gt: Optional[Number] = None
    lte: Optional[Number] = None
    lt: Optional[Number] = None


class GeoLocation(RequestModel):
    lat: float
    lon: float


class GeoDistance(RequestModel):
    location_anchor: GeoLocation
    location_source: Union[str, List[str]]
    distance_type: Optional[str] = None
    distance: str


class BoolQuery(RequestModel):
    must: Optional[List[Query]] = None
    must_not: Optional[List[Query]] = None
    should: Optional[List[Query]] = None


class Query(RequestModel):
    """Full-text and attribute filter query.

    Only one or two keys are normally set at a time, e.g.
    ``Query(match={"title": "cola"})`` or ``Query(bool_=BoolQuery(...))``.
    """

    match: Optional[Dict[str, Any]] = None
    match_all: Optional[Dict[str, Any]] = None
    match_phrase: Optional[Dict[str, Any]] = None
    query_string: Optional[str] = None
    bool_: Optional[BoolQuery] = Field(default=None, alias="bool")
    equals: Optional[Dict[str, Any]] = None
    in_: Optional[Dict[str, List[Any]]] = Field(default=None, alias="in")
    range: Optional[Dict[str, RangeFilter]] = None
    geo_distance: Optional[GeoDistance] = None
    ql: Optional[str] = None


BoolQuery.model_rebuild()


# ----- Single document modifications -----


class ModificationRequest(RequestModel):
    """Insert or replace a single document.

    ``doc`` accepts a plain mapping or a :class:`ManticoreDocument`; typed
    documents are converted to their snake_case mapping on construction.
    An ``id`` of 0 lets the server assign one.
    """

    table: str
    id: int = 0
    cluster: Optional[str] = None
    doc: Optional[Dict[str, Any]] = None

    @field_validator("doc", mode="before")
    @classmethod
    def _document_as_dict(cls, value: Any) -> Any:
        if isinstance(value, ManticoreDocument):
            return document_to_dict(value)
        return value


class UpdateRequest(RequestModel):
    """Update attributes of one document (by ``id``) or many (by ``query``)."""

    table: str
    id: Optional[int] = None
    cluster: Optional[str] = None
    doc: Optional[Dict[str, Any]] = None
    query: Optional[Query] = None

    @field_validator("doc", mode="before")
    @classmethod
    def _document_as_dict(cls, value: Any) -> Any:
        if isinstance(value, ManticoreDocument):
            return document_to_dict(value)
        return value


class DeleteRequest(RequestModel):
    """Delete one document (by ``id``) or many (by ``query``)."""

    table: str
    id: Optional[int] = None
    cluster: Optional[str] = None
    query: Optional[Query] = None


# ----- Bulk -----


class BulkInsertRequest(RequestModel):
    insert: ModificationRequest


class BulkReplaceRequest(RequestModel):
    replace: ModificationRequest


class BulkUpdateRequest(RequestModel):
    update: UpdateRequest


class BulkDeleteRequest(RequestModel):
    delete: DeleteRequest


BulkItemRequest = Union[BulkInsertRequest, BulkReplaceRequest, BulkUpdateRequest, BulkDeleteRequest]


# ----- Search -----


class SourceOptions(RequestModel):
    includes: Optional[List[str]] = None
    excludes: Optional[List[str]] = None


class SearchOptions(RequestModel):
    """Per-query options (the ``options`` object of a search request)."""

    accurate_aggregation: Optional[int] = None
    agent_query_timeout: Optional[int] = None
    boolean_simplify: Optional[int] = None
    comment: Optional[str] = None
    cutoff: Optional[int] = None
    distinct_precision_threshold: Optional[int] = None
    expand_keywords: Optional[int] = None
    field_weights: Optional[Dict[str, int]] = None
    global_idf: Optional[bool] = None
    idf: Optional[IdfFlag] = None
    jieba_mode: Optional[JiebaMode] = None
    index_weights: Optional[Dict[str, int]] = None
    local_df: Optional[int] = None
    low_priority: Optional[int] = None
    max_matches: Optional[int] = None
    max_matches_increase_threshold: Optional[int] = None
    max_query_time: Optional[int] = None
    max_predicted_time: Optional[int] = None
    morphology: Optional[str] = None
    not_terms_only_allowed: Optional[int] = None
    ranker: Optional[Ranker] = None
    rand_seed: Optional[int] = None
    retry_count: Optional[int] = None
    retry_delay: Optional[int] = None
    sort_method: Optional[SortMethod] = None
    threads: Optional[int] = None
    token_filter: Optional[str] = None
    expansion_limit: Optional[int] = None
    fuzzy: Optional[bool] = None
    layouts: Optional[List[KeyboardLayout]] = None
    distance: Optional[int] = None


class HighlightOptions(RequestModel):
    before_match: Optional[str] = None
    after_match: Optional[str] = None
    limit: Optional[int] = None
    limit_words: Optional[int] = None
    limit_snippets: Optional[int] = None
    limits_per_field: Optional[int] = None
    around: Optional[int] = None
    use_boundaries: Optional[int] = None
    weight_order: Optional[int] = None
    force_all_words: Optional[int] = None
    start_snippet_id: Optional[int] = None
    html_strip_mode: Optional[HtmlStripMode] = None
    allow_empty: Optional[int] = None
    snippet_boundary: Optional[SnippetBoundary] = None
    emit_zones: Optional[int] = None
    force_snippets: Optional[int] = None
    snippet_separator: Optional[str] = None
    field_separator: Optional[str] = None
    fields: Optional[Union[List[str], Dict[str, Any]]] = None
    encoder: Optional[HighlightEncoder] = None
    highlight_query: Optional[Query] = None
    pre_tags: Optional[str] = None
    post_tags: Optional[str] = None
    no_match_size: Optional[int] = None
    order: Optional[str] = None
    fragment_size: Optional[int] = None
    number_of_fragments: Optional[int] = None


class JoinSide(RequestModel):
    table: str
    field: str
    type: Optional[str] = None


class JoinOn(RequestModel):
    left: JoinSide
    right: JoinSide
    operator: str = "eq"


class SearchJoin(RequestModel):
    type: JoinType
    table: str
    on: List[JoinOn]
    query: Optional[Query] = None


class KnnOptions(RequestModel):
    field: str
    k: int
    query_vector: Optional[List[float]] = None
    doc_id: Optional[int] = None
    ef: Optional[int] = None
    filter: Optional[Query] = None


class SearchRequest(RequestModel):
    table: str
    query: Optional[Query] = None
    source: Optional[Union[SourceOptions, List[str], str]] = Field(default=None, alias="_source")
    profile: Optional[bool] = None
    aggs: Optional[Dict[str, Any]] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    size: Optional[int] = None
    from_: Optional[int] = Field(default=None, alias="from")
    max_matches: Optional[int] = None
    sort: Optional[List[Union[str, Dict[str, Any]]]] = None
    script_fields: Optional[Dict[str, Any]] = None
    expressions: Optional[Dict[str, str]] = None
    options: Optional[SearchOptions] = None
    highlight: Optional[HighlightOptions] = None
    track_scores: Optional[bool] = None
    join: Optional[List[SearchJoin]] = None
    knn: Optional[KnnOptions] = None


# ----- Percolate -----


class PercolateDocument(RequestModel):
    document: Optional[Dict[str, Any]] = None
    documents: Optional[List[Dict[str, Any]]] = None

    @field_validator("document", mode="before")
    @classmethod
    def _document_as_dict(cls, value: Any) -> Any:
        if isinstance(value, ManticoreDocument):
            return document_to_dict(value)
        return value

    @field_validator("documents", mode="before")
    @classmethod
    def _documents_as_dicts(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [document_to_dict(v) if isinstance(v, ManticoreDocument) else v for v in value]
        return value


class PercolateQuery(RequestModel):
    percolate: PercolateDocument


class PercolateRequest(RequestModel):
    """Match one or more documents against the queries stored in a percolate table."""

    query: Optional[PercolateQuery] = None

    @classmethod
    def for_documents(cls, *documents: Union[Dict[str, Any], ManticoreDocument]) -> "PercolateRequest":
        if len(documents) == 1:
            percolate = PercolateDocument(document=documents[0])
        else:
            percolate = PercolateDocument(documents=list(documents))
        return cls(query=PercolateQuery(percolate=percolate))


class PercolationActionRequest(RequestModel):
    """Store (or overwrite) a query in a percolate table."""

    query: Optional[Query] = None
    filters: Optional[str] = None
    tags: Optional[List[str]] = None


# ----- Autocomplete -----


class AutocompleteOptions(RequestModel):
    layouts: Optional[str] = None
    fuzziness: Optional[int] = None
    prepend: Optional[bool] = None
    append: Optional[bool] = None
    expansion_len: Optional[int] = None


class AutocompleteRequest(RequestModel):
    table: str
    query: str
    options: Optional[AutocompleteOptions] = None


# ----- Mapping -----


class MappingField(RequestModel):
    type: Union[FieldType, str]


class MappingRequest(RequestModel):
    """Table definition in Elasticsearch-style mapping form."""

    properties: Optional[Dict[str, MappingField]] = None

    @classmethod
    def of(cls, **fields: Union[FieldType, str]) -> "MappingRequest":
        return cls(properties={name: MappingField(type=ftype) for name, ftype in fields.items()})
