import json
from typing import Optional

import pytest
from pydantic import ValidationError

from manticore_client.encoding import JSON, NDJSON, encode_json, encode_ndjson, encode_text
from manticore_client.models import (
    BoolQuery,
    BulkDeleteRequest,
    BulkInsertRequest,
    DeleteRequest,
    FieldType,
    ManticoreDocument,
    MappingRequest,
    ModificationRequest,
    PercolateRequest,
    Query,
    RangeFilter,
    SearchRequest,
    SearchSuccess,
)


class Product(ManticoreDocument):
    title: str
    price: float
    itemCount: Optional[int] = None


def decode(payload) -> dict:
    return json.loads(payload.body.decode("utf-8"))


def test_modification_request_round_trip() -> None:
    document = {"title": "coca cola", "price": 20.0, "count": 2}
    payload = encode_json(ModificationRequest(table="products", doc=document))

    body = decode(payload)
    assert payload.content_type == JSON
    assert set(body) == {"table", "id", "doc"}
    assert body["table"] == "products"
    assert body["id"] == 0
    assert body["doc"] == document


def test_typed_document_is_snake_cased_and_unset_fields_dropped() -> None:
    request = ModificationRequest(table="products", id=7, doc=Product(title="burger", price=9.5))
    assert decode(encode_json(request))["doc"] == {"title": "burger", "price": 9.5}

    request = ModificationRequest(table="products", doc=Product(title="burger", price=9.5, itemCount=3))
    assert decode(encode_json(request))["doc"]["item_count"] == 3


def test_requests_are_immutable() -> None:
    request = ModificationRequest(table="products", doc={"title": "x"})
    with pytest.raises(ValidationError):
        request.table = "other"  # type: ignore[misc]


def test_query_aliases_use_wire_names() -> None:
    request = SearchRequest(
        table="products",
        query=Query(
            bool_=BoolQuery(
                must=[Query(match={"title": "cola"})],
                must_not=[Query(in_={"price": [1, 2]})],
            ),
            range={"price": RangeFilter(gte=10, lt=20)},
        ),
        from_=10,
        limit=5,
    )
    body = decode(encode_json(request))

    assert body == {
        "table": "products",
        "query": {
            "bool": {
                "must": [{"match": {"title": "cola"}}],
                "must_not": [{"in": {"price": [1, 2]}}],
            },
            "range": {"price": {"gte": 10, "lt": 20}},
        },
        "from": 10,
        "limit": 5,
    }


def test_search_request_source_alias() -> None:
    body = decode(encode_json(SearchRequest(table="t", source=["title"])))
    assert body == {"table": "t", "_source": ["title"]}


def test_ndjson_is_one_object_per_line() -> None:
    payload = encode_ndjson(
        [
            BulkInsertRequest(insert=ModificationRequest(table="products", id=1, doc={"title": "a"})),
            BulkDeleteRequest(delete=DeleteRequest(table="products", id=2)),
        ]
    )
    lines = payload.body.decode("utf-8").split("\n")

    assert payload.content_type == NDJSON
    assert [json.loads(line) for line in lines] == [
        {"insert": {"table": "products", "id": 1, "doc": {"title": "a"}}},
        {"delete": {"table": "products", "id": 2}},
    ]


def test_percolate_request_for_one_or_many_documents() -> None:
    one = decode(encode_json(PercolateRequest.for_documents({"title": "bag"})))
    assert one == {"query": {"percolate": {"document": {"title": "bag"}}}}

    many = decode(encode_json(PercolateRequest.for_documents({"title": "a"}, Product(title="b", price=1.0))))
    assert many == {"query": {"percolate": {"documents": [{"title": "a"}, {"title": "b", "price": 1.0}]}}}


def test_mapping_request_shortcut() -> None:
    body = decode(encode_json(MappingRequest.of(title=FieldType.TEXT, price="float")))
    assert body == {"properties": {"title": {"type": "text"}, "price": {"type": "float"}}}


def test_text_payload() -> None:
    payload = encode_text("SHOW TABLES")
    assert payload.body == b"SHOW TABLES"
    assert payload.content_type == "text/plain"


def test_search_hits_decode_as_typed_documents() -> None:
    result = SearchSuccess.model_validate(
        {"hits": {"total": 1, "hits": [{"_id": 1, "_source": {"title": "cola", "price": 2.5}}]}}
    )
    assert result.documents(Product) == [Product(title="cola", price=2.5)]
