import json

import pytest
from pydantic import TypeAdapter, ValidationError

from manticore_client.classifier import (
    classify_autocomplete,
    classify_bulk,
    classify_delete,
    classify_get_percolate,
    classify_mapping,
    classify_modification,
    classify_percolate,
    classify_search,
    classify_update,
    try_decode,
)
from manticore_client.envelope import DeleteResponse, PercolateResponse
from manticore_client.models.responses import (
    BulkError,
    BulkSuccess,
    DeleteByQuerySuccess,
    DeleteSuccess,
    ErrorDetails,
    ErrorMessage,
    ErrorResponse,
    ModificationSuccess,
    PercolateSuccess,
    SearchSuccess,
)
from manticore_client.transport import RawResponse


def raw(payload, ok: bool = True) -> RawResponse:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return RawResponse(body=body, is_success=ok, status_code=200 if ok else 400)


TABLE_ABSENT = {
    "error": {"type": "action_request_validation_exception", "reason": "table 'nope' absent", "table": "nope"},
    "status": 409,
}

SEARCH_BODY = {
    "took": 0,
    "timed_out": False,
    "hits": {
        "total": 2,
        "total_relation": "eq",
        "hits": [
            {"_id": 1, "_score": 1, "_source": {"title": "coca cola", "price": 20.0}},
            {"_id": "2", "_score": 1, "_source": {"title": "pepsi", "price": 19.5}},
        ],
    },
}


# ---------- Modification ----------


def test_modification_success_populates_every_field() -> None:
    body = {"table": "products", "_id": 1657860156022587406, "created": True, "result": "created", "status": 201}
    result = classify_modification(raw(body))

    assert result.is_success is True
    assert result.error is None
    assert result.response == ModificationSuccess(
        table="products", id=1657860156022587406, created=True, result="created", status=201
    )
    assert result.raw_response == json.dumps(body)


@pytest.mark.parametrize("ok", [True, False])
def test_modification_error_key_means_failure_regardless_of_status(ok: bool) -> None:
    result = classify_modification(raw(TABLE_ABSENT, ok=ok))

    assert result.is_success is False
    assert result.response is None
    assert isinstance(result.error, ErrorResponse)
    assert result.error.status == 409
    assert isinstance(result.error.error, ErrorDetails)
    assert result.error.error.table == "nope"
    assert result.error.reason == "table 'nope' absent"


def test_modification_accepts_plain_string_error() -> None:
    result = classify_modification(raw({"error": "something broke"}))
    assert result.is_success is False
    assert result.error.reason == "something broke"


@pytest.mark.parametrize("classify", [classify_modification, classify_delete])
def test_error_key_without_value_is_still_a_failure(classify) -> None:
    result = classify(raw('{"error": null}'))
    assert result.is_success is False
    assert result.error == ErrorResponse(error=None)
    assert result.error.reason == ""


def test_modification_rejects_non_object_body() -> None:
    with pytest.raises(ValueError):
        classify_modification(raw("[1, 2]"))


def test_modification_rejects_malformed_json() -> None:
    with pytest.raises(ValueError):
        classify_modification(raw("{not json"))


# ---------- Update ----------


def test_update_trusts_status_flag() -> None:
    ok = classify_update(raw({"table": "products", "_id": 1, "result": "updated"}))
    assert ok.is_success is True
    assert ok.response.id == 1
    assert ok.response.result == "updated"

    failed = classify_update(raw(TABLE_ABSENT, ok=False))
    assert failed.is_success is False
    assert failed.error.error.type == "action_request_validation_exception"


def test_update_by_query_reports_count() -> None:
    result = classify_update(raw({"table": "products", "updated": 3}))
    assert result.is_success is True
    assert result.response.updated == 3


# ---------- Bulk ----------


def test_bulk_success_shape() -> None:
    body = {
        "items": [
            {"bulk": {"table": "products", "_id": 1, "created": 2, "deleted": 0, "updated": 0, "result": "created", "status": 201}}
        ],
        "current_line": 2,
        "skipped_lines": 0,
        "errors": False,
        "error": "",
    }
    result = classify_bulk(raw(body))

    assert result.is_success is True
    assert isinstance(result.response, BulkSuccess)
    assert result.response.current_line == 2
    assert result.response.items[0].bulk.created == 2
    assert result.response.items[0].bulk.result == "created"


def test_bulk_error_list_is_the_fallback() -> None:
    body = [{"total": 0, "error": "table 'nope' absent", "warning": ""}]
    result = classify_bulk(raw(body, ok=False))

    assert result.is_success is False
    assert result.response is None
    assert result.error == [BulkError(total=0, error="table 'nope' absent", warning="")]


def test_bulk_fallback_is_triggered_by_success_decode_mismatch() -> None:
    body = json.dumps([{"total": 0, "error": "bad", "warning": ""}])
    decoded = try_decode(TypeAdapter(BulkSuccess), body)
    assert decoded.ok is False
    assert isinstance(decoded.problem, ValidationError)


def test_bulk_neither_shape_raises() -> None:
    with pytest.raises(ValidationError):
        classify_bulk(raw('"just a string"'))


# ---------- Search ----------


def test_search_success_and_error() -> None:
    ok = classify_search(raw(SEARCH_BODY))
    assert ok.is_success is True
    assert ok.response.hits.total == 2
    assert [h.id for h in ok.response.hits.hits] == [1, 2]
    assert ok.response.hits.hits[0].source["title"] == "coca cola"

    failed = classify_search(raw({"error": "unknown table 'nope'"}, ok=False))
    assert failed.is_success is False
    assert failed.error == ErrorMessage(error="unknown table 'nope'")
    assert failed.error.message == "unknown table 'nope'"


# ---------- Delete ----------


def test_delete_three_way_branch() -> None:
    single = classify_delete(raw({"table": "products", "_id": 5, "found": True, "result": "deleted"}))
    assert isinstance(single, DeleteResponse)
    assert single.is_success is True
    assert single.response == DeleteSuccess(table="products", id=5, found=True, result="deleted")
    assert single.query_response is None
    assert single.error is None

    by_query = classify_delete(raw({"table": "products", "deleted": 3}))
    assert by_query.is_success is True
    assert by_query.query_response == DeleteByQuerySuccess(table="products", deleted=3)
    assert by_query.response is None

    failed = classify_delete(raw(TABLE_ABSENT))
    assert failed.is_success is False
    assert isinstance(failed.error, ErrorResponse)
    assert failed.response is None
    assert failed.query_response is None


def test_delete_error_wins_over_deleted() -> None:
    result = classify_delete(raw({"error": "boom", "deleted": 0}))
    assert result.is_success is False


# ---------- Percolate ----------


def test_percolate_stored_query_result() -> None:
    result = classify_percolate(raw({"table": "pq", "type": "doc", "_id": 5, "result": "created"}))
    assert isinstance(result, PercolateResponse)
    assert result.is_success is True
    assert result.response == PercolateSuccess(table="pq", type="doc", id=5, result="created")
    assert result.search_response is None


def test_percolate_search_shaped_result_uses_its_own_slot() -> None:
    result = classify_percolate(raw(SEARCH_BODY))
    assert result.is_success is True
    assert result.response is None
    assert isinstance(result.search_response, SearchSuccess)
    assert result.search_response.hits.total == 2


def test_percolate_result_wins_over_hits() -> None:
    body = dict(SEARCH_BODY, result="created")
    result = classify_percolate(raw(body))
    assert result.response is not None
    assert result.search_response is None


def test_percolate_error_message() -> None:
    result = classify_percolate(raw({"error": "unknown table 'pq'"}, ok=False))
    assert result.is_success is False
    assert result.error.message == "unknown table 'pq'"
    assert result.response is None and result.search_response is None


def test_get_percolate_follows_status() -> None:
    assert classify_get_percolate(raw(SEARCH_BODY)).is_success is True
    assert classify_get_percolate(raw({"error": "no such table"}, ok=False)).is_success is False


# ---------- Autocomplete / mapping ----------


def test_autocomplete_list_and_error() -> None:
    body = [
        {
            "total": 2,
            "error": "",
            "warning": "",
            "columns": [{"query": {"type": "string"}}],
            "data": [{"query": "hello"}, {"query": "help"}],
        }
    ]
    ok = classify_autocomplete(raw(body))
    assert ok.is_success is True
    assert ok.response[0].total == 2
    assert ok.response[0].suggestions == ["hello", "help"]
    assert ok.response[0].columns[0].query == {"type": "string"}

    failed = classify_autocomplete(raw({"error": "table 'x' absent"}, ok=False))
    assert failed.is_success is False


def test_mapping_accepts_list_or_single_object() -> None:
    as_list = classify_mapping(raw([{"total": 0, "error": "", "warning": ""}]))
    as_object = classify_mapping(raw({"total": 0, "error": "", "warning": ""}))
    assert as_list.is_success and as_object.is_success
    assert as_list.response == as_object.response

    failed = classify_mapping(raw({"error": "table 'x' already exists"}, ok=False))
    assert failed.is_success is False


# ---------- Idempotence ----------


@pytest.mark.parametrize(
    "classify,payload",
    [
        (classify_modification, {"table": "t", "_id": 1, "created": True, "result": "created", "status": 201}),
        (classify_delete, {"table": "t", "deleted": 2}),
        (classify_percolate, SEARCH_BODY),
        (classify_bulk, [{"total": 0, "error": "x", "warning": ""}]),
    ],
)
def test_classifying_twice_gives_equal_independent_envelopes(classify, payload) -> None:
    first = classify(raw(payload))
    second = classify(raw(payload))

    assert first is not second
    assert first.is_success == second.is_success
    assert first == second
    assert first.raw_response == second.raw_response
