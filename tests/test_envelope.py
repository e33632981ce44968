import pytest

from manticore_client import DeleteResponse, ManticoreResponse, PercolateResponse
from manticore_client.models import (
    DeleteByQuerySuccess,
    ErrorMessage,
    ErrorResponse,
    ModificationSuccess,
    PercolateSuccess,
    SearchSuccess,
)


def test_success_envelope() -> None:
    env = ManticoreResponse.success(ModificationSuccess(table="products", id=3), "{}")

    assert env.is_success is True
    assert env.error is None
    assert env.response.id == 3
    assert env.raw_response == "{}"
    assert env.timestamp.tzinfo is not None


def test_failure_envelope() -> None:
    env = ManticoreResponse.failure(ErrorResponse(error="boom", status=500), "raw")

    assert env.is_success is False
    assert env.response is None
    assert env.error.reason == "boom"


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"response": ModificationSuccess(), "error": ErrorResponse(error="x")},
    ],
)
def test_envelope_requires_exactly_one_variant(kwargs) -> None:
    with pytest.raises(ValueError):
        ManticoreResponse(raw_response="", **kwargs)


def test_delete_envelope_extra_slot_counts_as_variant() -> None:
    env = DeleteResponse.by_query(DeleteByQuerySuccess(table="products", deleted=2), "raw")
    assert env.is_success is True
    assert env.response is None

    with pytest.raises(ValueError):
        DeleteResponse(
            raw_response="",
            query_response=DeleteByQuerySuccess(),
            error=ErrorResponse(error="x"),
        )


def test_percolate_envelope_slots() -> None:
    stored = PercolateResponse.success(PercolateSuccess(id=1, result="created"), "raw")
    matched = PercolateResponse.search_shaped(SearchSuccess(took=1), "raw")
    failed = PercolateResponse.failure(ErrorMessage(error="no table"), "raw")

    assert stored.search_response is None
    assert matched.response is None and matched.is_success
    assert failed.error.message == "no table"


def test_envelope_is_immutable() -> None:
    env = ManticoreResponse.success(ModificationSuccess(), "{}")
    with pytest.raises(AttributeError):
        env.raw_response = "changed"  # type: ignore[misc]


def test_envelope_equality_ignores_timestamp() -> None:
    a = ManticoreResponse.success(ModificationSuccess(id=1), "{}")
    b = ManticoreResponse.success(ModificationSuccess(id=1), "{}")
    assert a == b
