"""Manticore Search HTTP client.

:class:`AsyncManticoreClient` implements every operation as a single
pipeline: validate the request, encode it, send it, classify the response.
:class:`ManticoreClient` exposes the same operations as blocking calls by
driving that pipeline on an event loop owned by the calling thread.

Errors reach the caller through two channels:

* raised :class:`~manticore_client.exceptions.OperationError` subclasses for
  invalid requests (no ``__cause__``) and for transport or decoding failures
  (original exception chained as ``__cause__``);
* the error slot of the returned envelope when the server rejected the call.

Task cancellation is never wrapped and no envelope is built for a cancelled
call.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from manticore_client import classifier
from manticore_client.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings, load_settings
from manticore_client.encoding import NDJSON, Payload, encode_json, encode_ndjson, encode_text
from manticore_client.envelope import DeleteResponse, ManticoreResponse, PercolateResponse
from manticore_client.exceptions import (
    AutocompleteError,
    BaseAddressError,
    BulkRequestError,
    ClientClosedError,
    DeleteError,
    InsertError,
    MappingError,
    ModificationError,
    OperationError,
    PercolateError,
    ReplaceError,
    SearchError,
    SqlError,
    UpdateError,
)
from manticore_client.models.requests import (
    AutocompleteRequest,
    BulkDeleteRequest,
    BulkInsertRequest,
    BulkItemRequest,
    BulkReplaceRequest,
    BulkUpdateRequest,
    DeleteRequest,
    MappingRequest,
    ModificationRequest,
    PercolateRequest,
    PercolationActionRequest,
    SearchRequest,
    UpdateRequest,
)
from manticore_client.models.responses import (
    AutocompleteSuccess,
    BulkError,
    BulkSuccess,
    ErrorMessage,
    ErrorResponse,
    MappingSuccess,
    ModificationSuccess,
    SearchSuccess,
    UpdateSuccess,
)
from manticore_client.transport import HttpxTransport, RawResponse, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

ModificationResult = ManticoreResponse[ModificationSuccess, ErrorResponse]
UpdateResult = ManticoreResponse[UpdateSuccess, ErrorResponse]
BulkResult = ManticoreResponse[BulkSuccess, List[BulkError]]
SearchResult = ManticoreResponse[SearchSuccess, ErrorMessage]
AutocompleteResult = ManticoreResponse[List[AutocompleteSuccess], ErrorMessage]
MappingResult = ManticoreResponse[List[MappingSuccess], ErrorMessage]

ARGUMENT_NULL = "Argument '{}' must not be None"
DOCUMENT_EMPTY = "Document must contain at least one field"
SQL_NULL = "SQL query must not be None"


def _require(condition: bool, error: Type[OperationError], message: str) -> None:
    if not condition:
        raise error(message)


def _raw_body(raw: RawResponse) -> str:
    return raw.body


class AsyncManticoreClient:
    """Asynchronous client for the Manticore Search HTTP API.

    Parameters
    ----------
    base_url:
        Address of the server, e.g. ``http://localhost:9308``. Must not be
        empty unless ``http_client`` or ``transport`` is given.
    timeout:
        Request timeout in seconds (default 30).
    verify_ssl:
        Whether to verify TLS certificates.
    http_client:
        A caller-managed ``httpx.AsyncClient`` to send through instead of
        creating one. When it has no ``base_url`` of its own, endpoints are
        resolved against ``base_url`` without modifying the client.
    close_http_client:
        Whether :meth:`aclose` also closes ``http_client``.
    transport:
        Any object implementing :class:`~manticore_client.transport.Transport`;
        takes precedence over the other connection arguments.
    """

    def __init__(
        self,
        base_url: Optional[str] = DEFAULT_BASE_URL,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        http_client: Optional[httpx.AsyncClient] = None,
        close_http_client: bool = False,
        transport: Optional[Transport] = None,
    ) -> None:
        if transport is not None:
            self._transport: Transport = transport
        elif http_client is not None:
            prefix = None if str(http_client.base_url) else (base_url or DEFAULT_BASE_URL)
            self._transport = HttpxTransport(http_client, owns_client=close_http_client, base_url=prefix)
        else:
            if not base_url:
                raise BaseAddressError("Base address must not be empty")
            self._transport = HttpxTransport.create(
                base_url, timeout=timeout or DEFAULT_TIMEOUT, verify_ssl=verify_ssl
            )
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AsyncManticoreClient":
        settings = settings or load_settings()
        return cls(settings.base_url, timeout=settings.timeout, verify_ssl=settings.verify_ssl)

    # ----- Lifecycle -----

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Release the connection pool. Must not be called while calls are in flight."""
        if self._closed:
            return
        self._closed = True
        await self._transport.aclose()

    async def __aenter__(self) -> "AsyncManticoreClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ----- Pipeline -----

    async def _execute(
        self,
        error: Type[OperationError],
        message: str,
        endpoint: str,
        method: str,
        classify: Callable[[RawResponse], T],
        encode: Optional[Callable[[], Payload]] = None,
    ) -> T:
        if self._closed:
            raise ClientClosedError("Client is closed")
        try:
            payload = encode() if encode is not None else None
            raw = await self._transport.send(
                endpoint,
                method,
                body=payload.body if payload is not None else None,
                content_type=payload.content_type if payload is not None else None,
            )
            return classify(raw)
        except Exception as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc)
            raise error(message) from exc

    # ----- Single document modifications -----

    async def insert(self, request: ModificationRequest) -> ModificationResult:
        """Insert a document into ``request.table``."""
        return await self._modify(request, "/insert", InsertError)

    async def replace(self, request: ModificationRequest) -> ModificationResult:
        """Replace the document with ``request.id`` (inserting it if absent)."""
        return await self._modify(request, "/replace", ReplaceError)

    async def _modify(
        self, request: ModificationRequest, endpoint: str, error: Type[ModificationError]
    ) -> ModificationResult:
        _require(request is not None, error, ARGUMENT_NULL.format("request"))
        _require(request.doc is not None, error, ARGUMENT_NULL.format("doc"))
        _require(len(request.doc) > 0, error, DOCUMENT_EMPTY)
        action = "inserting" if endpoint == "/insert" else "replacing"
        return await self._execute(
            error,
            f"An error occurred while {action} a document",
            endpoint,
            "POST",
            classifier.classify_modification,
            lambda: encode_json(request, content_type=NDJSON),
        )

    async def update(self, request: UpdateRequest) -> UpdateResult:
        """Update attributes of a document by id, or of every document matching ``request.query``."""
        _require(request is not None, UpdateError, ARGUMENT_NULL.format("request"))
        _require(request.doc is not None, UpdateError, ARGUMENT_NULL.format("doc"))
        return await self._execute(
            UpdateError,
            "An error occurred while updating documents",
            "/update",
            "POST",
            classifier.classify_update,
            lambda: encode_json(request),
        )

    async def delete(self, request: DeleteRequest) -> DeleteResponse:
        """Delete a document by id, or every document matching ``request.query``."""
        _require(request is not None, DeleteError, ARGUMENT_NULL.format("request"))
        return await self._execute(
            DeleteError,
            "An error occurred while deleting documents",
            "/delete",
            "POST",
            classifier.classify_delete,
            lambda: encode_json(request),
        )

    # ----- Bulk -----

    async def bulk(self, requests: Iterable[BulkItemRequest]) -> BulkResult:
        """Send a batch of insert/replace/update/delete lines to ``/bulk``.

        An empty batch is sent as-is; the server's answer decides the outcome.
        """
        _require(requests is not None, BulkRequestError, ARGUMENT_NULL.format("requests"))
        return await self._execute(
            BulkRequestError,
            "An error occurred while executing the bulk request",
            "/bulk",
            "POST",
            classifier.classify_bulk,
            lambda: encode_ndjson(requests),
        )

    async def bulk_insert(self, requests: Iterable[BulkInsertRequest]) -> BulkResult:
        return await self.bulk(requests)

    async def bulk_replace(self, requests: Iterable[BulkReplaceRequest]) -> BulkResult:
        return await self.bulk(requests)

    async def bulk_update(self, requests: Iterable[BulkUpdateRequest]) -> BulkResult:
        return await self.bulk(requests)

    async def bulk_delete(self, requests: Iterable[BulkDeleteRequest]) -> BulkResult:
        return await self.bulk(requests)

    # ----- Search -----

    async def search(self, request: SearchRequest) -> SearchResult:
        _require(request is not None, SearchError, ARGUMENT_NULL.format("request"))
        return await self._execute(
            SearchError,
            "An error occurred while searching",
            "/search",
            "POST",
            classifier.classify_search,
            lambda: encode_json(request),
        )

    async def search_raw(self, request: SearchRequest) -> str:
        """Run a search and return the response body without decoding it."""
        _require(request is not None, SearchError, ARGUMENT_NULL.format("request"))
        return await self._execute(
            SearchError,
            "An error occurred while searching",
            "/search",
            "POST",
            _raw_body,
            lambda: encode_json(request),
        )

    # ----- Percolate -----

    async def index_percolate(
        self, request: PercolationActionRequest, index: str, id: Optional[int] = None
    ) -> PercolateResponse:
        """Store a query in percolate table ``index``, under ``id`` when given."""
        _require(request is not None, PercolateError, ARGUMENT_NULL.format("request"))
        endpoint = f"/pq/{index}/doc/" if id is None else f"/pq/{index}/doc/{id}"
        return await self._percolate(request, endpoint, "PUT")

    async def percolate(self, request: PercolateRequest, index: str) -> PercolateResponse:
        """Find the stored queries of ``index`` that match the request's documents."""
        _require(request is not None, PercolateError, ARGUMENT_NULL.format("request"))
        _require(request.query is not None, PercolateError, ARGUMENT_NULL.format("query"))
        return await self._percolate(request, f"/pq/{index}/search", "POST")

    async def update_percolate(
        self, request: PercolationActionRequest, index: str, id: int
    ) -> PercolateResponse:
        """Overwrite stored query ``id`` and refresh the table."""
        _require(request is not None, PercolateError, ARGUMENT_NULL.format("request"))
        return await self._percolate(request, f"/pq/{index}/doc/{id}?refresh=1", "PUT")

    async def _percolate(self, request: BaseModel, endpoint: str, method: str) -> PercolateResponse:
        return await self._execute(
            PercolateError,
            "An error occurred while executing the percolate request",
            endpoint,
            method,
            classifier.classify_percolate,
            lambda: encode_json(request),
        )

    async def get_percolate(self, index: str, id: int) -> SearchResult:
        """Fetch stored query ``id`` from percolate table ``index``."""
        return await self._execute(
            PercolateError,
            "An error occurred while executing the percolate request",
            f"/pq/{index}/doc/{id}",
            "GET",
            classifier.classify_get_percolate,
        )

    # ----- Autocomplete / mapping / SQL -----

    async def autocomplete(self, request: AutocompleteRequest) -> AutocompleteResult:
        _require(request is not None, AutocompleteError, ARGUMENT_NULL.format("request"))
        return await self._execute(
            AutocompleteError,
            "An error occurred while fetching autocomplete suggestions",
            "/autocomplete",
            "POST",
            classifier.classify_autocomplete,
            lambda: encode_json(request),
        )

    async def use_mapping(self, request: MappingRequest, index: str) -> MappingResult:
        """Create table ``index`` from an Elasticsearch-style mapping."""
        _require(request is not None, MappingError, ARGUMENT_NULL.format("request"))
        _require(request.properties is not None, MappingError, ARGUMENT_NULL.format("properties"))
        return await self._execute(
            MappingError,
            "An error occurred while applying the mapping",
            f"/{index}/_mapping",
            "POST",
            classifier.classify_mapping,
            lambda: encode_json(request),
        )

    async def sql(self, query: str) -> str:
        """Run a raw SQL statement through ``/cli`` and return the body unchanged."""
        _require(query is not None, SqlError, SQL_NULL)
        return await self._execute(
            SqlError,
            "An error occurred while executing the SQL query",
            "/cli",
            "POST",
            _raw_body,
            lambda: encode_text(query),
        )


@dataclass(slots=True)
class _LoopBinding:
    """Event loop and async client serving one thread of a :class:`ManticoreClient`."""

    loop: asyncio.AbstractEventLoop
    client: AsyncManticoreClient
    owns_transport: bool


class ManticoreClient:
    """Blocking counterpart of :class:`AsyncManticoreClient`.

    Each call runs the asynchronous pipeline to completion on the calling
    thread, so results and errors are identical. Every thread gets its own
    event loop and :class:`AsyncManticoreClient`, which lets several threads
    share one instance. A caller-supplied ``http_client`` or ``transport`` is
    shared by all threads and closed once. Do not call it from inside a
    running event loop. Accepts the same arguments as
    :class:`AsyncManticoreClient`.
    """

    def __init__(self, base_url: Optional[str] = DEFAULT_BASE_URL, **kwargs: Any) -> None:
        self._base_url = base_url
        self._kwargs = kwargs
        self._shares_transport = (
            kwargs.get("transport") is not None or kwargs.get("http_client") is not None
        )
        self._local = threading.local()
        self._lock = threading.Lock()
        self._bindings: List[_LoopBinding] = []
        self._closed = False
        # Bound eagerly so invalid arguments fail at construction
        self._bind(owns_transport=True)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ManticoreClient":
        settings = settings or load_settings()
        return cls(settings.base_url, timeout=settings.timeout, verify_ssl=settings.verify_ssl)

    def _bind(self, owns_transport: bool) -> _LoopBinding:
        with self._lock:
            if self._closed:
                raise ClientClosedError("Client is closed")
            client = AsyncManticoreClient(self._base_url, **self._kwargs)
            binding = _LoopBinding(asyncio.new_event_loop(), client, owns_transport)
            self._bindings.append(binding)
        self._local.binding = binding
        return binding

    def _run(self, operation: str, *args: Any) -> Any:
        if self._closed:
            raise ClientClosedError("Client is closed")
        binding: Optional[_LoopBinding] = getattr(self._local, "binding", None)
        if binding is None:
            binding = self._bind(owns_transport=not self._shares_transport)
        return binding.loop.run_until_complete(getattr(binding.client, operation)(*args))

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close every thread's client and loop. Must not be called while calls are in flight."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            bindings, self._bindings = self._bindings, []
        for binding in bindings:
            try:
                if binding.owns_transport:
                    binding.loop.run_until_complete(binding.client.aclose())
            finally:
                binding.loop.close()

    def __enter__(self) -> "ManticoreClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def insert(self, request: ModificationRequest) -> ModificationResult:
        return self._run("insert", request)

    def replace(self, request: ModificationRequest) -> ModificationResult:
        return self._run("replace", request)

    def update(self, request: UpdateRequest) -> UpdateResult:
        return self._run("update", request)

    def delete(self, request: DeleteRequest) -> DeleteResponse:
        return self._run("delete", request)

    def bulk(self, requests: Iterable[BulkItemRequest]) -> BulkResult:
        return self._run("bulk", requests)

    def bulk_insert(self, requests: Iterable[BulkInsertRequest]) -> BulkResult:
        return self._run("bulk_insert", requests)

    def bulk_replace(self, requests: Iterable[BulkReplaceRequest]) -> BulkResult:
        return self._run("bulk_replace", requests)

    def bulk_update(self, requests: Iterable[BulkUpdateRequest]) -> BulkResult:
        return self._run("bulk_update", requests)

    def bulk_delete(self, requests: Iterable[BulkDeleteRequest]) -> BulkResult:
        return self._run("bulk_delete", requests)

    def search(self, request: SearchRequest) -> SearchResult:
        return self._run("search", request)

    def search_raw(self, request: SearchRequest) -> str:
        return self._run("search_raw", request)

    def index_percolate(
        self, request: PercolationActionRequest, index: str, id: Optional[int] = None
    ) -> PercolateResponse:
        return self._run("index_percolate", request, index, id)

    def percolate(self, request: PercolateRequest, index: str) -> PercolateResponse:
        return self._run("percolate", request, index)

    def update_percolate(self, request: PercolationActionRequest, index: str, id: int) -> PercolateResponse:
        return self._run("update_percolate", request, index, id)

    def get_percolate(self, index: str, id: int) -> SearchResult:
        return self._run("get_percolate", index, id)

    def autocomplete(self, request: AutocompleteRequest) -> AutocompleteResult:
        return self._run("autocomplete", request)

    def use_mapping(self, request: MappingRequest, index: str) -> MappingResult:
        return self._run("use_mapping", request, index)

    def sql(self, query: str) -> str:
        return self._run("sql", query)
