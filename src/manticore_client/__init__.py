"""Typed client for the Manticore Search HTTP API."""

from .client import AsyncManticoreClient, ManticoreClient
from .config import Settings, configure_logging, load_settings
from .envelope import DeleteResponse, ManticoreResponse, PercolateResponse
from .exceptions import (
    AutocompleteError,
    BaseAddressError,
    BulkRequestError,
    ClientClosedError,
    DeleteError,
    InsertError,
    ManticoreError,
    MappingError,
    ModificationError,
    OperationError,
    PercolateError,
    ReplaceError,
    SearchError,
    SqlError,
    UpdateError,
)
from .transport import HttpxTransport, RawResponse, Transport

__all__ = [
    "AsyncManticoreClient",
    "ManticoreClient",
    "Settings",
    "configure_logging",
    "load_settings",
    "DeleteResponse",
    "ManticoreResponse",
    "PercolateResponse",
    "HttpxTransport",
    "RawResponse",
    "Transport",
    "ManticoreError",
    "BaseAddressError",
    "ClientClosedError",
    "OperationError",
    "ModificationError",
    "InsertError",
    "ReplaceError",
    "BulkRequestError",
    "UpdateError",
    "SearchError",
    "DeleteError",
    "PercolateError",
    "AutocompleteError",
    "MappingError",
    "SqlError",
]
