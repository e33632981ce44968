"""Exception hierarchy for the Manticore client.

Two channels report problems to callers. Raised exceptions cover invalid
requests (precondition errors, raised before any network I/O) and failures
to complete the HTTP exchange or to decode its body (chained to the original
exception). Rejections reported by the server in a well-formed body are not
raised: they populate the error slot of the returned envelope.
"""

from __future__ import annotations


class ManticoreError(Exception):
    """Base class for all client exceptions."""


class BaseAddressError(ManticoreError):
    """Raised when the client is constructed without a usable base address."""


class ClientClosedError(ManticoreError):
    """Raised when an operation is attempted on a closed client."""


class OperationError(ManticoreError):
    """Base class for per-operation errors."""

    @property
    def is_precondition(self) -> bool:
        """True when the request was rejected locally, before any I/O."""
        return self.__cause__ is None


class ModificationError(OperationError):
    """Raised for insert/replace failures."""


class InsertError(ModificationError):
    """Raised when inserting a document fails."""


class ReplaceError(ModificationError):
    """Raised when replacing a document fails."""


class BulkRequestError(OperationError):
    """Raised for bulk insert/replace/update/delete failures."""


class UpdateError(OperationError):
    """Raised for update-by-id and update-by-query failures."""


class SearchError(OperationError):
    """Raised when a search request cannot be completed or decoded."""


class DeleteError(OperationError):
    """Raised for delete-by-id and delete-by-query failures."""


class PercolateError(OperationError):
    """Raised for percolate query storage, lookup and matching failures."""


class AutocompleteError(OperationError):
    """Raised when autocomplete suggestions cannot be fetched."""


class MappingError(OperationError):
    """Raised when creating a table from a mapping fails."""


class SqlError(OperationError):
    """Raised when a raw SQL statement cannot be sent."""
