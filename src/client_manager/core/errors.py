"""
Client Store Errors

Every failure surfaced by ClientStore derives from ClientStoreError and
names the operation that failed plus the underlying driver error, if any.
"""


class ClientStoreError(Exception):
    """Base class for client store failures."""

    def __init__(self, operation: str, message: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        detail = f"{operation} failed: {message}"
        if cause is not None:
            detail = f"{detail} ({cause})"
        super().__init__(detail)


class DatabaseConnectionError(ClientStoreError):
    """Malformed connection string, unreachable server or missing config."""


class SchemaError(ClientStoreError):
    """DDL failure while creating tables."""


class WriteError(ClientStoreError):
    """Insert, update or delete failed, or affected no rows when it must."""


class NotFoundError(ClientStoreError):
    """The row addressed by a mutation does not exist."""


class QueryError(ClientStoreError):
    """A read statement failed."""


class InvalidStateError(ClientStoreError):
    """Operation issued while the store is in the wrong connection state."""


__all__ = [
    "ClientStoreError",
    "DatabaseConnectionError",
    "SchemaError",
    "WriteError",
    "NotFoundError",
    "QueryError",
    "InvalidStateError",
]
