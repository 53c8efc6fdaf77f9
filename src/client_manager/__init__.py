"""Client and phone record manager."""

from client_manager.core.errors import (
    ClientStoreError,
    DatabaseConnectionError,
    InvalidStateError,
    NotFoundError,
    QueryError,
    SchemaError,
    WriteError,
)
from client_manager.db.client_store import ClientStore
from client_manager.db.connection import DatabaseConfig
from client_manager.models import NOT_FOUND, ClientRow, SearchResult

__all__ = [
    "ClientStore",
    "DatabaseConfig",
    "ClientRow",
    "SearchResult",
    "NOT_FOUND",
    "ClientStoreError",
    "DatabaseConnectionError",
    "SchemaError",
    "WriteError",
    "NotFoundError",
    "QueryError",
    "InvalidStateError",
]
