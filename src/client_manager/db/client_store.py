"""
Client Store

CRUD operations on clients and their phones over one owned connection.
Each operation runs in its own transaction: it either commits entirely or
is rolled back and surfaces a typed ClientStoreError to the caller.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from client_manager.core.errors import (
    ClientStoreError,
    DatabaseConnectionError,
    InvalidStateError,
    NotFoundError,
    QueryError,
    SchemaError,
    WriteError,
)
from client_manager.db.connection import (
    DatabaseConfig,
    get_connection,
    is_postgres_mode,
)
from client_manager.db.schema import (
    contains_pattern,
    schema_statements,
    search_sql,
    sql_placeholder,
)
from client_manager.models import ClientRow, SearchResult

logger = logging.getLogger(__name__)

DRIVER_ERRORS = (psycopg2.Error, sqlite3.Error)


class ClientStore:
    """
    Client and phone storage.

    Owns a single database connection between connect() and disconnect().
    Not safe for concurrent use; callers serialize access or use one store
    per thread.
    """

    def __init__(
        self,
        database_url: str | DatabaseConfig | None = None,
        db_path: str | None = None,
    ):
        self.database_url = database_url
        self.db_path = db_path
        self._conn: Any = None
        self._postgres = False

    def __enter__(self) -> "ClientStore":
        if not self.is_connected:
            self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def backend(self) -> str:
        return "postgres" if self._postgres else "sqlite"

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(
        self,
        database_url: str | DatabaseConfig | None = None,
        db_path: str | None = None,
    ) -> "ClientStore":
        """
        Open the store's connection.

        Args:
            database_url: PostgreSQL connection string, e.g.
                "dbname=clients user=app password=secret hostaddr=127.0.0.1 port=5432",
                or a DatabaseConfig
            db_path: SQLite file used when no PostgreSQL URL is available

        Raises:
            InvalidStateError: If already connected
            DatabaseConnectionError: Malformed string or unreachable server
        """
        if self._conn is not None:
            raise InvalidStateError("connect", "store is already connected")

        if database_url is not None:
            self.database_url = database_url
        if db_path is not None:
            self.db_path = db_path

        postgres = is_postgres_mode(self.database_url)
        try:
            conn = get_connection(self.database_url, self.db_path)
        except (RuntimeError, OSError, ValueError, *DRIVER_ERRORS) as e:
            logger.error(f"Database connection failed: {e}")
            raise DatabaseConnectionError(
                "connect", "could not open database connection", e
            ) from e

        self._conn = conn
        self._postgres = postgres
        logger.info(f"Connected to {self.backend} database")
        return self

    def disconnect(self) -> None:
        """Close the connection. No-op when already disconnected."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except DRIVER_ERRORS as e:
            logger.warning(f"Error while closing connection: {e}")
        logger.info("Disconnected from database")

    def _require_connection(self, operation: str) -> Any:
        if self._conn is None:
            raise InvalidStateError(operation, "store is not connected")
        return self._conn

    def _rollback(self, operation: str) -> None:
        try:
            self._conn.rollback()
        except DRIVER_ERRORS as e:
            logger.warning(f"{operation}: rollback failed: {e}")

    @contextmanager
    def _transaction(
        self, operation: str, error_cls: type[ClientStoreError]
    ) -> Iterator[Any]:
        """Yield a cursor; commit on success, roll back and raise on failure."""
        conn = self._require_connection(operation)
        cursor = None
        try:
            cursor = conn.cursor()
            if not self._postgres:
                # psycopg2 opens transactions implicitly; SQLite runs in
                # autocommit mode and needs an explicit BEGIN, DDL included.
                cursor.execute("BEGIN")
            yield cursor
            conn.commit()
        except DRIVER_ERRORS as e:
            self._rollback(operation)
            logger.error(f"{operation} failed: {e}")
            raise error_cls(operation, "database error", e) from e
        except ClientStoreError as e:
            self._rollback(operation)
            logger.error(str(e))
            raise
        finally:
            if cursor is not None:
                cursor.close()

    def _insert(self, cursor: Any, sql: str, params: tuple) -> int:
        """Run an INSERT and return the generated id."""
        if self._postgres:
            cursor.execute(f"{sql} RETURNING id", params)
            return cursor.fetchone()[0]
        cursor.execute(sql, params)
        return cursor.lastrowid

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """Create clients and phones tables if they do not exist."""
        with self._transaction("ensure_schema", SchemaError) as cur:
            for stmt in schema_statements(self._postgres):
                cur.execute(stmt)
        logger.info("Database schema ensured")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_client(self, first_name: str, last_name: str, email: str) -> int:
        """
        Insert a client.

        Returns:
            Generated client id
        """
        ph = sql_placeholder(self._postgres)
        with self._transaction("add_client", WriteError) as cur:
            client_id = self._insert(
                cur,
                f"INSERT INTO clients (first_name, last_name, email) VALUES ({ph}, {ph}, {ph})",
                (first_name, last_name, email),
            )
        logger.info(f"Client added: id={client_id}")
        return client_id

    def add_phone(self, client_id: int, phone_number: str) -> int:
        """
        Attach a phone number to an existing client.

        Returns:
            Generated phone id

        Raises:
            WriteError: Unknown client id (foreign key violation)
        """
        ph = sql_placeholder(self._postgres)
        with self._transaction("add_phone", WriteError) as cur:
            phone_id = self._insert(
                cur,
                f"INSERT INTO phones (client_id, phone_number) VALUES ({ph}, {ph})",
                (client_id, phone_number),
            )
        logger.info(f"Phone added: client_id={client_id} phone_id={phone_id}")
        return phone_id

    def update_client(
        self, client_id: int, first_name: str, last_name: str, email: str
    ) -> None:
        """Overwrite a client's name and email. Unknown ids raise WriteError."""
        ph = sql_placeholder(self._postgres)
        with self._transaction("update_client", WriteError) as cur:
            cur.execute(
                f"UPDATE clients SET first_name = {ph}, last_name = {ph}, email = {ph} WHERE id = {ph}",
                (first_name, last_name, email, client_id),
            )
            if cur.rowcount == 0:
                raise WriteError("update_client", f"client {client_id} does not exist")
        logger.info(f"Client updated: id={client_id}")

    def delete_phone(self, client_id: int, phone_number: str) -> None:
        """
        Remove one phone from a client.

        The number must match exactly; no pattern matching is applied.

        Raises:
            NotFoundError: The client has no such phone
        """
        ph = sql_placeholder(self._postgres)
        with self._transaction("delete_phone", WriteError) as cur:
            cur.execute(
                f"SELECT id FROM phones WHERE client_id = {ph} AND phone_number = {ph}",
                (client_id, phone_number),
            )
            row = cur.fetchone()
            if row is None:
                raise NotFoundError(
                    "delete_phone",
                    f"phone {phone_number!r} not found for client {client_id}",
                )
            cur.execute(f"DELETE FROM phones WHERE id = {ph}", (row[0],))
        logger.info(f"Phone deleted: client_id={client_id} phone_id={row[0]}")

    def delete_client(self, client_id: int) -> int:
        """
        Delete a client and all of its phones.

        Phones are removed explicitly before the client even though the
        foreign key cascades.

        Returns:
            Number of client rows deleted (0 or 1)
        """
        ph = sql_placeholder(self._postgres)
        with self._transaction("delete_client", WriteError) as cur:
            cur.execute(f"DELETE FROM phones WHERE client_id = {ph}", (client_id,))
            cur.execute(f"DELETE FROM clients WHERE id = {ph}", (client_id,))
            deleted = cur.rowcount
        if deleted:
            logger.info(f"Client deleted: id={client_id}")
        else:
            logger.warning(f"delete_client: client {client_id} did not exist")
        return deleted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_clients(self, search_query: str) -> SearchResult:
        """
        Search clients by name, email or phone number.

        Case-insensitive substring match; the query is always bound as a
        parameter. Rows come back ordered by client id, then phone id, with
        one row per phone (phone is None for clients without phones).

        Returns:
            SearchResult; an empty result is not an error
        """
        pattern = contains_pattern(search_query)
        with self._transaction("find_clients", QueryError) as cur:
            cur.execute(search_sql(self._postgres), (pattern,) * 4)
            rows = cur.fetchall()

        result = SearchResult(
            query=search_query,
            rows=[
                ClientRow(
                    id=row[0],
                    first_name=row[1],
                    last_name=row[2],
                    email=row[3],
                    phone=row[4],
                )
                for row in rows
            ],
        )
        logger.debug(f"find_clients({search_query!r}): {len(result.rows)} rows")
        return result
