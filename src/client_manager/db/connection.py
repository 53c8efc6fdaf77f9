"""
Database Connection Module

Builds connection strings and opens the single connection a ClientStore owns.

Supports both:
- PostgreSQL (production): DATABASE_URL or an explicit connection string
- Local SQLite (development): CLIENTS_DB path or default
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Any

import psycopg2
from pydantic import BaseModel, Field

from client_manager.core.config import Environment, settings

logger = logging.getLogger(__name__)

DSN_KEYS = ("dbname", "user", "password", "hostaddr", "port")


def _quote_dsn_value(value: str) -> str:
    """Quote a libpq keyword value when it is empty or holds special chars."""
    if value and not any(ch in value for ch in " '\\\t\n"):
        return value
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class DatabaseConfig(BaseModel):
    """Structured PostgreSQL connection parameters"""

    dbname: str = Field(..., description="Database name")
    user: str | None = Field(None, description="Role to connect as")
    password: str | None = Field(None, description="Role password")
    hostaddr: str | None = Field(None, description="Numeric host address")
    port: int | None = Field(None, ge=1, le=65535, description="Server port")

    def to_dsn(self) -> str:
        """Render a libpq keyword/value connection string."""
        parts = []
        for key in DSN_KEYS:
            value = getattr(self, key)
            if value is None:
                continue
            parts.append(f"{key}={_quote_dsn_value(str(value))}")
        return " ".join(parts)

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Read the standard libpq environment variables."""
        port = os.getenv("PGPORT")
        return cls(
            dbname=os.getenv("PGDATABASE", "postgres"),
            user=os.getenv("PGUSER"),
            password=os.getenv("PGPASSWORD"),
            hostaddr=os.getenv("PGHOSTADDR"),
            port=int(port) if port else None,
        )


def resolve_database_url(
    database_url: "str | DatabaseConfig | None" = None,
) -> str | None:
    """Pick the PostgreSQL connection string, if any.

    Order: explicit string or DatabaseConfig, the DATABASE_URL variable,
    then the libpq PG* variables when PGDATABASE is set.
    """
    if isinstance(database_url, DatabaseConfig):
        return database_url.to_dsn()
    if database_url:
        return database_url
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url
    if os.getenv("PGDATABASE"):
        return DatabaseConfig.from_env().to_dsn()
    return None


def is_postgres_mode(database_url: "str | DatabaseConfig | None" = None) -> bool:
    """Check if we're using PostgreSQL."""
    return resolve_database_url(database_url) is not None


def get_connection(
    database_url: "str | DatabaseConfig | None" = None, db_path: str | None = None
) -> Any:
    """Get database connection (PostgreSQL or local SQLite).

    Args:
        database_url: Optional PostgreSQL connection string or DatabaseConfig.
            Falls back to DATABASE_URL, then the PG* variables.
        db_path: Optional path to SQLite database. Ignored in PostgreSQL mode.

    Returns a connection object.
    - If a PostgreSQL URL is available: connects with psycopg2
    - Otherwise: connects to local SQLite with foreign keys enforced and
      transactions opened explicitly by the caller (isolation_level=None)

    Raises:
        RuntimeError: If ENVIRONMENT is 'production' but no URL is set.
        OSError: If the SQLite directory cannot be created.
        psycopg2.Error / sqlite3.Error: If the driver cannot connect.
    """
    url = resolve_database_url(database_url)

    if settings.ENVIRONMENT == Environment.PRODUCTION and not url:
        raise RuntimeError(
            "DATABASE_URL is required in production environment. "
            "Set DATABASE_URL environment variable."
        )

    if url:
        return psycopg2.connect(url, connect_timeout=settings.CONNECT_TIMEOUT)

    path = db_path or os.getenv("CLIENTS_DB", settings.DB_PATH)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    # Autocommit mode: sqlite3 would otherwise commit DDL statement by
    # statement, so transactions are started with an explicit BEGIN.
    con = sqlite3.connect(
        path, timeout=settings.CONNECT_TIMEOUT, isolation_level=None
    )
    try:
        # SQLite leaves REFERENCES unenforced unless asked, per connection.
        con.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error:
        con.close()
        raise
    logger.debug(f"Opened SQLite database at {path}")
    return con
