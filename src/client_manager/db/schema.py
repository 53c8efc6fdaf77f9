"""
Client Database Schema

Table definitions for clients and their phones.

Supports both:
- PostgreSQL (production): the persisted schema, SERIAL ids
- Local SQLite (development): same columns, AUTOINCREMENT ids
"""

CLIENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS clients (
  id SERIAL PRIMARY KEY,
  first_name TEXT NOT NULL,
  last_name TEXT NOT NULL,
  email TEXT NOT NULL
)
"""

PHONES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS phones (
  id SERIAL PRIMARY KEY,
  client_id INTEGER REFERENCES clients(id) ON DELETE CASCADE,
  phone_number TEXT NOT NULL
)
"""

# SQLite schema for local development.
# AUTOINCREMENT keeps ids from being reused after deletes, like SERIAL.
SQLITE_CLIENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS clients (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  first_name TEXT NOT NULL,
  last_name TEXT NOT NULL,
  email TEXT NOT NULL
)
"""

SQLITE_PHONES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS phones (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  client_id INTEGER REFERENCES clients(id) ON DELETE CASCADE,
  phone_number TEXT NOT NULL
)
"""

LIKE_ESCAPE = "\\"


def schema_statements(is_postgres: bool) -> list[str]:
    """Return CREATE TABLE statements in dependency order."""
    if is_postgres:
        return [CLIENTS_TABLE_SQL.strip(), PHONES_TABLE_SQL.strip()]
    return [SQLITE_CLIENTS_TABLE_SQL.strip(), SQLITE_PHONES_TABLE_SQL.strip()]


def sql_placeholder(is_postgres: bool) -> str:
    """Return parameter placeholder for the database driver."""
    return "%s" if is_postgres else "?"


def like_operator(is_postgres: bool) -> str:
    """Case-insensitive pattern operator (SQLite LIKE ignores ASCII case)."""
    return "ILIKE" if is_postgres else "LIKE"


def contains_pattern(query: str) -> str:
    """Build a bound LIKE pattern matching ``query`` as a literal substring.

    Wildcards in the query are escaped so that ``%`` and ``_`` typed by the
    user only ever match themselves.
    """
    escaped = (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def search_sql(is_postgres: bool) -> str:
    """SELECT joining clients to phones, filtered on all four text fields."""
    ph = sql_placeholder(is_postgres)
    op = like_operator(is_postgres)
    # Patterns are bound, never inlined: psycopg2 reads a bare % in the
    # statement text as a format marker.
    conditions = " OR ".join(
        f"{column} {op} {ph} ESCAPE '{LIKE_ESCAPE}'"
        for column in (
            "clients.first_name",
            "clients.last_name",
            "clients.email",
            "phones.phone_number",
        )
    )
    return (
        "SELECT clients.id, clients.first_name, clients.last_name, "
        "clients.email, phones.phone_number "
        "FROM clients LEFT JOIN phones ON clients.id = phones.client_id "
        f"WHERE {conditions} "
        "ORDER BY clients.id ASC, phones.id ASC"
    )
