#!/usr/bin/env python3
"""
Client manager command line.

Usage:
    # SQLite (local dev)
    client-manager add-client Ivan Ivanov ivan@example.com
    client-manager find ivan

    # PostgreSQL (production)
    DATABASE_URL="dbname=clients user=app hostaddr=127.0.0.1 port=5432" client-manager demo
"""

import argparse
import logging

from client_manager.core.config import LOG_LEVELS, settings
from client_manager.core.errors import ClientStoreError
from client_manager.db.client_store import ClientStore
from client_manager.db.connection import DatabaseConfig

logger = logging.getLogger(__name__)

DEMO_CLIENT = ("Ivan", "Ivanov", "ivan@example.com")
DEMO_UPDATE = ("Petr", "Petrov", "petr@example.com")
DEMO_PHONE = "+1234567890"


def run_demo(store: ClientStore) -> int:
    """Walk through every store operation once, stopping at the first failure."""
    first_name, last_name, email = DEMO_CLIENT
    store.add_client(first_name, last_name, email)

    found = store.find_clients(email)
    for line in found.format_rows():
        print(line)
    if not found.found:
        logger.error(f"Demo aborted: newly added client {email} not found")
        return 1
    client_id = found.client_id

    store.add_phone(client_id, DEMO_PHONE)
    store.update_client(client_id, *DEMO_UPDATE)

    for line in store.find_clients(DEMO_UPDATE[1]).format_rows():
        print(line)

    store.delete_phone(client_id, DEMO_PHONE)
    store.delete_client(client_id)
    print(f"Demo finished for client {client_id}")
    return 0


def _run_command(store: ClientStore, args: argparse.Namespace) -> int:
    if args.command == "init":
        print("Schema ready")
    elif args.command == "add-client":
        client_id = store.add_client(args.first_name, args.last_name, args.email)
        print(client_id)
    elif args.command == "add-phone":
        store.add_phone(args.client_id, args.phone)
        print(f"Phone added for client {args.client_id}")
    elif args.command == "update-client":
        store.update_client(
            args.client_id, args.first_name, args.last_name, args.email
        )
        print(f"Client {args.client_id} updated")
    elif args.command == "delete-phone":
        store.delete_phone(args.client_id, args.phone)
        print(f"Phone removed from client {args.client_id}")
    elif args.command == "delete-client":
        deleted = store.delete_client(args.client_id)
        print(f"Deleted {deleted} client(s)")
    elif args.command == "find":
        for line in store.find_clients(args.query).format_rows():
            print(line)
    elif args.command == "demo":
        return run_demo(store)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage clients and their phones")
    parser.add_argument(
        "--database-url",
        default=None,
        help="PostgreSQL connection string (defaults to DATABASE_URL)",
    )
    parser.add_argument(
        "--db-path", default=None, help="SQLite database path for local use"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level",
    )

    pg = parser.add_argument_group(
        "connection parameters", "Used instead of a connection string when --dbname is given"
    )
    pg.add_argument("--dbname", default=None, help="Database name")
    pg.add_argument("--user", default=None, help="Role to connect as")
    pg.add_argument("--password", default=None, help="Role password")
    pg.add_argument("--hostaddr", default=None, help="Numeric host address")
    pg.add_argument("--port", type=int, default=None, help="Server port")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create tables if missing")

    p = sub.add_parser("add-client", help="Add a new client")
    p.add_argument("first_name")
    p.add_argument("last_name")
    p.add_argument("email")

    p = sub.add_parser("add-phone", help="Add a phone to a client")
    p.add_argument("client_id", type=int)
    p.add_argument("phone")

    p = sub.add_parser("update-client", help="Change a client's data")
    p.add_argument("client_id", type=int)
    p.add_argument("first_name")
    p.add_argument("last_name")
    p.add_argument("email")

    p = sub.add_parser("delete-phone", help="Remove a phone from a client")
    p.add_argument("client_id", type=int)
    p.add_argument("phone")

    p = sub.add_parser("delete-client", help="Delete a client and its phones")
    p.add_argument("client_id", type=int)

    p = sub.add_parser("find", help="Search by name, email or phone")
    p.add_argument("query")

    sub.add_parser("demo", help="Run the full add/find/update/delete sequence")

    return parser


def _connection_target(args: argparse.Namespace) -> str | DatabaseConfig | None:
    if args.database_url or not args.dbname:
        return args.database_url
    return DatabaseConfig(
        dbname=args.dbname,
        user=args.user,
        password=args.password,
        hostaddr=args.hostaddr,
        port=args.port,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level)

    try:
        target = _connection_target(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        with ClientStore(target, args.db_path) as store:
            store.ensure_schema()
            return _run_command(store, args)
    except ClientStoreError as e:
        logger.error(f"{args.command}: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
