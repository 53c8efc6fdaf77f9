"""
Client Manager Configuration

Environment-driven settings for the client store and its CLI.
Contains database, path and logging configuration.
"""

import os
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Application environment"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _get_environment() -> Environment:
    """Get and validate ENVIRONMENT variable."""
    env_value = os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value)
    try:
        return Environment(env_value.lower())
    except ValueError:
        raise RuntimeError(
            f"Invalid ENVIRONMENT value: '{env_value}'. "
            "Must be 'production', 'development', or 'test'."
        )


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_int(name: str, default: int) -> int:
    """Get a positive integer variable."""
    raw = os.getenv(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"Invalid {name} value: '{raw}'. Must be an integer.")
    if value <= 0:
        raise RuntimeError(f"Invalid {name} value: '{raw}'. Must be positive.")
    return value


def _get_log_level() -> str:
    """Get and validate LOG_LEVEL variable."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        raise RuntimeError(
            f"Invalid LOG_LEVEL value: '{level}'. Must be one of {', '.join(LOG_LEVELS)}."
        )
    return level


class Settings:
    """Client store configuration (database, paths, logging)"""

    # Project Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # Database
    # PostgreSQL (production): DATABASE_URL or PGDATABASE, read per connection
    # SQLite (development): Uses CLIENTS_DB path or default
    DB_PATH: str = os.getenv("CLIENTS_DB", str(DATA_DIR / "clients.db"))
    CONNECT_TIMEOUT: int = _get_int("CONNECT_TIMEOUT", 10)

    # Logging
    LOG_LEVEL: str = _get_log_level()

    # Environment
    ENVIRONMENT: Environment = _get_environment()


settings = Settings()
