"""Construction of ledger stores from a file path or the environment."""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from ledgerkit.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "LEDGERKIT_DB_PATH"
MEMORY = ":memory:"


def default_database_path() -> Path:
    """Location used when neither an argument nor LEDGERKIT_DB_PATH is given."""
    return Path.home() / ".ledgerkit" / "ledgerkit.db"


def resolve_database_path(
    database_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """Pick the ledger file: explicit path, then LEDGERKIT_DB_PATH, then the default.

    The parent directory of the default location is created on demand.
    """
    if database_path:
        return database_path

    if environ is None:
        environ = os.environ
    from_env = environ.get(DB_PATH_ENV)
    if from_env:
        return from_env

    path = default_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    return str(path)


def create_sqlite_database(
    database_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> SQLAlchemyDatabase:
    """Create a SQLite-backed ledger store.

    Args:
        database_path: Ledger file, or ":memory:" for a throwaway store
        environ: Environment to consult for LEDGERKIT_DB_PATH (defaults to os.environ)

    Returns:
        SQLAlchemyDatabase with ``database_path`` recorded on it
    """
    path = resolve_database_path(database_path, environ)
    url = "sqlite://" if path == MEMORY else f"sqlite:///{path}"
    logger.debug("Opening ledger at %s", path)

    db = SQLAlchemyDatabase(url)
    db.database_path = path
    return db
