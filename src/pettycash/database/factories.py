"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from pettycash.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "PETTYCASH_DB_PATH"


def default_data_dir() -> Path:
    """Return ~/.pettycash, creating it if needed."""
    data_dir = Path.home() / ".pettycash"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PETTYCASH_DB_PATH
            environment variable, then defaults to ~/.pettycash/pettycash.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = str(default_data_dir() / "pettycash.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
