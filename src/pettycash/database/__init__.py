"""Database layer for pettycash application."""

from pettycash.database.base import Database
from pettycash.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
