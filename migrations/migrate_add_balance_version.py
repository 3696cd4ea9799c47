#!/usr/bin/env python3
"""Migration script to add balance_version column to users table.

Balance writes are guarded by a per-account version counter:
- balance_version (INTEGER, default=0)

Databases created before the counter existed get the column with every
account starting at version 0.

Usage:
    python migrations/migrate_add_balance_version.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import pettycash modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from pettycash.database.factories import create_sqlite_database


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> None:
    """Migrate database to add the balance_version column.

    Args:
        database_path: Path to database file. If None, uses default location.
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        engine = db.session_factory.kw["bind"]

        inspector = inspect(engine)
        if "users" not in inspector.get_table_names():
            raise Exception("Table 'users' does not exist. Please initialize the database schema first.")

        if column_exists(engine, "users", "balance_version"):
            print("Migration already applied: balance_version column exists in users table")
            return

        print("Starting migration: adding balance_version column...")
        with engine.begin() as conn:
            conn.execute(text("ALTER TABLE users ADD COLUMN balance_version INTEGER NOT NULL DEFAULT 0"))
            count = conn.execute(text("SELECT COUNT(*) FROM users")).scalar()
        print(f"  Added column: balance_version ({count} account(s) at version 0)")

        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to add balance_version column"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides PETTYCASH_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
