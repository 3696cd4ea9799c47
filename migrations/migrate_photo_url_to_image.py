#!/usr/bin/env python3
"""Migration script to move receipt references from photo_url to image.

Older databases stored the receipt reference of an expense in a photo_url
column. The expenses table now has a single image column:
- If only photo_url exists, it is renamed to image.
- If both exist, photo_url values fill empty image values. The photo_url
  column is left in place and is no longer read.

Usage:
    python migrations/migrate_photo_url_to_image.py [--db-path PATH]
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
    """Migrate expense receipt references into the image column.

    Args:
        database_path: Path to database file. If None, uses default location.
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        engine = db.session_factory.kw["bind"]

        inspector = inspect(engine)
        if "expenses" not in inspector.get_table_names():
            raise Exception("Table 'expenses' does not exist. Please initialize the database schema first.")

        has_legacy = column_exists(engine, "expenses", "photo_url")
        has_image = column_exists(engine, "expenses", "image")

        if not has_legacy:
            print("Migration already applied: expenses table has no photo_url column")
            return

        print("Starting migration: moving photo_url to image...")
        with engine.begin() as conn:
            if not has_image:
                # RENAME COLUMN needs SQLite 3.25 or newer
                conn.execute(text("ALTER TABLE expenses RENAME COLUMN photo_url TO image"))
                print("  Renamed column: photo_url -> image")
            else:
                result = conn.execute(
                    text(
                        "UPDATE expenses SET image = photo_url "
                        "WHERE (image IS NULL OR image = '') AND photo_url IS NOT NULL"
                    )
                )
                print(f"  Copied {result.rowcount} receipt reference(s) from photo_url to image")

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
        description="Migrate expense receipts from photo_url to image"
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
