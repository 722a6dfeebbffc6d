"""
Create the Gated store tables.

Connects to DATABASE_URL (or the URL given as the first argument) and creates
any missing tables from gated/db/tables.py.
"""

import sys

from dotenv import load_dotenv
from sqlalchemy import inspect

from gated.db import DatabaseConnection
from gated.db.tables import metadata

# Load environment variables
load_dotenv()


def main():
    """Create missing tables and report what exists."""
    database_url = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        DatabaseConnection.initialize(database_url, create_tables=True)
    except Exception as e:
        print(f"❌ Failed to create tables: {e}")
        sys.exit(1)

    existing = set(inspect(DatabaseConnection.get_engine()).get_table_names())
    for table in metadata.sorted_tables:
        marker = "✅" if table.name in existing else "❌"
        print(f"{marker} {table.name}")

    DatabaseConnection.close()


if __name__ == "__main__":
    main()
