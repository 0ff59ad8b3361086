#!/usr/bin/env python3
"""
Completely clear the SQL action store (kv_entries). Every scheduled action and bucket is lost.
Run with the server stopped to avoid locks: python scripts/clear_store.py
"""
import sys
from pathlib import Path

# scripts/ -> project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import text

from trello_scheduler.db.session import get_engine
from trello_scheduler.db.tables import STORE_TABLE_NAMES


def main():
    engine = get_engine()
    print(f"Connecting to DB and clearing {', '.join(STORE_TABLE_NAMES)} ...")
    with engine.connect() as conn:
        for table in STORE_TABLE_NAMES:
            conn.execute(text(f"DELETE FROM {table}"))
        conn.commit()
    print("Done. Action store is empty.")


if __name__ == "__main__":
    main()
