#!/usr/bin/env python3
"""
Quick checks so the scheduler can start. Run from the project root:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from the project root
root_dir = Path(__file__).resolve().parent.parent
os.chdir(root_dir)
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))


def main():
    errors = []

    # 1) .env
    env_file = root_dir / ".env"
    if not env_file.exists():
        print("WARN .env missing (defaults apply). Copy .env.example to .env to set TRELLO_API_KEY etc.")
    else:
        print("OK  .env exists")

    # 2) Trello key
    from trello_scheduler.config import settings

    if not settings.trello_api_key:
        errors.append("TRELLO_API_KEY is not set; every scheduled action will fail and be retried until it expires.")
        print("FAIL TRELLO_API_KEY missing")
    else:
        print("OK  TRELLO_API_KEY set")

    # 3) Store (SQL backend: connection + kv_entries table from alembic)
    if settings.store_backend == "sql":
        try:
            from sqlalchemy import inspect

            from trello_scheduler.db.session import get_engine
            from trello_scheduler.db.tables import ALL_TABLE_NAMES

            engine = get_engine()
            existing = set(inspect(engine).get_table_names())
            missing = [t for t in ALL_TABLE_NAMES if t not in existing]
            if missing:
                errors.append(f"Tables missing: {missing}. Run: alembic upgrade head")
                print("FAIL Tables missing:", missing)
            else:
                print("OK  Database connection and tables (DATABASE_URL)")
        except Exception as e:
            errors.append(f"Database: {e}")
            print("FAIL Database:", e)
    else:
        print("OK  Store backend: memory (actions are lost on restart)")

    # 4) App import (catches missing deps, bad imports)
    try:
        from trello_scheduler.main import app  # noqa: F401
        print("OK  App import (trello_scheduler.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn trello_scheduler.main:app --host 0.0.0.0 --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
