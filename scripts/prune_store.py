#!/usr/bin/env python3
"""
Delete expired rows from the SQL action store (same as the hourly prune job).
  python scripts/prune_store.py
"""
import sys
from pathlib import Path

# scripts/ -> project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from trello_scheduler.services.store import get_store


def main():
    store = get_store()
    prune = getattr(store, "prune_expired", None)
    if prune is None:
        print(f"Store backend {store.backend_id} has nothing to prune.")
        return 0
    removed = prune()
    print(f"Done. Removed {removed} expired entries.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
