#!/usr/bin/env python3
"""
Run one dispatcher sweep against the configured store and print the summary.
Same semantics as GET /process. Useful when the server (and its periodic job) is not running:
  python scripts/run_sweep.py
"""
import json
import sys
from pathlib import Path

# scripts/ -> project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from trello_scheduler.core.errors import SweepInProgressError
from trello_scheduler.scheduler.dispatch_job import run_sweep


def main():
    try:
        result = run_sweep()
    except SweepInProgressError as e:
        print(str(e))
        return 1
    print(json.dumps(result.to_dict(), indent=2))
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
