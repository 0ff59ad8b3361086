"""
Periodic dispatch: every DISPATCH_INTERVAL_SECONDS run one sweep over the due minute buckets.

The periodic job and GET /process share one in-process guard: if a sweep is still running
when the next trigger fires, that trigger is skipped instead of overlapping. Sweeps in
other processes are not coordinated; double execution across processes stays possible.
"""
import logging
import threading
from datetime import datetime, timezone

from trello_scheduler.core.errors import SweepInProgressError
from trello_scheduler.services.executor import ActionExecutor, get_executor
from trello_scheduler.services.scheduling.dispatcher import sweep
from trello_scheduler.services.scheduling.types import SweepResult
from trello_scheduler.services.store import ActionStore, get_store

logger = logging.getLogger(__name__)

_sweep_lock = threading.Lock()
_skipped_lock = threading.Lock()

# In-memory heartbeat for /health
_last_started_at: datetime | None = None
_last_finished_at: datetime | None = None
_last_error: str | None = None
_last_summary: dict | None = None
_skipped_count = 0


def run_sweep(
    store: ActionStore | None = None,
    executor: ActionExecutor | None = None,
    now: datetime | None = None,
) -> SweepResult:
    """One guarded sweep. Raises SweepInProgressError if another sweep in this process is running."""
    global _last_started_at, _last_finished_at, _last_error, _last_summary, _skipped_count
    if not _sweep_lock.acquire(blocking=False):
        with _skipped_lock:
            _skipped_count += 1
        raise SweepInProgressError()
    try:
        _last_started_at = datetime.now(timezone.utc)
        try:
            result = sweep(store or get_store(), executor or get_executor(), now=now)
        except Exception as e:
            _last_error = str(e)
            raise
        _last_error = None
        _last_summary = {
            "minute": result.minute,
            "processed": len(result.processed),
            "pending": len(result.pending),
            "errors": len(result.errors),
        }
        return result
    finally:
        _last_finished_at = datetime.now(timezone.utc)
        _sweep_lock.release()


def is_sweep_running() -> bool:
    return _sweep_lock.locked()


def run_dispatch_job() -> None:
    """APScheduler entry point. Never raises: skips on overlap, logs anything else."""
    try:
        run_sweep()
    except SweepInProgressError:
        logger.info("Dispatch tick skipped: previous sweep still running")
    except Exception as e:
        logger.exception("Dispatch job failed: %s", e)


def get_dispatch_heartbeat() -> dict:
    """Last sweep times, summary and error. In-memory only."""
    out = {
        "last_sweep_started_at": _last_started_at.isoformat() if _last_started_at else None,
        "last_sweep_finished_at": _last_finished_at.isoformat() if _last_finished_at else None,
        "last_sweep_error": _last_error,
        "last_sweep": _last_summary,
        "is_sweep_running": is_sweep_running(),
        "skipped_ticks": _skipped_count,
    }
    if _last_started_at and _last_finished_at and _last_finished_at >= _last_started_at:
        out["last_sweep_duration_seconds"] = (_last_finished_at - _last_started_at).total_seconds()
    else:
        out["last_sweep_duration_seconds"] = None
    return out
