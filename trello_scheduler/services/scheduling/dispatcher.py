"""
Dispatcher sweep: execute due actions found through the minute buckets.

One sweep looks at the bucket for the current minute, then the one before it (catch-up for
trigger jitter, clock skew and late writes). Per key, one at a time:
  - record gone (cancelled/expired)   -> drop key from bucket
  - due (scheduled_at <= now)         -> execute; success: delete record + drop key,
                                         failure: keep both, retried next sweep
  - not yet due                       -> keep key, do not execute
Failures never abort the sweep. Retries are unconditional until the record's TTL runs out.

Buckets older than current-1 are never read; an action stranded there (trigger outage longer
than one period) is not executed and disappears only by TTL expiry.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from trello_scheduler.core.constants import CATCH_UP_MINUTES, RETENTION_SECONDS
from trello_scheduler.services.scheduling import buckets
from trello_scheduler.services.scheduling.types import ScheduledAction, SweepResult, as_utc
from trello_scheduler.services.store.base import ActionStore

if TYPE_CHECKING:
    from trello_scheduler.services.executor import ActionExecutor

logger = logging.getLogger(__name__)


def swept_minutes(now: datetime) -> list[int]:
    """Minutes one sweep at `now` inspects, current first."""
    current = buckets.minute_index(now)
    return [current - offset for offset in range(CATCH_UP_MINUTES + 1)]


def sweep(store: ActionStore, executor: ActionExecutor, now: datetime | None = None) -> SweepResult:
    """Run one sweep over the current and catch-up buckets. Returns the summary; never raises per key."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    minutes = swept_minutes(now)
    result = SweepResult(timestamp=now, minute=minutes[0])
    for minute in minutes:
        _sweep_bucket(store, executor, minute, now, result)
    if result.processed or result.errors:
        logger.info(
            "Sweep minute %s: processed=%s pending=%s errors=%s dropped=%s",
            result.minute,
            len(result.processed),
            len(result.pending),
            len(result.errors),
            len(result.dropped),
        )
    else:
        logger.debug("Sweep minute %s: nothing due", result.minute)
    return result


def _sweep_bucket(
    store: ActionStore,
    executor: ActionExecutor,
    minute: int,
    now: datetime,
    result: SweepResult,
) -> None:
    try:
        members = buckets.load_members(store, minute)
    except Exception as e:
        logger.warning("Sweep: could not load bucket %s: %s", minute, e, exc_info=True)
        result.errors.append({"bucket": minute, "error": str(e)})
        return
    if members is None:
        return

    done: set[str] = set()
    for key in members:
        if _sweep_key(store, executor, key, now, result):
            done.add(key)

    if not done and members:
        return
    try:
        buckets.remove_members(store, minute, done, RETENTION_SECONDS)
    except Exception as e:
        # Keys already executed stay listed; their records are gone so the next sweep drops them.
        logger.warning("Sweep: could not write back bucket %s: %s", minute, e, exc_info=True)
        result.errors.append({"bucket": minute, "error": str(e)})


def _sweep_key(
    store: ActionStore,
    executor: ActionExecutor,
    key: str,
    now: datetime,
    result: SweepResult,
) -> bool:
    """Handle one bucket member. True when the key should leave the bucket."""
    try:
        raw = store.get(key)
    except Exception as e:
        logger.warning("Sweep: could not load %s (kept for retry): %s", key, e, exc_info=True)
        result.errors.append({"key": key, "error": str(e)})
        return False
    if raw is None:
        result.dropped.append(key)
        return True

    try:
        action = ScheduledAction.from_json(raw)
    except (ValueError, KeyError) as e:
        logger.warning("Sweep: unreadable record %s (kept until TTL): %s", key, e)
        result.errors.append({"key": key, "error": f"unreadable record: {e}"})
        return False

    if action.scheduled_at > now:
        result.pending.append({"key": key, "scheduledTime": action.scheduled_at.isoformat()})
        return False

    try:
        executor.execute(action)
    except Exception as e:
        logger.warning("Sweep: executing %s for target %s failed (kept for retry): %s", key, action.target_id, e)
        result.errors.append({"key": key, "error": str(e)})
        return False

    try:
        store.delete(key)
    except Exception as e:
        # Executed but still stored: the next sweep runs it again (at-least-once).
        logger.warning("Sweep: executed %s but could not delete it: %s", key, e, exc_info=True)
        result.errors.append({"key": key, "error": str(e)})
        return False
    result.processed.append(key)
    return True
