"""
Schedule and cancel deferred card actions.

Both operations validate everything before the first store write, so a rejected call
leaves no partial state. The caller keeps the returned key; it is the only handle for cancel.
"""
import logging
import uuid
from datetime import datetime, timezone

from trello_scheduler.core.constants import (
    ACTION_KEY_PREFIX,
    CATCH_UP_MINUTES,
    KEY_SUFFIX_LENGTH,
    RETENTION_SECONDS,
)
from trello_scheduler.core.errors import MSG_MISSING_FIELDS, ScheduleRequestError
from trello_scheduler.services.scheduling import buckets
from trello_scheduler.services.scheduling.types import ActionKind, ScheduledAction, as_utc
from trello_scheduler.services.store.base import ActionStore

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def new_action_key(scheduled_at: datetime) -> str:
    """schedule_<scheduled epoch ms>_<random suffix>: sortable by due time, collision-safe across callers."""
    ms = int(as_utc(scheduled_at).timestamp() * 1000)
    return f"{ACTION_KEY_PREFIX}{ms}_{uuid.uuid4().hex[:KEY_SUFFIX_LENGTH]}"


def schedule(
    store: ActionStore,
    target_id: str | None,
    scheduled_at: datetime | None,
    credential: str | None,
    *,
    comment: str | None = None,
    mark_complete: bool | None = None,
    ttl_seconds: int = RETENTION_SECONDS,
    now: datetime | None = None,
) -> str:
    """
    Store an action for target_id due at scheduled_at and file it in its minute bucket.
    Returns the action key. Raises ScheduleRequestError before any write when input is
    incomplete or when scheduled_at falls behind the oldest bucket a sweep still reads.

    The bucket update is a read-modify-write; a concurrent schedule into the same minute
    can overwrite it (the action record itself is still written and expires with its TTL).
    """
    if _blank(target_id) or scheduled_at is None or _blank(credential):
        raise ScheduleRequestError(MSG_MISSING_FIELDS)
    kind = ActionKind.from_payload(comment, mark_complete)
    if kind is None:
        raise ScheduleRequestError("Nothing to schedule: provide a comment and/or markComplete")

    scheduled_at = as_utc(scheduled_at)
    created_at = as_utc(now) if now is not None else datetime.now(timezone.utc)
    minute = buckets.minute_index(scheduled_at)
    if minute < buckets.minute_index(created_at) - CATCH_UP_MINUTES:
        # No sweep reads buckets behind the catch-up window; the action would never run.
        raise ScheduleRequestError(f"scheduledTime is in the past: {scheduled_at.isoformat()}")
    action = ScheduledAction(
        key=new_action_key(scheduled_at),
        target_id=str(target_id).strip(),
        kind=kind,
        comment=comment or None,
        mark_complete=mark_complete,
        scheduled_at=scheduled_at,
        created_at=created_at,
        credential=credential,
        ttl_seconds=ttl_seconds,
    )
    store.put(action.key, action.to_json(), ttl_seconds)
    buckets.add_member(store, minute, action.key, ttl_seconds)
    logger.info(
        "Scheduled %s (%s) for target %s at %s (minute %s)",
        action.key,
        kind.value,
        action.target_id,
        scheduled_at.isoformat(),
        minute,
    )
    return action.key


def cancel(store: ActionStore, key: str | None, credential: str | None) -> bool:
    """
    Remove a scheduled action and its bucket membership. Idempotent: an action that already
    ran or expired is reported as cancelled too. The credential is required but not checked.

    A sweep that loaded the record before this delete lands may still execute it.
    """
    if _blank(key) or _blank(credential):
        raise ScheduleRequestError(MSG_MISSING_FIELDS)
    key = str(key).strip()

    raw = store.get(key)
    if raw is None:
        logger.info("Cancel %s: already gone", key)
        return True
    try:
        action = ScheduledAction.from_json(raw)
    except (ValueError, KeyError) as e:
        # Unreadable record: no bucket to fix up; the sweep drops the dangling key later.
        logger.warning("Cancel %s: unreadable record (%s); deleting it", key, e)
        store.delete(key)
        return True

    minute = buckets.minute_index(action.scheduled_at)
    buckets.remove_members(store, minute, {key}, action.ttl_seconds)
    store.delete(key)
    logger.info("Cancelled %s (minute %s)", key, minute)
    return True


def list_pending(store: ActionStore) -> list[dict]:
    """All live action records, oldest due first. Uses store.list: diagnostics only, never on the sweep path."""
    out = []
    for key in store.list(ACTION_KEY_PREFIX):
        raw = store.get(key)
        if raw is None:
            continue
        try:
            action = ScheduledAction.from_json(raw)
        except (ValueError, KeyError):
            out.append({"key": key, "error": "unreadable record"})
            continue
        out.append(
            {
                "key": key,
                "target_id": action.target_id,
                "kind": action.kind.value,
                "scheduled_at": action.scheduled_at.isoformat(),
                "minute": buckets.minute_index(action.scheduled_at),
            }
        )
    return out
