"""
Time-bucket index: minute slot -> keys of actions due in that slot.

- minute_index(t) = floor(epoch_ms(t) / 60000). Pure; schedule, cancel and the dispatcher
  all bucket through it so an action is always found where it was filed.
- Bucket value = JSON array of action keys under "bucket_<minute>". An empty bucket is
  deleted, never stored.
- Membership updates are read-modify-write against a non-transactional store. Two writers
  on the same minute can lose one update; the lost action still expires with its own TTL.
  Removal re-reads the stored set and subtracts only the keys being removed, so a sweep's
  write-back does not clobber keys scheduled while it was executing.
"""
import json
import logging
import math
from datetime import datetime

from trello_scheduler.core.constants import BUCKET_KEY_PREFIX, BUCKET_MS
from trello_scheduler.services.scheduling.types import as_utc
from trello_scheduler.services.store.base import ActionStore

logger = logging.getLogger(__name__)


def minute_index(instant: datetime) -> int:
    """Bucket id for an instant: whole minutes since the epoch (UTC)."""
    ms = as_utc(instant).timestamp() * 1000
    return math.floor(ms / BUCKET_MS)


def bucket_key(minute: int) -> str:
    return f"{BUCKET_KEY_PREFIX}{minute}"


def load_members(store: ActionStore, minute: int) -> list[str] | None:
    """Keys in the bucket, or None when the bucket does not exist. A corrupt bucket reads as empty."""
    raw = store.get(bucket_key(minute))
    if raw is None:
        return None
    try:
        members = json.loads(raw)
    except ValueError:
        logger.warning("Bucket %s holds invalid JSON; treating as empty", minute)
        return []
    if not isinstance(members, list):
        logger.warning("Bucket %s is not a list; treating as empty", minute)
        return []
    return [str(k) for k in members]


def write_members(store: ActionStore, minute: int, members: list[str], ttl_seconds: int) -> None:
    """Persist the member set, or delete the bucket when it is empty."""
    if members:
        store.put(bucket_key(minute), json.dumps(members), ttl_seconds)
    else:
        store.delete(bucket_key(minute))


def add_member(store: ActionStore, minute: int, key: str, ttl_seconds: int) -> None:
    """Append key to the minute's bucket (absent bucket = empty). Not atomic."""
    members = load_members(store, minute) or []
    if key not in members:
        members.append(key)
    write_members(store, minute, members, ttl_seconds)


def remove_members(store: ActionStore, minute: int, keys: set[str], ttl_seconds: int) -> list[str]:
    """Drop keys from the bucket; delete it if nothing remains. Returns the members left. Not atomic."""
    members = load_members(store, minute)
    if members is None:
        return []
    remaining = [k for k in members if k not in keys]
    if len(remaining) != len(members) or not remaining:
        write_members(store, minute, remaining, ttl_seconds)
    return remaining
