"""
SQL-backed action store (SQLAlchemy, table kv_entries).

Each operation runs in its own short session and commits immediately: there is no
transaction spanning two calls, matching the contract the scheduler is written against.
TTL is enforced by filtering on expires_at when reading and by prune_expired() (periodic job).
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from trello_scheduler.core.errors import StoreError
from trello_scheduler.models.kv_entry import KvEntry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlActionStore:
    """Key-value entries with expiry in a relational table (Postgres in production, SQLite locally)."""

    backend_id = "sql"

    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] | None = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or _utcnow

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"store operation failed: {e}") from e
        finally:
            db.close()

    def get(self, key: str) -> str | None:
        with self._session() as db:
            row = (
                db.query(KvEntry.value)
                .filter(KvEntry.key == key, KvEntry.expires_at > self._clock())
                .first()
            )
            return row[0] if row else None

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._session() as db:
            db.merge(KvEntry(key=key, value=value, expires_at=expires_at))
            db.commit()

    def delete(self, key: str) -> None:
        with self._session() as db:
            db.query(KvEntry).filter(KvEntry.key == key).delete(synchronize_session=False)
            db.commit()

    def list(self, prefix: str = "") -> list[str]:
        with self._session() as db:
            q = db.query(KvEntry.key).filter(KvEntry.expires_at > self._clock())
            if prefix:
                q = q.filter(KvEntry.key.startswith(prefix, autoescape=True))
            return [k for (k,) in q.order_by(KvEntry.key.asc()).all()]

    def prune_expired(self) -> int:
        """Delete rows whose TTL has passed. Returns number of rows removed."""
        with self._session() as db:
            removed = (
                db.query(KvEntry)
                .filter(KvEntry.expires_at <= self._clock())
                .delete(synchronize_session=False)
            )
            db.commit()
        if removed:
            logger.info("Pruned %s expired store entries", removed)
        return removed
