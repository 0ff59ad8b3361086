"""Process-wide action store, chosen by STORE_BACKEND. Tests swap it with set_store()."""
import logging
import threading

from trello_scheduler.config import settings
from trello_scheduler.services.store.base import ActionStore

logger = logging.getLogger(__name__)

_store: ActionStore | None = None
_lock = threading.Lock()


def _build_store(backend: str) -> ActionStore:
    if backend == "memory":
        from trello_scheduler.services.store.memory import InMemoryActionStore

        return InMemoryActionStore()
    if backend == "sql":
        from trello_scheduler.db.session import get_session_factory
        from trello_scheduler.services.store.sql import SqlActionStore

        return SqlActionStore(get_session_factory())
    raise KeyError(f"Unknown store backend: {backend}. Available: ['memory', 'sql']")


def get_store() -> ActionStore:
    """Return the shared store, building it on first use."""
    global _store
    with _lock:
        if _store is None:
            _store = _build_store(settings.store_backend)
            logger.info("Action store backend: %s", _store.backend_id)
        return _store


def set_store(store: ActionStore | None) -> None:
    """Replace the shared store (None resets to the configured backend on next get_store)."""
    global _store
    with _lock:
        _store = store
